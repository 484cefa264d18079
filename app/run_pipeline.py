import argparse
import logging
import sys

from app.pipeline_factory import build_pipeline_usecase, collect_secrets
from comment.domain.exceptions import ConfigMissingError, PipelineError, mask_secrets
from config.log_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="comment-pipeline",
        description="Scrape an Instagram post's comments, analyze them and store the results",
    )
    parser.add_argument("post_url", metavar="postUrl", help="Instagram post URL")
    parser.add_argument("max_items", metavar="maxItems", type=int, nargs="?", default=10, help="Max comments to fetch (default 10)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        with build_pipeline_usecase() as usecase:
            result = usecase.run(args.post_url, args.max_items)
    except ConfigMissingError as exc:
        logger.error("%s. Copy .env.example to .env and fill in your values.", exc)
        return 1
    except PipelineError as exc:
        logger.error("Pipeline error: %s", mask_secrets(str(exc), collect_secrets()))
        return 1

    print(f"Pipeline complete. Processed {result.processed_count} of {result.total_fetched} comments.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
