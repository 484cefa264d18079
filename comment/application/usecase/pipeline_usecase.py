import logging
import time
from datetime import datetime, timezone
from typing import Callable

from comment.application.port.comment_repository_port import CommentRepositoryPort
from comment.application.port.scraper_client_port import ScrapeRun, ScraperClientPort
from comment.application.usecase.analysis_usecase import CommentAnalysisUseCase
from comment.domain.comment_record import CommentRecord
from comment.domain.exceptions import (
    CommentProcessingError,
    InvalidInputError,
    LaunchFailedError,
    ScrapeNotSucceededError,
    ScraperRequestError,
)
from comment.domain.pipeline_result import PipelineResult
from comment.domain.scraped_comment import ScrapedComment

logger = logging.getLogger(__name__)

STATUS_SUCCEEDED = "SUCCEEDED"
# READY is the queued state Apify reports before the actor starts running.
IN_PROGRESS_STATUSES = ("READY", "RUNNING")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PipelineUseCase:
    """
    Scrapes the comments of one post, analyzes each with the completion model and persists them.

    Collaborators are injected so the same runner serves the HTTP trigger, the CLI and tests.
    Comments are handled one at a time; a failure on one comment never stops the others.
    """

    def __init__(
        self,
        scraper: ScraperClientPort,
        analysis_usecase: CommentAnalysisUseCase,
        repository: CommentRepositoryPort,
        poll_interval: float = 2.0,
        max_polls: int = 60,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.scraper = scraper
        self.analysis_usecase = analysis_usecase
        self.repository = repository
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.sleep = sleep
        self.clock = clock

    def __enter__(self) -> "PipelineUseCase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        try:
            self.scraper.close()
        finally:
            self.analysis_usecase.close()

    def run(self, post_url: str, max_items: int) -> PipelineResult:
        post_url = self._validate(post_url, max_items)

        run = self._launch(post_url, max_items)
        self._wait_for_success(run)

        comments = self.scraper.fetch_comments(run)
        logger.info("Fetched %d comments for run %s", len(comments), run.run_id)

        result = PipelineResult(total_fetched=len(comments), run_id=run.run_id)
        for comment in comments:
            if not comment.has_text:
                result.skipped_empty += 1
                continue
            if self._process_comment(post_url, comment):
                result.processed_count += 1
            else:
                result.failed_count += 1

        logger.info(
            "Pipeline complete. Processed %d of %d comments (%d empty, %d failed).",
            result.processed_count,
            result.total_fetched,
            result.skipped_empty,
            result.failed_count,
        )
        return result

    @staticmethod
    def _validate(post_url: str, max_items: int) -> str:
        if not isinstance(post_url, str) or not post_url.strip():
            raise InvalidInputError("postUrl is required")
        if isinstance(max_items, bool) or not isinstance(max_items, int) or max_items < 1:
            raise InvalidInputError("maxItems must be a positive integer")
        return post_url.strip()

    def _launch(self, post_url: str, max_items: int) -> ScrapeRun:
        logger.info("Starting scrape run for %s (maxItems=%d)", post_url, max_items)
        try:
            run = self.scraper.start_run(post_url, max_items)
        except LaunchFailedError:
            raise
        except ScraperRequestError as exc:
            raise LaunchFailedError(str(exc)) from exc
        if run is None or not run.run_id:
            raise LaunchFailedError("Failed to get run ID from actor call")
        logger.info("Run ID: %s", run.run_id)
        return run

    def _wait_for_success(self, run: ScrapeRun) -> None:
        status = "RUNNING"
        polls = 0
        while status in IN_PROGRESS_STATUSES and polls < self.max_polls:
            self.sleep(self.poll_interval)
            status = self.scraper.fetch_run_status(run.run_id)
            polls += 1
            logger.info("Run status: %s (poll %d/%d)", status, polls, self.max_polls)

        run.status = status
        if status != STATUS_SUCCEEDED:
            raise ScrapeNotSucceededError(status)

    def _process_comment(self, post_url: str, comment: ScrapedComment) -> bool:
        try:
            record = self.repository.insert(
                CommentRecord(
                    source=post_url,
                    content=comment.message,
                    created_at=comment.created_at or self.clock(),
                )
            )
        except CommentProcessingError as exc:
            logger.error("Insert error: %s", exc)
            return False
        except Exception:
            logger.exception("Error inserting comment %s", comment.comment_id)
            return False

        logger.info("Analyzing comment %s...", record.id)
        try:
            analysis = self.analysis_usecase.analyze(comment.message)
            self.repository.update_analysis(record.id, analysis, self.clock())
        except CommentProcessingError as exc:
            logger.warning("Skipping comment %s (%s): %s", record.id, exc.error_type, exc)
            return False
        except Exception:
            logger.exception("Error processing comment %s", record.id)
            return False

        logger.info("Successfully analyzed comment %s", record.id)
        return True
