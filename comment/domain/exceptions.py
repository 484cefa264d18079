from typing import Iterable

MASK = "[MASKED_TOKEN]"


def mask_secrets(message: str, secrets: Iterable[str | None]) -> str:
    """Replaces every occurrence of each non-empty secret with a fixed mask."""
    for secret in secrets:
        if secret:
            message = message.replace(secret, MASK)
    return message


class PipelineError(Exception):
    """Base for every error raised by the scrape-analyze-persist pipeline."""

    error_type = "pipeline_failed"


# Fatal: abort the whole invocation before or instead of processing comments.

class ConfigMissingError(PipelineError):
    error_type = "config_missing"

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class InvalidConfigError(PipelineError):
    error_type = "config_invalid"

    def __init__(self, name: str, value: str, expected: str):
        self.name = name
        super().__init__(f"Invalid configuration: {name}={value!r} is not {expected}")


class InvalidInputError(PipelineError):
    error_type = "invalid_input"


class LaunchFailedError(PipelineError):
    error_type = "launch_failed"


class ScrapeNotSucceededError(PipelineError):
    error_type = "scraping_failed"

    def __init__(self, status: str | None):
        self.status = status
        super().__init__(f"Actor run did not succeed. Status: {status}")


class ScraperRequestError(PipelineError):
    error_type = "scraper_request_failed"


# Per comment: logged and skipped, never raised out of the run.

class CommentProcessingError(PipelineError):
    pass


class InsertFailedError(CommentProcessingError):
    error_type = "insert_failed"


class CompletionFailedError(CommentProcessingError):
    error_type = "completion_failed"


class ParseFailedError(CommentProcessingError):
    error_type = "parse_failed"


class UpdateFailedError(CommentProcessingError):
    error_type = "update_failed"
