from comment.application.usecase.analysis_usecase import CommentAnalysisUseCase
from comment.application.usecase.pipeline_usecase import PipelineUseCase
from comment.domain.exceptions import ConfigMissingError
from comment.infrastructure.client.apify_client import ApifyClient
from comment.infrastructure.client.openai_completion_client import OpenAICompletionClient
from comment.infrastructure.repository.comment_repository_impl import CommentRepositoryImpl
from config.database.session import get_session_factory
from config.settings import (
    ApifySettings,
    DatabaseSettings,
    OpenAISettings,
    PipelineSettings,
    missing_pipeline_settings,
    secret_values,
)


def collect_secrets(
    apify: ApifySettings | None = None,
    openai: OpenAISettings | None = None,
    database: DatabaseSettings | None = None,
) -> list[str]:
    """Values that must never appear in a message shown to the caller."""
    env_token, env_key, env_password = secret_values()
    return [
        apify.api_token if apify else env_token,
        openai.api_key if openai else env_key,
        database.password if database else env_password,
    ]


def build_pipeline_usecase(
    apify: ApifySettings | None = None,
    openai: OpenAISettings | None = None,
    database: DatabaseSettings | None = None,
    pipeline: PipelineSettings | None = None,
) -> PipelineUseCase:
    """
    Wires the production collaborators. Settings are read at call time so credentials
    exported after startup are still picked up.
    Raises ConfigMissingError before any client is created when a required value is absent.
    """
    apify = apify or ApifySettings()
    openai = openai or OpenAISettings()
    database = database or DatabaseSettings()
    pipeline = pipeline or PipelineSettings()

    missing = missing_pipeline_settings(apify, openai, database)
    if missing:
        raise ConfigMissingError(missing)

    return PipelineUseCase(
        scraper=ApifyClient(apify),
        analysis_usecase=CommentAnalysisUseCase(OpenAICompletionClient(openai)),
        repository=CommentRepositoryImpl(get_session_factory(database)),
        poll_interval=pipeline.poll_interval_seconds,
        max_polls=pipeline.max_polls,
    )
