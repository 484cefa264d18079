import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

from comment.domain.exceptions import InvalidConfigError

load_dotenv()


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_float(name: str, default: str) -> float:
    raw = _env(name, default)
    try:
        return float(raw)
    except ValueError:
        raise InvalidConfigError(name, raw, "a number") from None


def _env_int(name: str, default: str) -> int:
    raw = _env(name, default)
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigError(name, raw, "an integer") from None


def secret_values() -> list[str]:
    """Credentials straight from the environment, for masking when settings cannot be built."""
    return [_env("APIFY_API_TOKEN") or _env("APIFY_TOKEN"), _env("OPENAI_API_KEY"), _env("SQL_PASSWORD")]


@dataclass
class ApifySettings:
    api_token: str = field(default_factory=lambda: _env("APIFY_API_TOKEN") or _env("APIFY_TOKEN"))
    base_url: str = field(default_factory=lambda: _env("APIFY_BASE_URL", "https://api.apify.com/v2"))
    actor_id: str = field(default_factory=lambda: _env("APIFY_ACTOR_ID", "apidojo~instagram-comments-scraper"))
    timeout_seconds: float = field(default_factory=lambda: _env_float("APIFY_TIMEOUT_SECONDS", "30"))


@dataclass
class OpenAISettings:
    api_key: str = field(default_factory=lambda: _env("OPENAI_API_KEY"))
    model: str = field(default_factory=lambda: _env("OPENAI_MODEL", "gpt-5-mini"))
    temperature: float = field(default_factory=lambda: _env_float("OPENAI_TEMPERATURE", "1"))
    max_completion_tokens: int = field(default_factory=lambda: _env_int("OPENAI_MAX_COMPLETION_TOKENS", "500"))


@dataclass
class DatabaseSettings:
    # DATABASE_URL wins; otherwise the Supabase connection pieces are assembled.
    url: str = field(default_factory=lambda: _env("DATABASE_URL"))
    user: str = field(default_factory=lambda: _env("SQL_USER", "postgres"))
    password: str = field(default_factory=lambda: _env("SQL_PASSWORD"))
    host: str = field(default_factory=lambda: _env("SQL_HOST"))
    port: str = field(default_factory=lambda: _env("SQL_PORT", "5432"))
    database: str = field(default_factory=lambda: _env("SQL_DATABASE", "postgres"))
    echo: bool = field(default_factory=lambda: _env("SQL_ECHO", "false").lower() == "true")

    @property
    def is_configured(self) -> bool:
        return bool(self.url) or bool(self.host and self.password)


@dataclass
class PipelineSettings:
    poll_interval_seconds: float = field(default_factory=lambda: _env_float("PIPELINE_POLL_INTERVAL_SECONDS", "2"))
    max_polls: int = field(default_factory=lambda: _env_int("PIPELINE_MAX_POLLS", "60"))


def missing_pipeline_settings(
    apify: ApifySettings,
    openai: OpenAISettings,
    database: DatabaseSettings,
) -> list[str]:
    """Names of the required values that are not set, in a stable order."""
    missing: list[str] = []
    if not apify.api_token:
        missing.append("APIFY_API_TOKEN")
    if not openai.api_key:
        missing.append("OPENAI_API_KEY")
    if not database.url:
        if not database.host:
            missing.append("SQL_HOST")
        if not database.password:
            missing.append("SQL_PASSWORD")
    return missing
