import urllib.parse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config.settings import DatabaseSettings

Base = declarative_base()


def build_database_url(settings: DatabaseSettings) -> str:
    # Supabase hands out the same SQL_* pieces; DATABASE_URL overrides them when present.
    if settings.url:
        return settings.url
    password = urllib.parse.quote_plus(settings.password)
    return (
        f"postgresql+psycopg2://{settings.user}:{password}"
        f"@{settings.host}:{settings.port}/{settings.database}"
    )


# One engine per database URL, created on first use so importing never needs a live database.
_engines: dict[str, Engine] = {}
_session_factories: dict[str, sessionmaker] = {}


def get_engine(settings: DatabaseSettings | None = None) -> Engine:
    settings = settings or DatabaseSettings()
    url = build_database_url(settings)
    if url not in _engines:
        _engines[url] = create_engine(
            url,
            echo=settings.echo,
            pool_pre_ping=True,
        )
    return _engines[url]


def get_session_factory(settings: DatabaseSettings | None = None) -> sessionmaker:
    settings = settings or DatabaseSettings()
    url = build_database_url(settings)
    if url not in _session_factories:
        _session_factories[url] = sessionmaker(autocommit=False, autoflush=False, bind=get_engine(settings))
    return _session_factories[url]


def init_db_schema(engine: Engine | None = None):
    """
    Creates the comment table on startup when it does not exist yet.
    """
    # ORM models must be imported so they register on Base.metadata.
    from comment.infrastructure.orm.models import InstagramCommentORM  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
