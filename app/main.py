import logging
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from comment.adapter.input.web.comment_router import comment_router
from comment.adapter.input.web.pipeline_router import pipeline_router
from config.database.session import init_db_schema
from config.log_config import setup_logging
from config.settings import DatabaseSettings

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configures logging and creates the comment table when the database is configured.
    """
    setup_logging()
    if DatabaseSettings().is_configured:
        init_db_schema()
    else:
        logger.warning("Database is not configured; skipping schema creation")
    yield


app = FastAPI(title="Instagram Comment Insight Server", version="0.1.0", lifespan=lifespan)

origins_env = os.getenv("CORS_ORIGINS")
origins = [origin for origin in origins_env.split(",") if origin] if origins_env else ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pipeline_router, prefix="/pipeline")
app.include_router(comment_router, prefix="/comments")


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


def serve():
    import uvicorn

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
