from fastapi import APIRouter, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from comment.application.usecase.comment_query_usecase import CommentQueryUseCase
from comment.infrastructure.repository.comment_repository_impl import CommentRepositoryImpl

comment_router = APIRouter(tags=["comments"])

_usecase: CommentQueryUseCase | None = None


def get_query_usecase() -> CommentQueryUseCase:
    # The repository binds the database engine on first use, not at import.
    global _usecase
    if _usecase is None:
        _usecase = CommentQueryUseCase(CommentRepositoryImpl())
    return _usecase


@comment_router.get("")
def list_comments(
    limit: int = Query(default=100, ge=1, le=500),
    source: str | None = Query(default=None, description="Only comments scraped from this post URL"),
):
    """
    Stored comments, newest first.
    """
    items = get_query_usecase().list_comments(limit=limit, source=source)
    return JSONResponse(jsonable_encoder({"items": items, "count": len(items)}))


@comment_router.get("/health")
def get_system_health():
    """
    Record totals, analysis success rate and freshness of the latest analysis.
    """
    return JSONResponse(jsonable_encoder(get_query_usecase().system_health()))


@comment_router.get("/sentiments")
def get_sentiment_breakdown():
    return JSONResponse(jsonable_encoder(get_query_usecase().sentiment_breakdown()))
