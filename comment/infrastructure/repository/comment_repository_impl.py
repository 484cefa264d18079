from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from comment.application.port.comment_repository_port import CommentRepositoryPort
from comment.domain.comment_analysis import CommentAnalysis
from comment.domain.comment_record import CommentRecord
from comment.domain.exceptions import InsertFailedError, UpdateFailedError
from comment.infrastructure.orm.models import InstagramCommentORM
from config.database.session import get_session_factory


def _as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class CommentRepositoryImpl(CommentRepositoryPort):
    def __init__(self, session_factory: sessionmaker | None = None):
        self.session_factory = session_factory or get_session_factory()

    def insert(self, record: CommentRecord) -> CommentRecord:
        orm = InstagramCommentORM(
            source=record.source,
            content=record.content,
            created_at=record.created_at,
        )
        try:
            with self.session_factory() as db:
                db.add(orm)
                db.commit()
                db.refresh(orm)
                return self._to_domain(orm)
        except SQLAlchemyError as exc:
            raise InsertFailedError(f"Insert failed: {exc.__class__.__name__}: {exc}") from exc

    def update_analysis(self, record_id: str, analysis: CommentAnalysis, analyzed_at: datetime) -> None:
        try:
            with self.session_factory() as db:
                updated = (
                    db.query(InstagramCommentORM)
                    .filter(InstagramCommentORM.id == record_id)
                    .update(
                        {
                            InstagramCommentORM.analysis: analysis.to_dict(),
                            InstagramCommentORM.analyzed_at: analyzed_at,
                        },
                        synchronize_session=False,
                    )
                )
                db.commit()
        except SQLAlchemyError as exc:
            raise UpdateFailedError(f"Update failed for {record_id}: {exc.__class__.__name__}: {exc}") from exc
        if updated == 0:
            raise UpdateFailedError(f"Comment {record_id} not found")

    def list_comments(self, limit: int = 100, source: str | None = None) -> list[CommentRecord]:
        with self.session_factory() as db:
            query = db.query(InstagramCommentORM)
            if source:
                query = query.filter(InstagramCommentORM.source == source)
            rows = query.order_by(InstagramCommentORM.created_at.desc()).limit(limit).all()
            return [self._to_domain(row) for row in rows]

    def fetch_stats(self) -> dict:
        with self.session_factory() as db:
            total = db.query(func.count(InstagramCommentORM.id)).scalar() or 0
            analyzed = (
                db.query(func.count(InstagramCommentORM.id))
                .filter(InstagramCommentORM.analyzed_at.isnot(None))
                .scalar()
                or 0
            )
            last_analyzed_at = db.query(func.max(InstagramCommentORM.analyzed_at)).scalar()
            analyses = (
                db.query(InstagramCommentORM.analysis)
                .filter(InstagramCommentORM.analyzed_at.isnot(None))
                .all()
            )

        sentiments = Counter(
            row.analysis.get("sentiment")
            for row in analyses
            if isinstance(row.analysis, dict) and row.analysis.get("sentiment")
        )
        return {
            "total": total,
            "analyzed": analyzed,
            "last_analyzed_at": _as_utc(last_analyzed_at),
            "sentiments": dict(sentiments),
        }

    @staticmethod
    def _to_domain(orm: InstagramCommentORM) -> CommentRecord:
        analysis = None
        analyzed_at = None
        if orm.analysis is not None and orm.analyzed_at is not None:
            try:
                analysis = CommentAnalysis.from_payload(orm.analysis)
                analyzed_at = _as_utc(orm.analyzed_at)
            except ValueError:
                # Rows written by other tools may not follow the shape; show them as un-analyzed.
                analysis = None
        return CommentRecord(
            id=orm.id,
            source=orm.source,
            content=orm.content,
            created_at=_as_utc(orm.created_at),
            analysis=analysis,
            analyzed_at=analyzed_at,
        )
