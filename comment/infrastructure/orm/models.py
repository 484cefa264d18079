import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Index, String, Text

from config.database.session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class InstagramCommentORM(Base):
    __tablename__ = "instagram_comments"
    __table_args__ = (
        # analysis and analyzed_at are written together or not at all.
        CheckConstraint(
            "(analysis IS NULL AND analyzed_at IS NULL) OR (analysis IS NOT NULL AND analyzed_at IS NOT NULL)",
            name="ck_instagram_comments_analysis_pair",
        ),
        CheckConstraint("length(content) > 0", name="ck_instagram_comments_content"),
        Index("ix_instagram_comments_created_at", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    source = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    analysis = Column(JSON(none_as_null=True), nullable=True)
    analyzed_at = Column(DateTime(timezone=True), nullable=True)
