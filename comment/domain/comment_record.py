from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from comment.domain.comment_analysis import CommentAnalysis


@dataclass
class CommentRecord:
    source: str
    content: str
    created_at: datetime
    id: Optional[str] = None
    analysis: Optional[CommentAnalysis] = None
    analyzed_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.content or not self.content.strip():
            raise ValueError("content must not be empty")
        if (self.analysis is None) != (self.analyzed_at is None):
            raise ValueError("analysis and analyzed_at must be set together")

    @property
    def is_analyzed(self) -> bool:
        return self.analysis is not None

    def attach_analysis(self, analysis: CommentAnalysis, analyzed_at: datetime) -> None:
        self.analysis = analysis
        self.analyzed_at = analyzed_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "content": self.content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }
