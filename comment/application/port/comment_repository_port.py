from abc import ABC, abstractmethod
from datetime import datetime

from comment.domain.comment_analysis import CommentAnalysis
from comment.domain.comment_record import CommentRecord


class CommentRepositoryPort(ABC):
    @abstractmethod
    def insert(self, record: CommentRecord) -> CommentRecord:
        raise NotImplementedError

    @abstractmethod
    def update_analysis(self, record_id: str, analysis: CommentAnalysis, analyzed_at: datetime) -> None:
        raise NotImplementedError

    # Read-only queries for the dashboard
    @abstractmethod
    def list_comments(self, limit: int = 100, source: str | None = None) -> list[CommentRecord]:
        raise NotImplementedError

    @abstractmethod
    def fetch_stats(self) -> dict:
        raise NotImplementedError
