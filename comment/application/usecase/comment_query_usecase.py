from datetime import datetime, timedelta, timezone

from comment.application.port.comment_repository_port import CommentRepositoryPort
from comment.domain.comment_analysis import SENTIMENTS

HEALTHY_WINDOW = timedelta(minutes=5)
WARNING_WINDOW = timedelta(minutes=30)


class CommentQueryUseCase:
    def __init__(self, repository: CommentRepositoryPort):
        # Read-only views backing the dashboard
        self.repository = repository

    def list_comments(self, limit: int = 100, source: str | None = None) -> list[dict]:
        return [record.to_dict() for record in self.repository.list_comments(limit=limit, source=source)]

    def system_health(self, now: datetime | None = None) -> dict:
        """
        Pipeline health as shown on the dashboard.
        - status is derived from how long ago the most recent analysis landed.
        """
        stats = self.repository.fetch_stats()
        total = stats.get("total", 0)
        analyzed = stats.get("analyzed", 0)
        last_analyzed_at = stats.get("last_analyzed_at")

        success_rate = f"{(analyzed / total) * 100:.1f}" if total > 0 else "0"

        return {
            "status": self._health_status(analyzed, last_analyzed_at, now or datetime.now(timezone.utc)),
            "total_records": total,
            "analyzed_records": analyzed,
            "success_rate": success_rate,
            "last_analyzed_at": last_analyzed_at.isoformat() if last_analyzed_at else None,
            "sentiments": self._normalize_sentiments(stats.get("sentiments", {})),
        }

    def sentiment_breakdown(self) -> dict:
        return self._normalize_sentiments(self.repository.fetch_stats().get("sentiments", {}))

    @staticmethod
    def _normalize_sentiments(counts: dict) -> dict:
        breakdown = {label: 0 for label in SENTIMENTS}
        for label, count in counts.items():
            if label in breakdown:
                breakdown[label] += count
        return breakdown

    @staticmethod
    def _health_status(analyzed: int, last_analyzed_at: datetime | None, now: datetime) -> str:
        if analyzed == 0:
            return "No Data"
        if last_analyzed_at is None:
            return "Unknown"
        if last_analyzed_at.tzinfo is None:
            last_analyzed_at = last_analyzed_at.replace(tzinfo=timezone.utc)
        elapsed = now - last_analyzed_at
        if elapsed < HEALTHY_WINDOW:
            return "Healthy"
        if elapsed < WARNING_WINDOW:
            return "Warning"
        return "Inactive"
