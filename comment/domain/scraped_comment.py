from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

MILLISECOND_EPOCH_THRESHOLD = 1e11


def parse_timestamp(value) -> Optional[datetime]:
    """Parses the scraper's ISO-8601 / epoch timestamps into aware UTC datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch values past year 5138 in seconds are milliseconds.
        if abs(value) > MILLISECOND_EPOCH_THRESHOLD:
            value = value / 1000
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


@dataclass
class ScrapedComment:
    comment_id: Optional[str]
    message: str
    created_at: Optional[datetime]
    like_count: Optional[int] = None
    reply_count: Optional[int] = None
    username: Optional[str] = None

    @property
    def has_text(self) -> bool:
        return bool(self.message and self.message.strip())

    @classmethod
    def from_platform(cls, payload) -> "ScrapedComment":
        if not isinstance(payload, dict):
            payload = {}
        # Older actor builds emit "text" instead of "message".
        message = payload.get("message")
        if message is None:
            message = payload.get("text")
        owner = payload.get("user") or payload.get("owner") or {}
        return cls(
            comment_id=payload.get("id"),
            message=message if isinstance(message, str) else "",
            created_at=parse_timestamp(payload.get("createdAt")),
            like_count=payload.get("likeCount"),
            reply_count=payload.get("replyCount"),
            username=owner.get("username") if isinstance(owner, dict) else None,
        )
