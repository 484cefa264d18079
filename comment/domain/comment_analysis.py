from dataclasses import dataclass, field

SENTIMENTS = ("positive", "negative", "neutral")


@dataclass
class CommentAnalysis:
    sentiment: str
    summary: str
    keywords: list[str] = field(default_factory=list)
    category: str = ""
    confidence_score: float = 0.0

    @classmethod
    def from_payload(cls, payload) -> "CommentAnalysis":
        """
        Validates a model response already decoded from JSON.
        Raises ValueError describing the first field that does not match the expected shape.
        """
        if not isinstance(payload, dict):
            raise ValueError("analysis must be a JSON object")

        sentiment = payload.get("sentiment")
        if not isinstance(sentiment, str) or sentiment.strip().lower() not in SENTIMENTS:
            raise ValueError(f"sentiment must be one of {', '.join(SENTIMENTS)}")

        summary = payload.get("summary")
        if not isinstance(summary, str):
            raise ValueError("summary must be a string")

        keywords = payload.get("keywords")
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise ValueError("keywords must be a list of strings")

        category = payload.get("category")
        if not isinstance(category, str):
            raise ValueError("category must be a string")

        score = payload.get("confidence_score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError("confidence_score must be a number")
        if not 0.0 <= float(score) <= 1.0:
            raise ValueError("confidence_score must be between 0 and 1")

        return cls(
            sentiment=sentiment.strip().lower(),
            summary=summary,
            keywords=list(keywords),
            category=category,
            confidence_score=float(score),
        )

    def to_dict(self) -> dict:
        return {
            "sentiment": self.sentiment,
            "summary": self.summary,
            "keywords": list(self.keywords),
            "category": self.category,
            "confidence_score": self.confidence_score,
        }
