import json
import logging

from comment.application.port.completion_client_port import CompletionClientPort
from comment.domain.comment_analysis import CommentAnalysis
from comment.domain.exceptions import CompletionFailedError, ParseFailedError

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are a professional text analyst. Always respond with valid JSON only."

ANALYSIS_PROMPT = """You are an expert text analyst. Analyze the following Instagram comment and return a structured JSON response with these exact fields:

{
  "sentiment": "positive" | "negative" | "neutral",
  "summary": "A brief 1-2 sentence summary of the comment",
  "keywords": ["array", "of", "key", "terms"],
  "category": "The primary category (e.g., product_feedback, question, complaint, praise, general_comment)",
  "confidence_score": 0.0-1.0 (your confidence in this analysis)
}

Comment to analyze: {TEXT_TO_ANALYZE}

Return ONLY the JSON object, no additional text."""

PLACEHOLDER = "{TEXT_TO_ANALYZE}"


class CommentAnalysisUseCase:
    def __init__(self, completion_client: CompletionClientPort):
        self.completion_client = completion_client

    @staticmethod
    def build_prompt(text: str) -> str:
        # Only the first placeholder is filled so comment text containing the token stays literal.
        return ANALYSIS_PROMPT.replace(PLACEHOLDER, text, 1)

    def close(self) -> None:
        self.completion_client.close()

    def analyze(self, text: str) -> CommentAnalysis:
        prompt = self.build_prompt(text)
        raw = self.completion_client.complete(SYSTEM_MESSAGE, prompt)
        logger.debug("Raw completion response: %r", raw)
        if raw is None or not raw.strip():
            raise CompletionFailedError("Completion response is empty")
        return self.parse(raw)

    @staticmethod
    def parse(raw: str) -> CommentAnalysis:
        try:
            payload = json.loads(raw.strip())
        except json.JSONDecodeError as exc:
            raise ParseFailedError(f"Response is not valid JSON: {exc.msg}") from exc
        try:
            return CommentAnalysis.from_payload(payload)
        except ValueError as exc:
            raise ParseFailedError(f"Response does not match the analysis shape: {exc}") from exc
