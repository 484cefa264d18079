from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from comment.application.port.comment_repository_port import CommentRepositoryPort
from comment.application.port.completion_client_port import CompletionClientPort
from comment.application.port.scraper_client_port import ScrapeRun, ScraperClientPort
from comment.domain.exceptions import InsertFailedError, LaunchFailedError, UpdateFailedError
from comment.domain.scraped_comment import ScrapedComment
from config.database.session import Base
from comment.infrastructure.orm.models import InstagramCommentORM  # noqa: F401

VALID_ANALYSIS = (
    '{"sentiment": "positive", "summary": "Loves the product.", '
    '"keywords": ["love", "product"], "category": "praise", "confidence_score": 0.9}'
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeScraper(ScraperClientPort):
    platform = "instagram"

    def __init__(self, items=None, statuses=None, run_id="run-1", launch_error=None):
        self.items = items or []
        self.statuses = list(statuses or ["SUCCEEDED"])
        self.run_id = run_id
        self.launch_error = launch_error
        self.started_with = None
        self.status_calls = 0
        self.fetched = False
        self.closed = False

    def start_run(self, post_url, max_items):
        self.started_with = (post_url, max_items)
        if self.launch_error:
            raise self.launch_error
        return ScrapeRun(run_id=self.run_id)

    def fetch_run_status(self, run_id):
        self.status_calls += 1
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    def fetch_comments(self, run):
        self.fetched = True
        return [ScrapedComment.from_platform(item) for item in self.items]

    def close(self):
        self.closed = True


class FakeCompletion(CompletionClientPort):
    """Returns queued responses in order; an Exception instance in the queue is raised."""

    def __init__(self, responses=None, default=VALID_ANALYSIS):
        self.responses = list(responses or [])
        self.default = default
        self.calls = []

    def complete(self, system_message, user_message):
        self.calls.append((system_message, user_message))
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        return response


class InMemoryRepository(CommentRepositoryPort):
    def __init__(self, fail_insert_for=(), fail_update_for=()):
        self.records = {}
        self.fail_insert_for = set(fail_insert_for)
        self.fail_update_for = set(fail_update_for)
        self.insert_calls = 0
        self.update_calls = 0

    def insert(self, record):
        self.insert_calls += 1
        if record.content in self.fail_insert_for:
            raise InsertFailedError("insert rejected")
        record.id = f"id-{self.insert_calls}"
        self.records[record.id] = record
        return record

    def update_analysis(self, record_id, analysis, analyzed_at):
        self.update_calls += 1
        record = self.records[record_id]
        if record.content in self.fail_update_for:
            raise UpdateFailedError("update rejected")
        record.attach_analysis(analysis, analyzed_at)

    def list_comments(self, limit=100, source=None):
        records = [r for r in self.records.values() if source is None or r.source == source]
        return sorted(records, key=lambda r: r.created_at, reverse=True)[:limit]

    def fetch_stats(self):
        analyzed = [r for r in self.records.values() if r.analysis]
        sentiments = {}
        for r in analyzed:
            sentiments[r.analysis.sentiment] = sentiments.get(r.analysis.sentiment, 0) + 1
        return {
            "total": len(self.records),
            "analyzed": len(analyzed),
            "last_analyzed_at": max((r.analyzed_at for r in analyzed), default=None),
            "sentiments": sentiments,
        }


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def launch_error():
    return LaunchFailedError("Apify actor run failed: HTTP 402 Payment Required")
