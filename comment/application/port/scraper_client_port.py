from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from comment.domain.scraped_comment import ScrapedComment


@dataclass
class ScrapeRun:
    run_id: str
    status: Optional[str] = None
    dataset_id: Optional[str] = None


class ScraperClientPort(ABC):
    platform: str

    @abstractmethod
    def start_run(self, post_url: str, max_items: int) -> ScrapeRun:
        raise NotImplementedError

    @abstractmethod
    def fetch_run_status(self, run_id: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def fetch_comments(self, run: ScrapeRun) -> list[ScrapedComment]:
        raise NotImplementedError

    def close(self) -> None:
        """Releases connections held by the client."""
