from dataclasses import dataclass
from typing import Optional


@dataclass
class PipelineResult:
    processed_count: int = 0
    total_fetched: int = 0
    skipped_empty: int = 0
    failed_count: int = 0
    run_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "processedCount": self.processed_count,
            "totalFetched": self.total_fetched,
            "skippedEmpty": self.skipped_empty,
            "failedCount": self.failed_count,
            "runId": self.run_id,
        }
