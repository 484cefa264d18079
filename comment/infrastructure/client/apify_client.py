import logging

import httpx

from comment.application.port.scraper_client_port import ScrapeRun, ScraperClientPort
from comment.domain.exceptions import LaunchFailedError, ScraperRequestError, mask_secrets
from comment.domain.scraped_comment import ScrapedComment
from config.settings import ApifySettings

logger = logging.getLogger(__name__)


class ApifyClient(ScraperClientPort):
    platform = "instagram"

    def __init__(self, settings: ApifySettings, http_client: httpx.Client | None = None):
        # Talks to the Apify REST API v2; every error message is scrubbed of the API token.
        self.settings = settings
        self.http = http_client or httpx.Client(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
        )
        self.http.headers["Authorization"] = f"Bearer {settings.api_token}"

    def start_run(self, post_url: str, max_items: int) -> ScrapeRun:
        payload = {"startUrls": [{"url": post_url}], "maxItems": max_items}
        try:
            resp = self.http.post(f"/acts/{self.settings.actor_id}/runs", json=payload)
        except httpx.RequestError as exc:
            raise LaunchFailedError(self._scrub(f"Apify actor run failed: {exc}")) from exc
        if resp.is_error:
            logger.error("Apify actor run failed: %s", self._scrub(resp.text[:500]))
            raise LaunchFailedError(f"Apify actor run failed: HTTP {resp.status_code} {resp.reason_phrase}")

        data = self._data(resp, LaunchFailedError)
        run_id = data.get("id")
        if not run_id:
            raise LaunchFailedError("Failed to get run ID from actor call")
        return ScrapeRun(
            run_id=run_id,
            status=data.get("status"),
            dataset_id=data.get("defaultDatasetId"),
        )

    def fetch_run_status(self, run_id: str) -> str:
        resp = self._get(f"/actor-runs/{run_id}")
        return self._data(resp, ScraperRequestError).get("status")

    def fetch_comments(self, run: ScrapeRun) -> list[ScrapedComment]:
        resp = self._get(f"/actor-runs/{run.run_id}/dataset/items")
        try:
            items = resp.json()
        except ValueError as exc:
            raise ScraperRequestError("Apify dataset response is not JSON") from exc
        if not isinstance(items, list):
            raise ScraperRequestError("Apify dataset response is not a list")
        # Non-object items still count as fetched and map to an empty comment.
        return [ScrapedComment.from_platform(item) for item in items]

    def close(self) -> None:
        self.http.close()

    def _get(self, path: str) -> httpx.Response:
        try:
            resp = self.http.get(path)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ScraperRequestError(self._scrub(f"Apify request failed: {exc}")) from exc
        return resp

    @staticmethod
    def _data(resp: httpx.Response, error_cls) -> dict:
        try:
            body = resp.json()
        except ValueError as exc:
            raise error_cls("Apify response is not JSON") from exc
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise error_cls("Apify response has no data object")
        return data

    def _scrub(self, message: str) -> str:
        return mask_secrets(message, [self.settings.api_token])
