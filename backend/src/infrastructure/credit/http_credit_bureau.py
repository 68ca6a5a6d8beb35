"""
Credit bureau client over HTTP with an API key and retry on 429/5xx.
"""

import asyncio
import time
from typing import Optional

import requests

from application.interfaces import ICreditBureau
from infrastructure.config import get_logger

logger = get_logger("HttpCreditBureau")


class CreditBureauError(Exception):
    """Raised when the bureau cannot return a usable score."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class HttpCreditBureau(ICreditBureau):
    """
    HTTP client for a credit score endpoint.

    POSTs ``{"identifier": ...}`` to ``{base_url}/scores`` with an
    ``X-API-Key`` header and reads ``score`` from the JSON body. The
    blocking request runs in a worker thread.
    """

    MAX_RETRIES = 2
    BACKOFF_FACTOR = 1  # seconds: 1, 2
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 10.0):
        if not base_url:
            raise CreditBureauError("Credit bureau URL not configured. Set CREDIT_BUREAU_URL.")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })
        if api_key:
            self.session.headers["X-API-Key"] = api_key

    async def fetch_credit_score(self, identifier: str) -> int:
        return await asyncio.to_thread(self._fetch, identifier)

    def _fetch(self, identifier: str) -> int:
        url = f"{self.base_url}/scores"

        for attempt in range(self.MAX_RETRIES + 1):
            try:
                response = self.session.post(url, json={"identifier": identifier}, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt < self.MAX_RETRIES:
                    wait = self.BACKOFF_FACTOR * (2 ** attempt)
                    logger.warning(
                        "Credit bureau request failed (attempt %d/%d), retrying in %ds: %s",
                        attempt + 1, self.MAX_RETRIES + 1, wait, exc,
                    )
                    time.sleep(wait)
                    continue
                raise CreditBureauError(f"Request failed after retries: {exc}") from exc

            if response.status_code in self.RETRYABLE_STATUS_CODES and attempt < self.MAX_RETRIES:
                wait = self.BACKOFF_FACTOR * (2 ** attempt)
                logger.warning(
                    "Credit bureau returned %d (attempt %d/%d), retrying in %ds",
                    response.status_code, attempt + 1, self.MAX_RETRIES + 1, wait,
                )
                time.sleep(wait)
                continue

            if response.status_code >= 400:
                raise CreditBureauError(
                    f"Credit bureau returned {response.status_code}: {response.text[:200]}",
                    status_code=response.status_code,
                )

            try:
                return int(response.json()["score"])
            except (ValueError, KeyError, TypeError) as exc:
                raise CreditBureauError(f"Malformed credit bureau response: {exc}") from exc

        raise CreditBureauError("Request failed: max retries exceeded")
