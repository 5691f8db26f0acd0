"""HTTP content service implementing the content port.

Intents that publish their speech remotely fetch it per request from
``{base_url}/intents/{intent_key}?userId=...`` with any extra parameters appended.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Mapping, Optional
from urllib.parse import quote, urlencode

import httpx

from skill_engine.core.config import config
from skill_engine.core.exceptions import ContentFetchError
from skill_engine.core.logging import get_logger
from skill_engine.core.ports import ContentPort

logger = get_logger(__name__)

# HTTP status threshold for error responses
_HTTP_ERROR_THRESHOLD = HTTPStatus.BAD_REQUEST


class ContentService(ContentPort):
    """Fetch intent text from a remote content host."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ) -> None:
        resolved = base_url or config.CONTENT_BASE_URL
        if not resolved:
            raise ContentFetchError("No content base URL configured (set CONTENT_BASE_URL).")
        self.base_url = resolved.rstrip("/")
        self.timeout = timeout if timeout is not None else config.CONTENT_TIMEOUT_SECONDS
        self._client = client

    def request_uri(
        self, intent_key: str, user_id: str, params: Optional[Mapping[str, str]] = None
    ) -> str:
        """Return the path and query used to fetch ``intent_key`` for ``user_id``."""
        query = {"userId": user_id}
        for key, value in (params or {}).items():
            query.setdefault(key, value)
        return f"/intents/{quote(intent_key, safe='')}?{urlencode(query)}"

    def build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"User-Agent": config.CONTENT_USER_AGENT},
        )

    def fetch(
        self, intent_key: str, user_id: str, params: Optional[Mapping[str, str]] = None
    ) -> str:
        uri = self.request_uri(intent_key, user_id, params)
        logger.info("[content] Fetching intent=%s", intent_key)
        try:
            if self._client is not None:
                response = self._client.get(f"{self.base_url}{uri}")
            else:
                with self.build_client() as client:
                    response = client.get(uri)
        except httpx.TimeoutException as exc:
            raise ContentFetchError(f"Timed out fetching content for {intent_key!r}") from exc
        except httpx.RequestError as exc:
            raise ContentFetchError(f"Request for {intent_key!r} content failed: {exc}") from exc

        if response.status_code >= _HTTP_ERROR_THRESHOLD:
            logger.warning(
                "[content] Fetch failed intent=%s status=%s body=%s",
                intent_key,
                response.status_code,
                response.text[:200] if response.text else "(no body)",
            )
            raise ContentFetchError(
                f"Content host returned {response.status_code} for {intent_key!r}"
            )
        return response.text.strip()


__all__ = ["ContentService"]
