"""Remote classification service client."""

from typing import Any

import httpx
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pantryparse.collaborators.base import Classification, CollaboratorError, FoodClassifier
from pantryparse.config import get_settings
from pantryparse.logging_config import get_logger
from pantryparse.schemas import FoodCategory

logger = get_logger(__name__)


class HttpFoodClassifier(FoodClassifier):
    """
    Classify food names through a remote JSON service.

    The service receives ``{"names": [...]}`` and answers with
    ``{"items": [{"category": "Dairy", "emoji": "🥛"}, ...]}`` in the same order.
    """

    BACKOFF_BASE = 1
    BACKOFF_MAX = 30

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.url = f"{base_url.rstrip('/')}/classify" if base_url else settings.classify_url
        self.api_key = api_key if api_key is not None else settings.classifier_api_key
        self.timeout = timeout or settings.classifier_timeout
        self.max_retries = max_retries or settings.classifier_max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/json",
                "User-Agent": "pantryparse/1.0",
            }
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpFoodClassifier":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST with retry on timeouts and network errors."""
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
        )
        async def _do_request() -> httpx.Response:
            return await client.post(self.url, json=payload)

        try:
            response = await _do_request()
        except RetryError as e:
            logger.error(f"Request failed after {self.max_retries} retries: {self.url}")
            raise CollaboratorError(
                f"Request failed after {self.max_retries} retries",
                response=str(e),
            ) from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"API error {response.status_code} for {self.url}: {error_detail}")
            raise CollaboratorError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json() if response.text else {}
        except ValueError as e:
            raise CollaboratorError(f"Invalid JSON from classifier: {e}") from e
        if not isinstance(data, dict):
            raise CollaboratorError("Classifier response is not a JSON object")
        return data

    async def classify_batch(self, names: list[str]) -> list[Classification]:
        """
        Classify names with a single request.

        Raises:
            CollaboratorError: On transport failure, an error status or a
                response whose length does not match the request.
        """
        if not names:
            return []

        logger.debug(f"Classifying {len(names)} item(s) remotely")
        data = await self._request({"names": names})
        items = data.get("items") or []
        if len(items) != len(names):
            raise CollaboratorError(
                f"Classifier returned {len(items)} results for {len(names)} names",
                response=data,
            )

        return [
            (FoodCategory.from_label(item.get("category")), item.get("emoji") or None)
            for item in items
        ]
