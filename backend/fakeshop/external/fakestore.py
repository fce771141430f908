"""HTTP client for the read-only FakeStore product catalog."""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from fakeshop.core.errors import NotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)
USER_AGENT = "FakeShop-Catalog/1.0"


class ExternalRating(BaseModel):
    rate: float | None = None
    count: int | None = None


class ExternalItem(BaseModel):
    """Raw product record as served by the external catalog."""

    model_config = ConfigDict(extra="ignore")

    # Any JSON value; items whose id is unusable are skipped downstream.
    id: Any = None
    title: str
    price: Decimal
    description: str = ""
    category: str = ""
    image: str = ""
    rating: ExternalRating | None = None

    @property
    def numeric_id(self) -> int | None:
        """The id as a positive integer, or None when it is not one."""
        if isinstance(self.id, bool):
            return None
        if isinstance(self.id, int):
            return self.id if self.id > 0 else None
        if isinstance(self.id, float):
            return int(self.id) if self.id.is_integer() and self.id > 0 else None
        if not isinstance(self.id, str):
            return None
        try:
            parsed = int(self.id.strip(), 10)
        except ValueError:
            return None
        return parsed if parsed > 0 else None


_items_adapter = TypeAdapter(list[ExternalItem])


class FakestoreClient:
    """Async wrapper around the FakeStore REST endpoints.

    Every failure is mapped onto the catalog error taxonomy: a 404 on a single
    lookup becomes ``NotFoundError``; timeouts, transport errors, other status
    codes and malformed payloads become ``UpstreamUnavailableError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, timeout: float | None) -> httpx.Response:
        start_time = time.time()
        try:
            response = await self._client.get(
                path, timeout=timeout if timeout is not None else self.timeout
            )
        except httpx.TimeoutException as e:
            logger.warning(f"FakeStore request {path} timed out: {e}")
            raise UpstreamUnavailableError(
                "Timed out fetching products from external API"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"FakeStore request {path} failed: {e}")
            raise UpstreamUnavailableError(
                "Failed to fetch products from external API"
            ) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"FakeStore GET {path}: status={response.status_code}, time={elapsed_ms}ms"
        )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        # FakeStore answers unknown ids with 200 and an empty body.
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(
                "External API returned a malformed response"
            ) from e

    async def fetch_all(self, timeout: float | None = None) -> list[ExternalItem]:
        """Fetch the full catalog snapshot, in catalog order."""
        response = await self._get("/products", timeout)
        if response.status_code != 200:
            logger.error(
                f"Failed to fetch products from FakeStore API: HTTP {response.status_code}"
            )
            raise UpstreamUnavailableError("Failed to fetch products from external API")

        try:
            return _items_adapter.validate_python(self._json(response))
        except ValidationError as e:
            logger.error(f"FakeStore product list failed validation: {e}")
            raise UpstreamUnavailableError(
                "External API returned a malformed product list"
            ) from e

    async def fetch_by_id(
        self, product_id: int, timeout: float | None = None
    ) -> ExternalItem:
        response = await self._get(f"/products/{product_id}", timeout)
        if response.status_code == 404:
            raise NotFoundError(f"Product with ID {product_id} not found")
        if response.status_code != 200:
            logger.error(
                f"Failed to fetch product {product_id} from FakeStore API: "
                f"HTTP {response.status_code}"
            )
            raise UpstreamUnavailableError("Failed to fetch product from external API")

        payload = self._json(response)
        if payload is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        try:
            return ExternalItem.model_validate(payload)
        except ValidationError as e:
            logger.error(f"FakeStore product {product_id} failed validation: {e}")
            raise UpstreamUnavailableError(
                "External API returned a malformed product"
            ) from e

    async def ping(self, timeout: float | None = None) -> int:
        """Return the status code of a cheap catalog request (readiness probe)."""
        response = await self._get("/products/1", timeout)
        return response.status_code
