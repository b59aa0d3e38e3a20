import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .config import Settings, get_settings
from .schemas import BrandPayload, BrandState

logger = logging.getLogger(__name__)


class BrandStoreError(RuntimeError):
    pass


class BrandStoreClient:
    """
    Minimal client for the brand key-value store.

    The store exposes a single JSON document:
      - GET returns optional name / tagline / email / phone / logo_url
      - PUT accepts the same shape; the response body is ignored
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.request_timeout, transport=self._transport)

    async def fetch(self) -> BrandState:
        """
        Read the stored brand. Absent keys fall back to the defaults individually.
        """
        url = self.settings.brand_store_url
        logger.info("Loading brand from %s", url)
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise BrandStoreError(f"Could not load brand: {exc}") from exc

        if not data:
            return BrandState.defaults()
        if not isinstance(data, dict):
            raise BrandStoreError("Brand store returned a non-object payload")
        try:
            payload = BrandPayload.model_validate(data)
        except ValidationError as exc:
            raise BrandStoreError(f"Invalid brand payload: {exc}") from exc
        return payload.to_state()

    async def save(self, brand: BrandState) -> None:
        url = self.settings.brand_store_url
        body = BrandPayload.from_state(brand).model_dump(mode="json")
        logger.info("Saving brand name=%s to %s", brand.name, url)
        try:
            async with self._client() as client:
                response = await client.put(url, json=body)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Brand save failed: %s", exc)
            raise BrandStoreError(f"Could not save brand: {exc}") from exc
        logger.info("Brand saved status=%s", response.status_code)
