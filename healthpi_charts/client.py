# healthpi_charts/client.py
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Union

import httpx
import structlog

from .config import Settings, get_settings
from .errors import FetchError, MalformedRecordError
from .models import Field, Record

logger = structlog.get_logger()


# --------------------------- Helpers ---------------------------

def select_param(fields: Sequence[Union[str, Field]]) -> str:
    """Comma-joined ``select`` value; keeps the caller's order."""
    if isinstance(fields, (str, Field)):
        fields = [fields]
    parsed = [Field.parse(f) for f in fields]
    if not parsed:
        raise ValueError("at least one field must be selected")
    return ",".join(f.value for f in parsed)


def _parse_records(r: httpx.Response) -> List[Record]:
    try:
        js = r.json()
    except ValueError as exc:
        raise FetchError(f"response from {r.request.url} is not JSON") from exc
    if not isinstance(js, list):
        raise FetchError(f"expected a JSON array of records, got {type(js).__name__}")
    try:
        return [Record.from_json(item) for item in js]
    except MalformedRecordError as exc:
        raise FetchError(f"malformed record in response: {exc}") from exc


# --------------------------- Public API ---------------------------

class RecordFetcher:
    """Thin async client for the HealthPi measurement endpoint.

    One instance is created per application and handed to every view that
    needs records. No retries and no caching: every call is exactly one request.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        if base_url is None or timeout is None:
            settings = settings or get_settings()
            base_url = base_url or settings.HEALTHPI_URL
            timeout = timeout if timeout is not None else settings.HEALTHPI_TIMEOUT
        self.base_url = base_url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "RecordFetcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, params: Optional[dict[str, str]]) -> List[Record]:
        try:
            r = await self._client.get(self.base_url, params=params, timeout=self.timeout)
            r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("fetch_failed", url=self.base_url, params=params, status=exc.response.status_code)
            raise FetchError(f"HealthPi API returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("fetch_failed", url=self.base_url, params=params, error=str(exc))
            raise FetchError(f"failed to communicate with {self.base_url}: {exc}") from exc

        records = _parse_records(r)
        logger.debug("records_fetched", params=params, count=len(records))
        return records

    async def fetch(self, fields: Sequence[Union[str, Field]]) -> List[Record]:
        """GET ``/?select=<fields>`` and return the records as the server ordered them."""
        select = select_param(fields)
        return await self._get({"select": select})

    async def fetch_all(self) -> List[Record]:
        return await self._get(None)

    async def post_records(self, records: Iterable[Record]) -> None:
        payload = [rec.to_json() for rec in records]
        try:
            r = await self._client.post(self.base_url, json=payload, timeout=self.timeout)
            r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("post_failed", url=self.base_url, count=len(payload), status=exc.response.status_code)
            raise FetchError(f"HealthPi API returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("post_failed", url=self.base_url, count=len(payload), error=str(exc))
            raise FetchError(f"failed to communicate with {self.base_url}: {exc}") from exc
        logger.info("records_posted", count=len(payload))
