"""Table data service talking to a JSON HTTP API through httpx.

The remote side is expected to expose two endpoints::

    POST {base_url}/batch  {"filter": ..., "startIndex": s, "endIndex": e}
        -> {"rows": [...], "filteredCount": n, "totalCount": m}
    POST {base_url}/entry  {"filter": ..., "index": i}
        -> {"row": {...}}

Filters travel in the ``Filter.to_dict()`` wire form.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from lazytable.config import HTTP_TIMEOUT_SEC
from lazytable.domain.models import Filter
from lazytable.errors import DataServiceError, RowNotFoundError
from lazytable.services.data_service import BatchResult, Entry

LOGGER = logging.getLogger(__name__)


class HttpTableService:
    """Fetch table rows from a remote API.

    Requests are not retried; the next scroll or filter edit asks again.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = HTTP_TIMEOUT_SEC,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._base_url = base_url.rstrip("/")

    async def fetch_batch(self, filter: Filter, start_index: int, end_index: int) -> BatchResult:
        payload = await self._post(
            "batch",
            {"filter": filter.to_dict(), "startIndex": start_index, "endIndex": end_index},
        )
        try:
            rows = [dict(row) for row in payload["rows"]]
            return rows, int(payload["filteredCount"]), int(payload["totalCount"])
        except (KeyError, TypeError, ValueError) as exc:
            raise DataServiceError(f"Malformed batch response: {exc}") from exc

    async def fetch_one(self, filter: Filter, index: int) -> Entry:
        payload = await self._post("entry", {"filter": filter.to_dict(), "index": index})
        row = payload.get("row")
        if row is None:
            raise RowNotFoundError(f"Row {index} is outside the filtered dataset")
        if not isinstance(row, dict):
            raise DataServiceError(f"Malformed entry response for row {index}")
        return row

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTableService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        try:
            resp = await self._client.post(url, json=body)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.TimeoutException, httpx.HTTPError) as exc:
            raise DataServiceError(f"Request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise DataServiceError(f"Response from {url} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise DataServiceError(f"Unexpected response from {url}: {payload!r}")
        LOGGER.debug("POST %s -> %d", url, resp.status_code)
        return payload
