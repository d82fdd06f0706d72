"""FF Logs v1 API client."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import get_settings


logger = logging.getLogger(__name__)


class FFLogsClient:
    """Thin async wrapper over the FF Logs v1 REST API."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_url = api_url or settings.fflogs_api_url
        self.api_key = api_key if api_key is not None else settings.fflogs_api_key
        self.timeout = timeout or settings.fflogs_timeout_s
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self.client

    async def close(self):
        """Close HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a path relative to the API root and decode the JSON body.

        `None` valued params are dropped and `translate=true` is always sent.

        Raises:
            httpx.HTTPStatusError: on a non-2xx response
            httpx.HTTPError: on transport failures
        """
        client = await self._get_client()
        query = {"translate": "true"}
        if self.api_key:
            query["api_key"] = self.api_key
        query.update({k: v for k, v in (params or {}).items() if v is not None})

        response = await client.get(path, params=query)
        response.raise_for_status()
        return response.json()

    async def get_report_fights(self, code: str, bypass_cache: bool = False) -> Dict[str, Any]:
        params = {"bypassCache": "true"} if bypass_cache else None
        return await self.get(f"report/fights/{code}", params)

    async def get_events(
        self,
        code: str,
        view: str,
        start: int,
        end: int,
        source_id: Optional[int] = None,
        target_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every event of one view between `start` and `end`, following pagination."""
        events: List[Dict[str, Any]] = []
        page_start = start
        while True:
            data = await self.get(
                f"report/events/{view}/{code}",
                {"start": page_start, "end": end, "sourceid": source_id, "targetid": target_id},
            )
            events.extend(data.get("events", []))
            next_page = data.get("nextPageTimestamp")
            if next_page is None or next_page <= page_start:
                break
            page_start = next_page
        logger.debug(f"Fetched {len(events)} {view} events from report {code}")
        return events
