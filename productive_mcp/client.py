"""Async HTTP client for the Productive.io JSON:API."""

import logging
from typing import Any

import httpx

from productive_mcp.config import ProductiveConfig
from productive_mcp.errors import ProductiveAPIError
from productive_mcp.resources import Document

logger = logging.getLogger(__name__)

# Productive encodes task status as an integer in filters
TASK_STATUS = {"open": 1, "closed": 2}


def _error_detail(r: httpx.Response) -> str:
    """Extract a human-readable error from a JSON:API error response."""
    try:
        data = r.json()
    except ValueError:
        return f"API request failed with status {r.status_code}"
    errors = data.get("errors") if isinstance(data, dict) else None
    if errors and isinstance(errors, list) and isinstance(errors[0], dict) and errors[0].get("detail"):
        return errors[0]["detail"]
    return f"API request failed with status {r.status_code}"


class ProductiveClient:
    """Thin reader over the Productive.io REST API.

    Use as an async context manager so one connection pool serves every
    request issued during a tool call::

        async with ProductiveClient(config) as client:
            doc = await client.list_tasks(assignee_id="123", status="open")
    """

    def __init__(self, config: ProductiveConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "X-Auth-Token": config.api_token,
                "X-Organization-Id": config.org_id,
                "Content-Type": "application/vnd.api+json",
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ProductiveClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        r = await self._http.get(path, params=params)
        logger.debug("GET %s -> %s", r.url, r.status_code)
        if not r.is_success:
            detail = _error_detail(r)
            logger.warning("Productive API error %s for %s: %s", r.status_code, r.url, detail)
            raise ProductiveAPIError(r.status_code, detail, str(r.url))
        return r.json()

    # ── Tasks ────────────────────────────────────────────────

    async def list_tasks(
        self,
        assignee_id: str = "",
        status: str = "",
        limit: int | None = None,
        sort: str = "",
        include: list[str] | None = None,
    ) -> Document:
        params: dict[str, Any] = {}
        if assignee_id:
            params["filter[assignee_id]"] = assignee_id
        if status:
            params["filter[status]"] = TASK_STATUS[status]
        if limit:
            params["page[size]"] = limit
        if sort:
            params["sort"] = sort
        if include:
            params["include"] = ",".join(include)
        return Document.from_json(await self._get("tasks", params))

    # ── Comments ─────────────────────────────────────────────

    async def list_comments(
        self,
        task_id: str = "",
        limit: int | None = None,
    ) -> Document:
        """List comments newest first, with creator and task included.

        The task filter only accepts a single id.
        """
        params: dict[str, Any] = {"include": "creator,task", "sort": "-created_at"}
        if task_id:
            params["filter[task_id]"] = task_id
        if limit:
            params["page[size]"] = limit
        return Document.from_json(await self._get("comments", params))

    async def latest_comment(self, task_id: str) -> Document:
        return await self.list_comments(task_id=task_id, limit=1)

    # ── People ───────────────────────────────────────────────

    async def get_person(self, person_id: str) -> Document:
        return Document.from_json(await self._get(f"people/{person_id}"))
