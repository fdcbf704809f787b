"""Productive MCP: MCP server for the Productive.io project-management API.

Exposes the caller's task inbox and assigned tasks as MCP tools so
Claude Code / Claude Desktop can see what needs attention.
"""

import logging
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from productive_mcp.client import ProductiveClient
from productive_mcp.config import ProductiveConfig
from productive_mcp.inbox import DEFAULT_LIMIT, MAX_LIMIT, NOT_CONFIGURED, build_inbox

logger = logging.getLogger(__name__)

mcp = FastMCP("productive")

TASK_STATUS_LABELS = {1: "open", 2: "closed"}

# ── Config cache ─────────────────────────────────────────────

_config_cache: dict[str, ProductiveConfig] = {}


def _get_config() -> ProductiveConfig:
    """Load config from the environment once per process."""
    if "config" not in _config_cache:
        _config_cache["config"] = ProductiveConfig.from_env()
    return _config_cache["config"]


def _client(config: ProductiveConfig) -> ProductiveClient:
    return ProductiveClient(config)


# ── Inbox Tools ──────────────────────────────────────────────


@mcp.tool()
async def task_inbox(
    limit: Annotated[int, Field(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
) -> str:
    """Show your task inbox — assigned tasks sorted by recent activity with the
    latest comment for each task. Requires PRODUCTIVE_USER_ID to be configured.

    Args:
        limit: Number of tasks to return (1-50, default 10)
    """
    config = _get_config()
    context = config.inbox_context()
    if context is None:
        return NOT_CONFIGURED
    async with _client(config) as client:
        return await build_inbox(client, context, limit)


@mcp.tool()
async def my_tasks(
    status: Literal["", "open", "closed"] = "",
    limit: Annotated[int, Field(ge=1, le=200)] = 30,
) -> str:
    """Get tasks assigned to you (requires PRODUCTIVE_USER_ID to be configured).

    Args:
        status: Filter by task status (open or closed)
        limit: Number of tasks to return (1-200, default 30)
    """
    config = _get_config()
    if not config.has_user:
        return NOT_CONFIGURED
    async with _client(config) as client:
        doc = await client.list_tasks(assignee_id=config.user_id, status=status, limit=limit)

    tasks = [t for t in doc.data if t.attributes]
    if not tasks:
        return "You have no tasks assigned to you."

    blocks = []
    for t in tasks:
        status_code = t.attr("status")
        if status_code is None:
            status_code = 2 if t.attr("closed") is True else 1
        icon = "✓" if status_code == 2 else "○"
        lines = [
            f"{icon} {t.attr('title', '')} (ID: {t.id})",
            f"  Status: {TASK_STATUS_LABELS.get(status_code, f'status {status_code}')}",
            f"  Due: {t.attr('due_date')}" if t.attr("due_date") else "  No due date",
        ]
        project_id = t.related_id("project")
        if project_id:
            lines.append(f"  Project ID: {project_id}")
        if t.attr("description"):
            lines.append(f"  Description: {t.attr('description')}")
        blocks.append("\n".join(lines))

    count = len(tasks)
    plural = "s" if count != 1 else ""
    showing = f" (showing {count} of {doc.total_count})" if doc.total_count else ""
    return f"You have {count} task{plural} assigned to you{showing}:\n\n" + "\n\n".join(blocks)


@mcp.tool()
async def whoami() -> str:
    """Show the configured Productive user and organization context."""
    config = _get_config()
    lines = [f"Organization ID: {config.org_id}"]
    if not config.has_user:
        lines.append("No user configured — set PRODUCTIVE_USER_ID to enable inbox and 'me' context.")
        return "\n".join(lines)

    lines.insert(0, f"User ID: {config.user_id}")
    async with _client(config) as client:
        doc = await client.get_person(config.user_id)
    person = doc.first()
    if person is not None:
        name = f"{person.attr('first_name') or ''} {person.attr('last_name') or ''}".strip()
        lines.append(f"Name: {name or 'N/A'}")
        lines.append(f"Email: {person.attr('email') or 'N/A'}")
    return "\n".join(lines)


def main() -> None:
    config = _get_config()
    config.configure_logging()
    logger.info("Starting productive MCP server for org %s", config.org_id)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
