"""Command-line task inbox.

Entry point registered in pyproject.toml::

    [project.scripts]
    productive-inbox = "productive_mcp.cli:inbox"

Usage examples::

    productive-inbox
    productive-inbox --limit 20 --actions
    productive-inbox --full
"""

import asyncio
import sys

import click
import httpx

from productive_mcp import __version__
from productive_mcp.client import ProductiveClient
from productive_mcp.config import ProductiveConfig
from productive_mcp.errors import ProductiveError
from productive_mcp.inbox import CLI_CONTENT_LENGTH, DEFAULT_LIMIT, MAX_LIMIT, FetchPolicy, build_inbox


async def _run(config: ProductiveConfig, limit: int, full: bool, actions: bool, best_effort: bool) -> str:
    async with ProductiveClient(config) as client:
        return await build_inbox(
            client,
            config.inbox_context(),
            limit,
            max_content_length=None if full else CLI_CONTENT_LENGTH,
            include_actions=actions,
            brief_actions=True,
            policy=FetchPolicy(fail_fast=not best_effort),
        )


@click.command()
@click.version_option(version=__version__, prog_name="productive-mcp")
@click.option(
    "--limit",
    type=click.IntRange(1, MAX_LIMIT),
    default=DEFAULT_LIMIT,
    show_default=True,
    help="Number of tasks to show.",
)
@click.option("--full", is_flag=True, default=False, help="Show full content (no truncation).")
@click.option("--actions", is_flag=True, default=False, help="Show the suggested actions section.")
@click.option(
    "--best-effort",
    is_flag=True,
    default=False,
    help="Render tasks whose comment fetch failed instead of aborting.",
)
def inbox(limit: int, full: bool, actions: bool, best_effort: bool) -> None:
    """Display your Productive.io task inbox."""
    try:
        config = ProductiveConfig.from_env()
    except ProductiveError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    config.configure_logging()
    if not config.has_user:
        click.echo("Error: PRODUCTIVE_USER_ID not configured in environment variables.", err=True)
        sys.exit(1)

    try:
        output = asyncio.run(_run(config, limit, full, actions, best_effort))
    except (ProductiveError, httpx.HTTPError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(output)


if __name__ == "__main__":
    inbox()
