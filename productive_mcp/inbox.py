"""Task inbox: the caller's open tasks with the latest comment on each.

The aggregator fetches the task page once, then fans out one
latest-comment request per task and joins everything in memory. All
lookups are built per call and discarded afterwards.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from productive_mcp.actions import suggest_actions
from productive_mcp.config import InboxContext
from productive_mcp.errors import ProductiveAPIError
from productive_mcp.resources import Document, Resource, task_recency
from productive_mcp.text import collapse_mentions, relative_age, strip_markup, truncate

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
CLI_CONTENT_LENGTH = 200

NOT_CONFIGURED = (
    "User ID not configured. Please set PRODUCTIVE_USER_ID in your environment "
    "variables to use this feature."
)
EMPTY_INBOX = "No tasks in your inbox."


class InboxSource(Protocol):
    async def list_tasks(
        self,
        assignee_id: str = "",
        status: str = "",
        limit: int | None = None,
        sort: str = "",
        include: list[str] | None = None,
    ) -> Document: ...

    async def latest_comment(self, task_id: str) -> Document: ...


@dataclass(frozen=True)
class FetchPolicy:
    """How the per-task comment fan-out behaves.

    fail_fast: any failed comment request aborts the whole inbox. When
        False the failure is logged and the task renders without a comment.
    max_concurrency: upper bound on in-flight comment requests, None for
        no bound.
    """

    fail_fast: bool = True
    max_concurrency: int | None = None

    def __post_init__(self) -> None:
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {self.max_concurrency}")


@dataclass
class InboxEntry:
    position: int
    task: Resource
    project_name: str
    comment: Resource | None = None
    author_name: str | None = None


@dataclass
class Inbox:
    entries: list[InboxEntry] = field(default_factory=list)
    total_count: int = 0

    @property
    def header(self) -> str:
        shown = len(self.entries)
        of_total = f" of {self.total_count}" if self.total_count > shown else ""
        return f"Task Inbox ({shown}{of_total} tasks)"


def _project_name(task: Resource, projects: dict[str, str]) -> str:
    project_id = task.related_id("project")
    if not project_id:
        return "No Project"
    return projects.get(project_id) or "Unknown Project"


async def _fetch_latest_comments(
    client: InboxSource,
    task_ids: list[str],
    policy: FetchPolicy,
) -> list[Document | None]:
    semaphore = asyncio.Semaphore(policy.max_concurrency) if policy.max_concurrency is not None else None

    async def fetch(task_id: str) -> Document | None:
        try:
            if semaphore is None:
                return await client.latest_comment(task_id)
            async with semaphore:
                return await client.latest_comment(task_id)
        except ProductiveAPIError as e:
            if policy.fail_fast:
                raise
            logger.warning("Comment fetch failed for task %s, rendering without it: %s", task_id, e)
            return None

    # the first failure cancels the sibling fetches before the group exits
    try:
        async with asyncio.TaskGroup() as tg:
            pending = [tg.create_task(fetch(task_id)) for task_id in task_ids]
    except ExceptionGroup as eg:
        raise eg.exceptions[0] from None
    return [t.result() for t in pending]


async def fetch_inbox(
    client: InboxSource,
    context: InboxContext,
    limit: int = DEFAULT_LIMIT,
    policy: FetchPolicy = FetchPolicy(),
) -> Inbox:
    """Fetch and join the inbox data. An empty Inbox means no open tasks."""
    tasks_doc = await client.list_tasks(
        assignee_id=context.user_id,
        status="open",
        limit=limit,
        sort="-last_activity_at",
        include=["project"],
    )
    if not tasks_doc.data:
        return Inbox()

    projects = tasks_doc.projects()
    task_ids = [task.id for task in tasks_doc.data]
    comment_docs = await _fetch_latest_comments(client, task_ids, policy)
    logger.debug("Fetched latest comments for %d tasks", len(task_ids))

    people: dict[str, str] = {}
    latest: dict[str, Resource] = {}
    for task_id, doc in zip(task_ids, comment_docs):
        if doc is None:
            continue
        people.update(doc.people())
        comment = doc.first()
        if comment is not None:
            latest[task_id] = comment

    entries = []
    for position, task in enumerate(tasks_doc.data, 1):
        comment = latest.get(task.id)
        author = None
        if comment is not None:
            creator_id = comment.related_id("creator")
            author = people.get(creator_id) if creator_id else None
        entries.append(
            InboxEntry(
                position=position,
                task=task,
                project_name=_project_name(task, projects),
                comment=comment,
                author_name=author or None,
            )
        )

    return Inbox(entries=entries, total_count=tasks_doc.total_count or len(entries))


def render_content_line(entry: InboxEntry, max_content_length: int | None = None) -> str:
    """The single content line for a task: comment, description, or nothing."""
    if entry.comment is not None:
        body = collapse_mentions(strip_markup(entry.comment.attr("body") or ""))
        if max_content_length:
            body = truncate(body, max_content_length)
        return f"{entry.author_name or 'Unknown'}: {body}"

    description = strip_markup(entry.task.attr("description") or "")
    if description:
        description = collapse_mentions(description)
        if max_content_length:
            description = truncate(description, max_content_length)
        return f"Description: {description}"

    return "No content"


def render_entry(entry: InboxEntry, context: InboxContext, max_content_length: int | None = None) -> str:
    recency = task_recency(entry.task)
    age = relative_age(recency) if recency else "unknown"
    header = f"{entry.position}. {context.task_url(entry.task.id)} | {entry.project_name} | {age}"
    return f"{header}\n   {render_content_line(entry, max_content_length)}"


def render_inbox(
    inbox: Inbox,
    context: InboxContext,
    max_content_length: int | None = None,
    include_actions: bool = True,
    brief_actions: bool = False,
) -> str:
    if not inbox.entries:
        return EMPTY_INBOX

    blocks = "\n\n".join(render_entry(e, context, max_content_length) for e in inbox.entries)
    text = f"{inbox.header}\n\n{blocks}"

    if include_actions:
        actions = suggest_actions(inbox.entries, brief_actions)
        if actions:
            text += "\n\nSuggested Actions:\n" + "\n".join(actions)
    return text


async def build_inbox(
    client: InboxSource,
    context: InboxContext | None,
    limit: int = DEFAULT_LIMIT,
    *,
    max_content_length: int | None = None,
    include_actions: bool = True,
    brief_actions: bool = False,
    policy: FetchPolicy = FetchPolicy(),
) -> str:
    """Render the inbox for ``context.user_id`` as a single text block."""
    if context is None or not context.user_id:
        return NOT_CONFIGURED

    inbox = await fetch_inbox(client, context, limit, policy)
    return render_inbox(inbox, context, max_content_length, include_actions, brief_actions)
