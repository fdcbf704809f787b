"""Shared fixtures: JSON:API payload builders and an in-memory inbox source."""

import datetime as _dt
from typing import Any

import pytest

from productive_mcp.config import InboxContext, ProductiveConfig
from productive_mcp.errors import ProductiveAPIError
from productive_mcp.resources import Document


def iso_days_ago(days: int) -> str:
    return (_dt.datetime.now(_dt.timezone.utc) - _dt.timedelta(days=days)).isoformat()


def task_json(
    task_id: str,
    title: str = "Task",
    description: str | None = None,
    project_id: str | None = None,
    last_activity_at: str | None = None,
    updated_at: str | None = None,
) -> dict[str, Any]:
    relationships: dict[str, Any] = {}
    if project_id:
        relationships["project"] = {"data": {"id": project_id, "type": "projects"}}
    return {
        "id": task_id,
        "type": "tasks",
        "attributes": {
            "title": title,
            "description": description,
            "last_activity_at": last_activity_at,
            "updated_at": updated_at or iso_days_ago(0),
        },
        "relationships": relationships,
    }


def comment_json(comment_id: str, task_id: str, body: str, creator_id: str | None = "p1") -> dict[str, Any]:
    relationships: dict[str, Any] = {"task": {"data": {"id": task_id, "type": "tasks"}}}
    if creator_id:
        relationships["creator"] = {"data": {"id": creator_id, "type": "people"}}
    return {
        "id": comment_id,
        "type": "comments",
        "attributes": {"body": body, "created_at": iso_days_ago(0)},
        "relationships": relationships,
    }


def person_json(person_id: str, first: str = "", last: str = "", email: str = "") -> dict[str, Any]:
    return {
        "id": person_id,
        "type": "people",
        "attributes": {"first_name": first, "last_name": last, "email": email},
    }


def project_json(project_id: str, name: str) -> dict[str, Any]:
    return {"id": project_id, "type": "projects", "attributes": {"name": name}}


class FakeInboxSource:
    """Serves canned documents and records every call."""

    def __init__(
        self,
        tasks: dict[str, Any],
        comments: dict[str, dict[str, Any]] | None = None,
        failing: set[str] | None = None,
    ):
        self.tasks = tasks
        self.comments = comments or {}
        self.failing = failing or set()
        self.task_calls: list[dict[str, Any]] = []
        self.comment_calls: list[str] = []

    async def list_tasks(self, **kwargs: Any) -> Document:
        self.task_calls.append(kwargs)
        return Document.from_json(self.tasks)

    async def latest_comment(self, task_id: str) -> Document:
        self.comment_calls.append(task_id)
        if task_id in self.failing:
            raise ProductiveAPIError(500, "Internal server error")
        return Document.from_json(self.comments.get(task_id, {"data": []}))


@pytest.fixture
def context() -> InboxContext:
    return InboxContext(user_id="42", org_id="1234")


@pytest.fixture
def config() -> ProductiveConfig:
    return ProductiveConfig(
        api_token="secret",
        org_id="1234",
        user_id="42",
        base_url="https://api.example.test/api/v2/",
    )
