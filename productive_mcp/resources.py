"""JSON:API document model for Productive.io list responses.

Productive returns related records (people, projects) in a side channel
called ``included``. Records are tagged by ``type``; the accessors here
discriminate on that tag once, so callers never filter raw dicts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceKind(str, Enum):
    TASKS = "tasks"
    COMMENTS = "comments"
    PEOPLE = "people"
    PROJECTS = "projects"


@dataclass
class Resource:
    kind: str
    id: str
    attributes: dict[str, Any] = field(default_factory=dict)
    relationships: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> "Resource":
        return cls(
            kind=raw.get("type", ""),
            id=str(raw.get("id", "")),
            attributes=raw.get("attributes") or {},
            relationships=raw.get("relationships") or {},
        )

    def is_kind(self, kind: ResourceKind) -> bool:
        return self.kind == kind.value

    def related_id(self, name: str) -> str | None:
        """Id of a to-one relationship, or None when absent."""
        rel = self.relationships.get(name) or {}
        data = rel.get("data")
        if isinstance(data, dict) and data.get("id") is not None:
            return str(data["id"])
        return None

    def attr(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)


def person_display_name(person: Resource) -> str:
    """``First Last``, falling back to the email when both parts are blank."""
    first = person.attr("first_name") or ""
    last = person.attr("last_name") or ""
    full = f"{first} {last}".strip()
    return full or (person.attr("email") or "")


def task_recency(task: Resource) -> str | None:
    return task.attr("last_activity_at") or task.attr("updated_at")


@dataclass
class Document:
    data: list[Resource] = field(default_factory=list)
    included: list[Resource] = field(default_factory=list)
    total_count: int | None = None

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> "Document":
        data = raw.get("data") or []
        if isinstance(data, dict):
            data = [data]
        meta = raw.get("meta") or {}
        return cls(
            data=[Resource.from_json(item) for item in data],
            included=[Resource.from_json(item) for item in raw.get("included") or []],
            total_count=meta.get("total_count"),
        )

    def included_of(self, kind: ResourceKind) -> list[Resource]:
        return [r for r in self.included if r.is_kind(kind)]

    def people(self) -> dict[str, str]:
        """Person id -> display name, from the included side channel."""
        return {p.id: person_display_name(p) for p in self.included_of(ResourceKind.PEOPLE)}

    def projects(self) -> dict[str, str]:
        """Project id -> project name, from the included side channel."""
        return {p.id: p.attr("name", "") for p in self.included_of(ResourceKind.PROJECTS)}

    def first(self) -> Resource | None:
        return self.data[0] if self.data else None
