from productive_mcp.resources import Document, Resource, ResourceKind, person_display_name


def test_people_and_projects_are_discriminated_by_kind():
    doc = Document.from_json(
        {
            "data": [],
            "included": [
                {"id": "1", "type": "people", "attributes": {"first_name": "Ann", "last_name": "Lee"}},
                {"id": "2", "type": "projects", "attributes": {"name": "Web"}},
                {"id": "3", "type": "tasks", "attributes": {"title": "x"}},
                {"id": "4", "type": "workflow_statuses", "attributes": {"name": "Doing"}},
            ],
        }
    )
    assert doc.people() == {"1": "Ann Lee"}
    assert doc.projects() == {"2": "Web"}
    assert [r.id for r in doc.included_of(ResourceKind.TASKS)] == ["3"]


def test_single_resource_document():
    doc = Document.from_json({"data": {"id": 5, "type": "people", "attributes": {}}})
    assert doc.first().id == "5"
    assert doc.total_count is None


def test_display_name_falls_back_to_email():
    person = Resource(kind="people", id="1", attributes={"first_name": " ", "last_name": "", "email": "a@b.io"})
    assert person_display_name(person) == "a@b.io"

    person = Resource(kind="people", id="1", attributes={"first_name": "Ann", "last_name": None})
    assert person_display_name(person) == "Ann"


def test_related_id():
    task = Resource.from_json(
        {
            "id": "1",
            "type": "tasks",
            "relationships": {"project": {"data": {"id": 9, "type": "projects"}}, "assignee": {"data": None}},
        }
    )
    assert task.related_id("project") == "9"
    assert task.related_id("assignee") is None
    assert task.related_id("board") is None
