import httpx
import pytest

from productive_mcp.client import ProductiveClient
from productive_mcp.errors import ProductiveAPIError


def _client(config, handler):
    return ProductiveClient(config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_tasks_query_and_headers(config):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(
            200,
            json={
                "data": [{"id": "1", "type": "tasks", "attributes": {"title": "A"}}],
                "included": [{"id": "9", "type": "projects", "attributes": {"name": "Web"}}],
                "meta": {"total_count": 12},
            },
        )

    async with _client(config, handler) as client:
        doc = await client.list_tasks(
            assignee_id="42", status="open", limit=10, sort="-last_activity_at", include=["project"]
        )

    request = seen["request"]
    assert request.url.path == "/api/v2/tasks"
    assert request.url.params["filter[assignee_id]"] == "42"
    assert request.url.params["filter[status]"] == "1"
    assert request.url.params["page[size]"] == "10"
    assert request.url.params["sort"] == "-last_activity_at"
    assert request.url.params["include"] == "project"
    assert request.headers["X-Auth-Token"] == "secret"
    assert request.headers["X-Organization-Id"] == "1234"

    assert [t.id for t in doc.data] == ["1"]
    assert doc.projects() == {"9": "Web"}
    assert doc.total_count == 12


@pytest.mark.asyncio
async def test_latest_comment_asks_for_one_newest(config):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": []})

    async with _client(config, handler) as client:
        doc = await client.latest_comment("77")

    assert seen["params"] == {
        "include": "creator,task",
        "sort": "-created_at",
        "filter[task_id]": "77",
        "page[size]": "1",
    }
    assert doc.first() is None


@pytest.mark.asyncio
async def test_error_detail_from_json_api_errors(config):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"errors": [{"status": "401", "detail": "Invalid token"}]})

    async with _client(config, handler) as client:
        with pytest.raises(ProductiveAPIError) as exc_info:
            await client.list_tasks()

    assert str(exc_info.value) == "Invalid token"
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_error_without_json_body(config):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    async with _client(config, handler) as client:
        with pytest.raises(ProductiveAPIError, match="API request failed with status 502"):
            await client.get_person("42")


@pytest.mark.asyncio
async def test_error_with_malformed_errors_list(config):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"errors": ["title is required"]})

    async with _client(config, handler) as client:
        with pytest.raises(ProductiveAPIError, match="API request failed with status 422"):
            await client.list_tasks()
