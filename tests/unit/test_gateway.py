"""
Unit tests for RemoteGateway and the store on top of it.

Covered:
- 2xx responses with a non-JSON body (proxy / captive portal pages) become GatewayError
- a login answer without access_token becomes GatewayError
- EntryStore load / generate_summary / background refresh swallow such bodies
- exercise names are percent-encoded in the path

The API is replaced by httpx.MockTransport.
"""

import httpx
import pytest
from datetime import date

from app.client.entry_store import EntryStore
from app.client.gateway import GatewayError, RemoteGateway

pytestmark = pytest.mark.unit

WEEK = date(2024, 1, 1)
HTML = "<html>proxy login</html>"


def make_gateway(handler) -> RemoteGateway:
    return RemoteGateway(
        base_url="http://test/api/v1",
        access_token="token",
        transport=httpx.MockTransport(handler),
    )


def html_for(*paths):
    """JSON for the normal API, an HTML page for the given path suffixes."""
    def handler(request: httpx.Request) -> httpx.Response:
        if any(request.url.path.endswith(path) for path in paths):
            return httpx.Response(200, text=HTML, headers={"Content-Type": "text/html"})
        if request.url.path.endswith("/entries"):
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=None)
    return handler


# ---------------------------------------------------------------------------
# RemoteGateway
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_html_body_raises_gateway_error():
    async with make_gateway(html_for("/entries")) as gateway:
        with pytest.raises(GatewayError) as exc_info:
            await gateway.list_entries(WEEK, date(2024, 1, 7))

    assert "Unexpected response body" in str(exc_info.value)


@pytest.mark.asyncio
async def test_login_without_access_token_raises_gateway_error():
    handler = lambda request: httpx.Response(200, json={"token_type": "bearer"})
    async with make_gateway(handler) as gateway:
        with pytest.raises(GatewayError):
            await gateway.login("u@test.com", "password123")
        assert gateway.access_token == "token"


@pytest.mark.asyncio
async def test_login_html_body_raises_gateway_error():
    async with make_gateway(html_for("/auth/login")) as gateway:
        with pytest.raises(GatewayError):
            await gateway.login("u@test.com", "password123")


@pytest.mark.asyncio
async def test_delete_exercise_encodes_name():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["raw_path"] = request.url.raw_path
        return httpx.Response(204)

    async with make_gateway(handler) as gateway:
        await gateway.delete_exercise("Push-ups / knees?#1")

    assert seen["raw_path"] == b"/api/v1/exercises/Push-ups%20%2F%20knees%3F%231"


# ---------------------------------------------------------------------------
# EntryStore over a misbehaving gateway
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_store_load_with_html_body_notifies():
    notes = []
    async with make_gateway(html_for("/entries")) as gateway:
        store = EntryStore(gateway, notify=notes.append, week_start=WEEK)
        assert await store.load() is False

    assert store.error == EntryStore.LOAD_FAILED
    assert notes == [EntryStore.LOAD_FAILED]


@pytest.mark.asyncio
async def test_store_generate_summary_with_html_body_notifies():
    notes = []
    async with make_gateway(html_for("/generate-summary")) as gateway:
        store = EntryStore(gateway, notify=notes.append, week_start=WEEK)
        assert await store.load() is True
        assert await store.generate_summary() is False

    assert store.summary is None
    assert store.is_generating_summary is False
    assert notes == [EntryStore.SUMMARY_FAILED]


@pytest.mark.asyncio
async def test_store_background_refresh_with_html_body_is_silent():
    """A refresh scheduled after a successful delete does not raise out of drain()."""
    entry = {
        "id": "a", "date": "2024-01-01", "exercise": "Squats", "count": 10,
        "duration": 5, "created_at": "2024-01-01T08:00:00",
    }
    state = {"deleted": False}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            state["deleted"] = True
            return httpx.Response(204)
        if request.url.path.endswith("/entries"):
            if state["deleted"]:
                return httpx.Response(200, text=HTML)
            return httpx.Response(200, json=[entry])
        return httpx.Response(200, json=None)

    notes = []
    async with make_gateway(handler) as gateway:
        store = EntryStore(gateway, notify=notes.append, week_start=WEEK)
        assert await store.load() is True
        assert await store.delete("a") is True
        await store.drain()

    assert store.entries == []
    assert notes == []
