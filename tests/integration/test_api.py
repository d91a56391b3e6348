"""Integration tests for the AskTabs API."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from asktabs.api.deps import clear_caches, get_snapshot_store
from asktabs.api.main import create_app
from asktabs.api.routes.tabs import _stop_forwarder
from asktabs.core.errors import BrowserError

pytestmark = pytest.mark.integration


@pytest.fixture
def browser(fake_browser, article_capture, monkeypatch, tmp_path):
    """Fake browser wired into the API singletons, with user data in tmp_path."""
    monkeypatch.setenv("ASKTABS_HOME", str(tmp_path))
    monkeypatch.setattr(
        "asktabs.api.deps.CDPBrowserGateway", lambda **kwargs: fake_browser
    )
    clear_caches()

    fake_browser.add_tab(
        "1", "https://doc.rust-lang.org/book", "Rust Book", article_capture("Rust Book")
    )
    fake_browser.add_tab(
        "2",
        "https://go.dev/blog/pipelines",
        "Go Concurrency Patterns",
        article_capture("Go Concurrency Patterns"),
    )
    fake_browser.add_tab("3", "chrome://settings", "Settings")
    yield fake_browser
    clear_caches()


@pytest.fixture
def app(browser):
    """Create test application."""
    return create_app()


@pytest.fixture
async def client(app):
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestTabsAPI:
    """Tests for /api/tabs endpoints."""

    @pytest.mark.asyncio
    async def test_snapshot_empty_before_refresh(self, client):
        response = await client.get("/api/tabs")

        assert response.status_code == 200
        data = response.json()
        assert data["tabs"] == []
        assert data["version"] == 0

    @pytest.mark.asyncio
    async def test_refresh(self, client):
        response = await client.post("/api/tabs/refresh")

        assert response.status_code == 200
        data = response.json()
        assert [t["title"] for t in data["tabs"]] == [
            "Rust Book",
            "Go Concurrency Patterns",
        ]
        assert data["stats"]["successful"] == 2
        assert data["stats"]["failed"] == 0
        assert data["version"] == 1

        snapshot = (await client.get("/api/tabs")).json()
        assert snapshot["version"] == 1

    @pytest.mark.asyncio
    async def test_refresh_when_browser_unreachable(self, client, browser):
        browser.list_error = BrowserError("connection refused")

        response = await client.post("/api/tabs/refresh")

        assert response.status_code == 502
        assert "connection refused" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_refresh_error_documented(self, client):
        schema = (await client.get("/openapi.json")).json()

        responses = schema["paths"]["/api/tabs/refresh"]["post"]["responses"]
        error_schema = responses["502"]["content"]["application/json"]["schema"]
        assert error_schema["$ref"] == "#/components/schemas/ErrorResponse"

    @pytest.mark.asyncio
    async def test_tab_event_accepted(self, client):
        response = await client.post("/api/tabs/events", json={"kind": "updated"})

        assert response.status_code == 202
        assert response.json() == {"accepted": True}

    @pytest.mark.asyncio
    async def test_unknown_event_kind_rejected(self, client):
        response = await client.post("/api/tabs/events", json={"kind": "exploded"})

        assert response.status_code == 422


class TestAskAPI:
    """Tests for /api/ask and the conversation log."""

    @pytest.mark.asyncio
    async def test_ask_refreshes_and_answers(self, client, browser):
        response = await client.post("/api/ask", json={"question": "what tabs are open"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"].startswith("You have 2 tabs open:")
        assert [c["tab_id"] for c in data["citations"]] == ["1", "2"]
        assert browser.capture_calls

    @pytest.mark.asyncio
    async def test_keyword_mode(self, client):
        response = await client.post(
            "/api/ask", json={"question": "go concurrency patterns", "mode": "keyword"}
        )

        data = response.json()
        assert data["answer"].startswith(
            'Found relevant content:\n\n1. "Go Concurrency Patterns"'
        )

    @pytest.mark.asyncio
    async def test_general_question_redirected(self, client):
        response = await client.post(
            "/api/ask", json={"question": "what is photosynthesis"}
        )

        assert response.json()["answer"] == "Ask about your tabs."

    @pytest.mark.asyncio
    async def test_empty_question_rejected(self, client):
        response = await client.post("/api/ask", json={"question": ""})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_conversation_logged_and_persisted(self, client, tmp_path):
        await client.post("/api/ask", json={"question": "what tabs are open"})

        messages = (await client.get("/api/messages")).json()["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant"]
        assert messages[1]["citations"]

        state = json.loads((tmp_path / "state.json").read_text())
        assert len(state["messages"]) == 2
        assert [t["id"] for t in state["tabs"]] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_clear_messages(self, client):
        await client.post("/api/ask", json={"question": "what tabs are open"})

        response = await client.delete("/api/messages")

        messages = response.json()["messages"]
        assert len(messages) == 1
        assert messages[0]["content"] == "Ask anything about your opened tabs"


class TestNavigateAPI:
    """Tests for /api/navigate."""

    @pytest.mark.asyncio
    async def test_focus_existing_tab(self, client, browser):
        response = await client.post(
            "/api/navigate", json={"url": "https://go.dev/blog/pipelines"}
        )

        assert response.json() == {"success": True, "tab_id": "2", "error": None}
        assert browser.activated == ["2"]

    @pytest.mark.asyncio
    async def test_failure_reported(self, client):
        response = await client.post(
            "/api/navigate", json={"url": "https://closed.example.com", "tab_id": "42"}
        )

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is False
        assert "42" in data["error"]


class TestTabsWebSocket:
    """Tests for /ws/tabs."""

    def test_snapshot_sent_on_connect(self, app):
        client = TestClient(app)

        with client.websocket_connect("/ws/tabs") as websocket:
            message = websocket.receive_json()
            assert message["type"] == "TAB_DATA_UPDATE"
            assert message["data"]["version"] == 0

            websocket.send_text("not json")
            assert websocket.receive_json()["type"] == "error"

            websocket.send_json({"type": "REFRESH_TABS"})

    def test_subscriber_released_on_disconnect(self, app):
        client = TestClient(app)
        store = get_snapshot_store()

        with client.websocket_connect("/ws/tabs") as websocket:
            websocket.receive_json()
            assert store.has_subscribers

        assert not store.has_subscribers

    @pytest.mark.asyncio
    async def test_failed_forwarder_is_collected(self):
        async def broken():
            raise RuntimeError("socket closed")

        task = asyncio.create_task(broken())
        await asyncio.sleep(0)

        await _stop_forwarder(task)

        assert task.done()
