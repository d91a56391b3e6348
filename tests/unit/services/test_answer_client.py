"""Unit tests for the remote answering client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from asktabs.core.errors import RemoteCallError
from asktabs.services.answer_client import (
    ContextItem,
    RemoteAnswerClient,
    build_prompt,
    extract_answer_text,
)

ENDPOINT = "https://answers.example.com/ask"


def mock_session(status=200, payload=None, json_error=None):
    """aiohttp-like session whose post() yields one canned response."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload, side_effect=json_error)

    session = MagicMock()
    session.closed = False
    session.post.return_value.__aenter__ = AsyncMock(return_value=response)
    session.post.return_value.__aexit__ = AsyncMock(return_value=False)
    return session


CONTEXT = [ContextItem(title="Rust Book", excerpt="Ownership and borrowing")]


class TestExtractAnswerText:
    """Tests for response shape handling."""

    def test_plain_answer(self):
        assert extract_answer_text({"answer": "hello"}) == "hello"

    def test_candidates_shape(self):
        data = {"candidates": [{"content": {"parts": [{"text": "from gemini"}]}}]}

        assert extract_answer_text(data) == "from gemini"

    def test_candidates_preferred_over_answer(self):
        data = {
            "answer": "plain",
            "candidates": [{"content": {"parts": [{"text": "nested"}]}}],
        }

        assert extract_answer_text(data) == "nested"

    @pytest.mark.parametrize(
        "data",
        [None, [], {}, {"candidates": []}, {"answer": 42}, {"candidates": [{}]}],
    )
    def test_unusable_shapes(self, data):
        assert extract_answer_text(data) is None


class TestBuildPrompt:
    def test_numbered_titles_in_quotes(self):
        prompt = build_prompt(
            "what tabs are open",
            CONTEXT + [ContextItem(title="Go Tour", excerpt="Goroutines")],
        )

        assert "User has 2 tabs open." in prompt
        assert '1. "Rust Book"\n   Ownership and borrowing...' in prompt
        assert '2. "Go Tour"' in prompt
        assert prompt.rstrip().endswith(
            "Remember: Use exact tab titles in quotes, provide helpful summaries."
        )
        assert "User question: what tabs are open" in prompt


class TestRemoteAnswerClient:
    """Tests for RemoteAnswerClient.ask()."""

    @pytest.mark.asyncio
    async def test_posts_question_and_context(self):
        session = mock_session(payload={"answer": "Rust is open."})
        client = RemoteAnswerClient(ENDPOINT, session=session)

        answer = await client.ask("what tabs are open", CONTEXT)

        assert answer == "Rust is open."
        url = session.post.call_args.args[0]
        payload = session.post.call_args.kwargs["json"]
        assert url == ENDPOINT
        assert payload["question"] == "what tabs are open"
        assert payload["context"] == [
            {"title": "Rust Book", "excerpt": "Ownership and borrowing"}
        ]
        assert "Rust Book" in payload["prompt"]

    @pytest.mark.asyncio
    async def test_http_error(self):
        client = RemoteAnswerClient(ENDPOINT, session=mock_session(status=503))

        with pytest.raises(RemoteCallError) as exc_info:
            await client.ask("q", CONTEXT)

        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_network_error(self):
        session = mock_session()
        session.post.side_effect = aiohttp.ClientConnectionError("refused")
        client = RemoteAnswerClient(ENDPOINT, session=session)

        with pytest.raises(RemoteCallError, match="Network error"):
            await client.ask("q", CONTEXT)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        session = mock_session(json_error=ValueError("Expecting value"))
        client = RemoteAnswerClient(ENDPOINT, session=session)

        with pytest.raises(RemoteCallError, match="Invalid JSON"):
            await client.ask("q", CONTEXT)

    @pytest.mark.asyncio
    async def test_timeout_cancels_request(self):
        cancelled = asyncio.Event()

        async def hang(*args, **kwargs):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        session = mock_session()
        session.post.return_value.__aenter__ = AsyncMock(side_effect=hang)
        client = RemoteAnswerClient(ENDPOINT, timeout=0.05, session=session)

        with pytest.raises(RemoteCallError, match="timed out"):
            await client.ask("q", CONTEXT)

        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_close_closes_session(self):
        session = mock_session()
        session.close = AsyncMock()
        client = RemoteAnswerClient(ENDPOINT, session=session)

        await client.close()

        session.close.assert_awaited_once()
