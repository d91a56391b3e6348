"""Short per-tab summaries from a local Ollama model.

Summaries are a nice-to-have: every failure, including the timeout, degrades
to no summary and is never surfaced to the user.
"""

import asyncio
import logging
import re
from typing import Optional, Protocol

import aiohttp

from asktabs.core.constants import (
    DEFAULT_SUMMARIZER_TIMEOUT,
    SUMMARIZER_INPUT_CHARS,
    SUMMARIZER_MIN_CHARS,
)

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """\
Write a tl;dr of the following web page in at most two short sentences.
Output plain text only.

{title}

{text}
"""

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


class Summarizer(Protocol):
    async def summarize(self, title: str, text: str) -> Optional[str]: ...


def first_sentences(text: str, count: int = 2) -> Optional[str]:
    """Keep the first ``count`` sentences of text."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    if not sentences:
        return None
    return ". ".join(sentences[:count]) + "."


class OllamaSummarizer:
    """Summarizer calling Ollama's ``/api/generate`` endpoint."""

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = DEFAULT_SUMMARIZER_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _generate(self, prompt: str) -> str:
        session = await self._get_session()
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        async with session.post(f"{self.base_url}/api/generate", json=payload) as resp:
            if resp.status != 200:
                raise aiohttp.ClientResponseError(
                    resp.request_info, resp.history, status=resp.status
                )
            data = await resp.json(content_type=None)
        return data.get("response", "")

    async def summarize(self, title: str, text: str) -> Optional[str]:
        """Two-sentence summary, or None if too short, slow or failing."""
        if not text or len(text) < SUMMARIZER_MIN_CHARS:
            return None

        prompt = SUMMARY_PROMPT.format(title=title, text=text[:SUMMARIZER_INPUT_CHARS])
        try:
            raw = await asyncio.wait_for(self._generate(prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Summarization timed out for {title!r}")
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.debug(f"Summarization failed for {title!r}: {e}")
            return None

        return first_sentences(raw)
