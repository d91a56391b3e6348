"""Client for the remote answering service."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from asktabs.core.constants import DEFAULT_ANSWER_TIMEOUT
from asktabs.core.errors import RemoteCallError

logger = logging.getLogger(__name__)

ANSWER_PROMPT = """\
You are a helpful assistant that summarizes open browser tabs.

User has {count} tabs open. When asked "what tabs are open" or similar, \
provide a numbered list with brief descriptions.

Format:
1. "Exact Tab Title"
   Brief description of the content (one line)

2. "Next Tab Title"
   Brief description...

Available tabs:
{tabs}

User question: {question}

Remember: Use exact tab titles in quotes, provide helpful summaries."""


@dataclass(frozen=True)
class ContextItem:
    """One tab as offered to the remote service."""

    title: str
    excerpt: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "excerpt": self.excerpt}


def build_prompt(question: str, context: Sequence[ContextItem]) -> str:
    """Render the instruction prompt sent alongside the structured context."""
    tabs = "\n\n".join(
        f'{i}. "{item.title}"\n   {item.excerpt}...'
        for i, item in enumerate(context, start=1)
    )
    return ANSWER_PROMPT.format(count=len(context), tabs=tabs, question=question)


def extract_answer_text(data: Any) -> Optional[str]:
    """Pull the answer out of either supported response shape.

    Accepts ``{"answer": "..."}`` and the Gemini-style
    ``{"candidates": [{"content": {"parts": [{"text": "..."}]}}]}``.
    """
    if not isinstance(data, dict):
        return None
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        if isinstance(text, str) and text:
            return text
    except (KeyError, IndexError, TypeError):
        pass
    answer = data.get("answer")
    return answer if isinstance(answer, str) else None


class RemoteAnswerClient:
    """POSTs questions with tab context to the answering endpoint.

    Timeouts, network errors and non-success statuses all raise
    RemoteCallError. The timeout cancels the in-flight request.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_ANSWER_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _post(self, payload: Dict[str, Any]) -> Any:
        session = await self._get_session()
        async with session.post(self.endpoint, json=payload) as response:
            if response.status < 200 or response.status >= 300:
                raise RemoteCallError(
                    f"Answer service returned HTTP {response.status}",
                    status=response.status,
                )
            return await response.json(content_type=None)

    async def ask(self, question: str, context: List[ContextItem]) -> Optional[str]:
        """Send a question and return the raw answer text (may be None)."""
        payload = {
            "question": question,
            "context": [item.to_dict() for item in context],
            "prompt": build_prompt(question, context),
        }
        logger.info(f"Sending question to answer service ({len(context)} tabs)")
        try:
            data = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise RemoteCallError(
                f"Answer service timed out after {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            raise RemoteCallError(f"Network error calling answer service: {e}") from e
        except ValueError as e:
            raise RemoteCallError(f"Invalid JSON from answer service: {e}") from e

        return extract_answer_text(data)
