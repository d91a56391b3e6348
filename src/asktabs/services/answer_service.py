"""Answer synthesis: remote call with validation and a deterministic fallback.

Whatever happens on the remote path, answer() returns an AnswerResult. The
local answer depends on nothing but the snapshot, so for an unchanged
snapshot it is byte-identical across calls.
"""

import logging
from typing import List, Optional, Protocol

from asktabs.core.citations import CitationResolver
from asktabs.core.constants import (
    DEFAULT_EXCERPT_CHARS,
    DEFAULT_MAX_CONTEXT_TABS,
    DEFAULT_SNIPPET_CHARS,
    NO_CONTENT_ANSWER,
    REDIRECT_ANSWER,
)
from asktabs.core.errors import AnswerValidationError, RemoteCallError
from asktabs.core.extraction import collapse_whitespace
from asktabs.core.models import AnswerResult, Snapshot, TabRecord
from asktabs.core.relevance import QueryRelevanceClassifier
from asktabs.core.validation import AnswerValidator, QualityHeuristicValidator

from .answer_client import ContextItem

logger = logging.getLogger(__name__)


class AnswerClient(Protocol):
    async def ask(self, question: str, context: List[ContextItem]) -> Optional[str]: ...


class AnswerSynthesizer:
    """Answers questions about a snapshot.

    Args:
        client: Remote answering client. None means the remote path is
            disabled and every answer is built locally.
        classifier: Relevance gate for questions.
        validator: Quality check applied to remote answers.
        citation_resolver: Maps answer text back to tabs.
        max_context_tabs: How many content-bearing tabs are offered as context.
        excerpt_chars: Characters of text per tab in the remote context.
        snippet_chars: Characters of text per tab in the local answer.
    """

    def __init__(
        self,
        client: Optional[AnswerClient] = None,
        classifier: Optional[QueryRelevanceClassifier] = None,
        validator: Optional[AnswerValidator] = None,
        citation_resolver: Optional[CitationResolver] = None,
        max_context_tabs: int = DEFAULT_MAX_CONTEXT_TABS,
        excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
        snippet_chars: int = DEFAULT_SNIPPET_CHARS,
    ):
        self.client = client
        self.classifier = classifier or QueryRelevanceClassifier()
        self.validator = validator or QualityHeuristicValidator()
        self.citation_resolver = citation_resolver or CitationResolver()
        self.max_context_tabs = max_context_tabs
        self.excerpt_chars = excerpt_chars
        self.snippet_chars = snippet_chars

    def select_context_tabs(self, snapshot: Snapshot) -> List[TabRecord]:
        """First N content-bearing tabs in snapshot order (not ranked)."""
        return snapshot.content_tabs[: self.max_context_tabs]

    def build_context(self, tabs: List[TabRecord]) -> List[ContextItem]:
        context = []
        for tab in tabs:
            excerpt = collapse_whitespace(tab.text[: self.excerpt_chars])
            if tab.summary:
                excerpt = f"{tab.summary} {excerpt}"
            context.append(ContextItem(title=tab.title, excerpt=excerpt))
        return context

    def local_answer(self, tabs: List[TabRecord]) -> str:
        """Numbered list of the selected tabs with short snippets."""
        entries = [
            f'{i}. "{tab.title}"\n'
            f"   {collapse_whitespace(tab.text[: self.snippet_chars])}..."
            for i, tab in enumerate(tabs, start=1)
        ]
        return f"You have {len(tabs)} tabs open:\n\n" + "\n\n".join(entries)

    async def _remote_answer(self, question: str, tabs: List[TabRecord]) -> Optional[str]:
        """Validated remote answer, or None when the local answer must be used."""
        if self.client is None:
            return None
        try:
            raw = await self.client.ask(question, self.build_context(tabs))
            return self.validator(raw)
        except RemoteCallError as e:
            logger.warning(f"Remote answer failed, using local answer: {e}")
        except AnswerValidationError as e:
            logger.warning(f"Remote answer rejected, using local answer: {e.reason}")
        return None

    async def answer(self, question: str, snapshot: Snapshot) -> AnswerResult:
        """Answer a question from the snapshot's tab content."""
        if not self.classifier.is_relevant(question):
            return AnswerResult(answer=REDIRECT_ANSWER)

        selected = self.select_context_tabs(snapshot)
        if not selected:
            return AnswerResult(answer=NO_CONTENT_ANSWER)

        text = await self._remote_answer(question, selected)
        if text is None:
            text = self.local_answer(selected)

        citations = self.citation_resolver.resolve(
            text, snapshot.tabs, considered=selected
        )
        return AnswerResult(answer=text, citations=tuple(citations))
