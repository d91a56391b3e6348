"""Resolve which tabs an answer refers to."""

import re
from typing import List, Optional, Protocol, Sequence

from .constants import MIN_CITABLE_TITLE_CHARS
from .models import Citation, TabRecord


class TitleMatcher(Protocol):
    """Decides whether an answer text references a title."""

    def matches(self, title: str, answer: str) -> bool: ...


class QuotedTitleMatcher:
    """Literal, case-insensitive match of ``"<title>"`` in the answer."""

    def matches(self, title: str, answer: str) -> bool:
        pattern = re.compile(f'"{re.escape(title)}"', re.IGNORECASE)
        return pattern.search(answer) is not None


class CitationResolver:
    """Builds citations for an answer from candidate tabs.

    Citations follow the order candidates were scanned, not the order titles
    appear in the answer. When nothing matches, every tab that was offered as
    context is cited instead.
    """

    def __init__(
        self,
        matcher: Optional[TitleMatcher] = None,
        min_title_chars: int = MIN_CITABLE_TITLE_CHARS,
    ):
        self.matcher = matcher or QuotedTitleMatcher()
        self.min_title_chars = min_title_chars

    def match(self, answer: str, candidates: Sequence[TabRecord]) -> List[Citation]:
        """Citations for candidates whose title the answer quotes."""
        if not answer:
            return []
        return [
            Citation.from_tab(tab)
            for tab in candidates
            if tab.title
            and len(tab.title) >= self.min_title_chars
            and self.matcher.matches(tab.title, answer)
        ]

    def resolve(
        self,
        answer: str,
        candidates: Sequence[TabRecord],
        considered: Sequence[TabRecord] = (),
    ) -> List[Citation]:
        """Match citations, falling back to every considered tab."""
        citations = self.match(answer, candidates)
        if citations:
            return citations
        return [Citation.from_tab(tab) for tab in considered]
