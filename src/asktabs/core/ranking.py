"""Keyword overlap ranking used when the remote answer path is bypassed."""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .constants import (
    DEFAULT_KEYWORD_SNIPPET_CHARS,
    DEFAULT_KEYWORD_TOP_K,
    KEYWORD_NO_CONTENT_ANSWER,
    KEYWORD_NO_MATCH_ANSWER,
)
from .extraction import collapse_whitespace
from .models import AnswerResult, Citation, TabRecord

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def tokenize(question: str) -> List[str]:
    """Lowercase alphanumeric words longer than two characters."""
    return [w for w in _TOKEN_SPLIT.split(question.lower()) if len(w) > 2]


@dataclass
class KeywordFallbackRanker:
    """Scores tabs by how many question tokens appear in their content.

    Deterministic: ties keep snapshot order (the sort is stable).
    """

    top_k: int = DEFAULT_KEYWORD_TOP_K
    snippet_chars: int = DEFAULT_KEYWORD_SNIPPET_CHARS

    def score(self, tokens: Sequence[str], tab: TabRecord) -> int:
        haystack = f"{tab.title}\n{tab.text}\n{tab.summary or ''}".lower()
        return sum(1 for token in tokens if token in haystack)

    def rank(
        self, question: str, tabs: Sequence[TabRecord]
    ) -> List[Tuple[TabRecord, int]]:
        """Top-K content-bearing tabs with a positive score, best first."""
        tokens = tokenize(question)
        scored = [(tab, self.score(tokens, tab)) for tab in tabs if tab.has_content]
        scored = [item for item in scored if item[1] > 0]
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[: self.top_k]

    def snippet(self, tab: TabRecord) -> str:
        if tab.summary:
            return tab.summary
        return collapse_whitespace(tab.text[: self.snippet_chars]) + "..."

    def answer(self, question: str, tabs: Sequence[TabRecord]) -> AnswerResult:
        """Compose an answer listing the winning tabs."""
        if not any(tab.has_content for tab in tabs):
            return AnswerResult(answer=KEYWORD_NO_CONTENT_ANSWER)

        ranked = self.rank(question, tabs)
        if not ranked:
            return AnswerResult(answer=KEYWORD_NO_MATCH_ANSWER)

        lines = [
            f'{i}. "{tab.title}"\n   {self.snippet(tab)}'
            for i, (tab, _) in enumerate(ranked, start=1)
        ]
        return AnswerResult(
            answer="Found relevant content:\n\n" + "\n\n".join(lines),
            citations=tuple(Citation.from_tab(tab) for tab, _ in ranked),
        )
