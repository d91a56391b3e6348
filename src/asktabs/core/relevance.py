"""Heuristic gate deciding whether a question is about the open tabs."""

import logging
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

TAB_KEYWORDS = (
    "tab",
    "page",
    "open",
    "website",
    "site",
    "url",
    "link",
    "article",
    "reading",
    "browsing",
)

GENERIC_KEYWORDS = (
    "what is",
    "who is",
    "how to",
    "why",
    "when",
    "define",
    "explain",
    "tell me about",
)


@dataclass
class QueryRelevanceClassifier:
    """Keyword classifier biased toward answering from tab content.

    Tab vocabulary wins over generic-knowledge vocabulary, and questions that
    match neither are treated as relevant.
    """

    tab_keywords: Sequence[str] = TAB_KEYWORDS
    generic_keywords: Sequence[str] = GENERIC_KEYWORDS

    def is_relevant(self, question: str) -> bool:
        q = question.lower()
        if any(kw in q for kw in self.tab_keywords):
            return True
        if any(kw in q for kw in self.generic_keywords):
            logger.debug(f"Question classified as general knowledge: {question!r}")
            return False
        return True
