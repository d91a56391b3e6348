"""Core pipeline: data model, extraction, ranking, citations and validation."""

from .citations import CitationResolver, QuotedTitleMatcher, TitleMatcher
from .errors import (
    AnswerValidationError,
    AskTabsError,
    BrowserError,
    ErrorKind,
    RemoteCallError,
    ScriptInjectionError,
    TabEnumerationError,
    TabNotFoundError,
)
from .extraction import ExtractionResult, PageTextExtractor
from .models import (
    AnswerResult,
    Citation,
    Message,
    PersistedState,
    Snapshot,
    SnapshotStats,
    TabDescriptor,
    TabRecord,
)
from .ranking import KeywordFallbackRanker
from .relevance import QueryRelevanceClassifier
from .validation import AnswerValidator, QualityHeuristicValidator

__all__ = [
    "AnswerResult",
    "AnswerValidationError",
    "AnswerValidator",
    "AskTabsError",
    "BrowserError",
    "Citation",
    "CitationResolver",
    "ErrorKind",
    "ExtractionResult",
    "KeywordFallbackRanker",
    "Message",
    "PageTextExtractor",
    "PersistedState",
    "QualityHeuristicValidator",
    "QueryRelevanceClassifier",
    "QuotedTitleMatcher",
    "RemoteCallError",
    "ScriptInjectionError",
    "Snapshot",
    "SnapshotStats",
    "TabDescriptor",
    "TabEnumerationError",
    "TabNotFoundError",
    "TabRecord",
    "TitleMatcher",
]
