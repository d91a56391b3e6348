"""Service layer for AskTabs.

Aggregation, answering, conversation and navigation services, independent of
the HTTP layer that exposes them.
"""

from .answer_client import ContextItem, RemoteAnswerClient
from .answer_service import AnswerSynthesizer
from .ask_service import AskService
from .config_service import ConfigService
from .conversation import ConversationLog, StateStore
from .navigation import NavigationResult, NavigationService
from .resolver import TabContentResolver
from .snapshot_service import RefreshScheduler, SnapshotAggregator, SnapshotStore
from .summarizer import OllamaSummarizer

__all__ = [
    "AnswerSynthesizer",
    "AskService",
    "ConfigService",
    "ContextItem",
    "ConversationLog",
    "NavigationResult",
    "NavigationService",
    "OllamaSummarizer",
    "RefreshScheduler",
    "RemoteAnswerClient",
    "SnapshotAggregator",
    "SnapshotStore",
    "StateStore",
    "TabContentResolver",
]
