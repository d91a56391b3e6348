"""Pydantic schemas for API request/response models."""

from .ask import (
    AnswerResponse,
    AskRequest,
    CitationResponse,
    MessageResponse,
    MessagesResponse,
    NavigateRequest,
    NavigateResponse,
)
from .common import ErrorResponse, HealthResponse
from .tabs import (
    SnapshotResponse,
    SnapshotStatsResponse,
    TabEventRequest,
    TabEventResponse,
    TabRecordResponse,
)

__all__ = [
    "AnswerResponse",
    "AskRequest",
    "CitationResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "MessagesResponse",
    "NavigateRequest",
    "NavigateResponse",
    "SnapshotResponse",
    "SnapshotStatsResponse",
    "TabEventRequest",
    "TabEventResponse",
    "TabRecordResponse",
]
