"""Question answering, conversation and navigation schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from asktabs.core.models import AnswerResult, Citation, Message


class AskRequest(BaseModel):
    """Request body for the ask endpoint."""

    question: str = Field(..., min_length=1)
    mode: Literal["auto", "keyword"] = "auto"


class CitationResponse(BaseModel):
    title: str
    url: str
    favicon_url: str = ""
    tab_id: str

    @classmethod
    def from_citation(cls, citation: Citation) -> "CitationResponse":
        return cls(**citation.to_dict())


class AnswerResponse(BaseModel):
    answer: str
    citations: List[CitationResponse] = Field(default_factory=list)
    timestamp: datetime

    @classmethod
    def from_result(cls, result: AnswerResult) -> "AnswerResponse":
        return cls(
            answer=result.answer,
            citations=[CitationResponse.from_citation(c) for c in result.citations],
            timestamp=result.timestamp,
        )


class MessageResponse(BaseModel):
    content: str
    role: Literal["user", "assistant"]
    citations: List[CitationResponse] = Field(default_factory=list)
    timestamp: datetime

    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            content=message.content,
            role=message.role,
            citations=[CitationResponse.from_citation(c) for c in message.citations],
            timestamp=message.timestamp,
        )


class MessagesResponse(BaseModel):
    messages: List[MessageResponse] = Field(default_factory=list)


class NavigateRequest(BaseModel):
    url: str = Field(..., min_length=1)
    tab_id: Optional[str] = None


class NavigateResponse(BaseModel):
    success: bool
    tab_id: Optional[str] = None
    error: Optional[str] = None
