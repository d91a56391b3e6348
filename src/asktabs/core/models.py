"""Dataclasses for the tab corpus and answers.

All records are frozen: a refresh builds new objects instead of patching old
ones, and citations are copies so closing a tab never changes a past answer.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from .errors import ErrorKind


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        # Epoch milliseconds, as written by older state files
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class TabDescriptor:
    """An open tab as reported by the browser."""

    id: str
    url: str
    title: str = ""
    favicon_url: str = ""


@dataclass(frozen=True)
class TabRecord:
    """Normalized extraction result for one open tab."""

    id: str
    url: str
    title: str
    favicon_url: str = ""
    text: str = ""
    summary: Optional[str] = None
    has_content: bool = False
    length: int = 0
    error: Optional[ErrorKind] = None
    error_detail: Optional[str] = None
    is_extension: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "favicon_url": self.favicon_url,
            "text": self.text,
            "summary": self.summary,
            "has_content": self.has_content,
            "length": self.length,
            "error": self.error.value if self.error else None,
            "error_detail": self.error_detail,
            "is_extension": self.is_extension,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TabRecord":
        """Create from dictionary (loaded from JSON)."""
        error = data.get("error")
        return cls(
            id=str(data["id"]),
            url=data.get("url", ""),
            title=data.get("title", ""),
            favicon_url=data.get("favicon_url", ""),
            text=data.get("text", ""),
            summary=data.get("summary"),
            has_content=bool(data.get("has_content", False)),
            length=int(data.get("length", 0)),
            error=ErrorKind(error) if error else None,
            error_detail=data.get("error_detail"),
            is_extension=bool(data.get("is_extension", False)),
        )


@dataclass(frozen=True)
class SnapshotStats:
    """Aggregate counts computed once per refresh."""

    total: int = 0
    successful: int = 0
    summarized: int = 0
    failed: int = 0
    extensions: int = 0

    @classmethod
    def from_records(cls, records: Sequence[TabRecord]) -> "SnapshotStats":
        successful = sum(1 for r in records if r.has_content)
        return cls(
            total=len(records),
            successful=successful,
            summarized=sum(1 for r in records if r.summary),
            failed=len(records) - successful,
            extensions=sum(1 for r in records if r.is_extension),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "successful": self.successful,
            "summarized": self.summarized,
            "failed": self.failed,
            "extensions": self.extensions,
        }


@dataclass(frozen=True)
class Snapshot:
    """Immutable, timestamped collection of TabRecords from one refresh."""

    tabs: Tuple[TabRecord, ...] = ()
    last_updated: datetime = field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc)
    )
    stats: SnapshotStats = field(default_factory=SnapshotStats)
    version: int = 0

    @classmethod
    def build(
        cls,
        records: Sequence[TabRecord],
        version: int = 0,
        last_updated: Optional[datetime] = None,
    ) -> "Snapshot":
        """Build a snapshot whose stats are derived from its own records."""
        tabs = tuple(records)
        return cls(
            tabs=tabs,
            last_updated=last_updated or utc_now(),
            stats=SnapshotStats.from_records(tabs),
            version=version,
        )

    @property
    def content_tabs(self) -> List[TabRecord]:
        """TabRecords with usable content, in snapshot order."""
        return [t for t in self.tabs if t.has_content]

    @property
    def is_empty(self) -> bool:
        return not self.tabs

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tabs": [t.to_dict() for t in self.tabs],
            "last_updated": self.last_updated.isoformat(),
            "stats": self.stats.to_dict(),
            "version": self.version,
        }


@dataclass(frozen=True)
class Citation:
    """A copy of the TabRecord fields an answer refers to."""

    title: str
    url: str
    favicon_url: str
    tab_id: str

    @classmethod
    def from_tab(cls, tab: TabRecord) -> "Citation":
        return cls(
            title=tab.title,
            url=tab.url,
            favicon_url=tab.favicon_url,
            tab_id=tab.id,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "url": self.url,
            "favicon_url": self.favicon_url,
            "tab_id": self.tab_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Citation":
        return cls(
            title=data.get("title", ""),
            url=data.get("url", ""),
            favicon_url=data.get("favicon_url", ""),
            tab_id=str(data.get("tab_id", "")),
        )


@dataclass(frozen=True)
class AnswerResult:
    """An answer with its citations.

    Remote and local answers share this shape so callers cannot tell them
    apart.
    """

    answer: str
    citations: Tuple[Citation, ...] = ()
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "citations": [c.to_dict() for c in self.citations],
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Message:
    """One entry of the conversation log."""

    content: str
    role: Literal["user", "assistant"]
    citations: Tuple[Citation, ...] = ()
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "role": self.role,
            "citations": [c.to_dict() for c in self.citations],
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        role = data.get("role", "assistant")
        if role not in ("user", "assistant"):
            role = "assistant"
        return cls(
            content=data.get("content", ""),
            role=role,
            citations=tuple(
                Citation.from_dict(c) for c in data.get("citations") or []
            ),
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass
class PersistedState:
    """The single state blob read at startup and written after mutations."""

    messages: List[Message] = field(default_factory=list)
    tabs: List[TabRecord] = field(default_factory=list)
    last_tab_update: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "tabs": [t.to_dict() for t in self.tabs],
            "last_tab_update": (
                self.last_tab_update.isoformat() if self.last_tab_update else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersistedState":
        last = data.get("last_tab_update")
        return cls(
            messages=[Message.from_dict(m) for m in data.get("messages") or []],
            tabs=[TabRecord.from_dict(t) for t in data.get("tabs") or []],
            last_tab_update=_parse_timestamp(last) if last else None,
        )
