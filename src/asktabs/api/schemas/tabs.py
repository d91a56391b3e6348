"""Tab snapshot schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from asktabs.core.models import Snapshot, TabRecord


class TabRecordResponse(BaseModel):
    """One tab in a snapshot."""

    id: str
    url: str
    title: str
    favicon_url: str = ""
    text: str = ""
    summary: Optional[str] = None
    has_content: bool = False
    length: int = 0
    error: Optional[str] = None
    error_detail: Optional[str] = None
    is_extension: bool = False

    @classmethod
    def from_record(cls, record: TabRecord) -> "TabRecordResponse":
        return cls(**record.to_dict())


class SnapshotStatsResponse(BaseModel):
    total: int
    successful: int
    summarized: int
    failed: int
    extensions: int = 0


class SnapshotResponse(BaseModel):
    """A published snapshot."""

    tabs: List[TabRecordResponse] = Field(default_factory=list)
    last_updated: datetime
    stats: SnapshotStatsResponse
    version: int

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotResponse":
        return cls(
            tabs=[TabRecordResponse.from_record(t) for t in snapshot.tabs],
            last_updated=snapshot.last_updated,
            stats=SnapshotStatsResponse(**snapshot.stats.to_dict()),
            version=snapshot.version,
        )


class TabEventRequest(BaseModel):
    """A tab lifecycle event that should trigger a refresh."""

    kind: Literal["created", "updated", "removed", "focus", "manual"] = "manual"
    tab_id: Optional[str] = None


class TabEventResponse(BaseModel):
    accepted: bool = True
