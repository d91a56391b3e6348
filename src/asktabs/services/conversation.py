"""Conversation log and the persisted state blob."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from asktabs.app_utils.file_utils import atomic_write_json, read_json
from asktabs.core.constants import GREETING
from asktabs.core.models import Citation, Message, PersistedState, Snapshot

logger = logging.getLogger(__name__)


class StateStore:
    """Reads and writes ``{messages, tabs, last_tab_update}`` as one JSON file."""

    def __init__(self, state_file: Union[str, Path]):
        self.state_file = Path(state_file)

    def load(self) -> PersistedState:
        """Load state; a missing or unreadable file yields empty state."""
        try:
            data = read_json(self.state_file)
            if data is None:
                return PersistedState()
            return PersistedState.from_dict(data)
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state file {self.state_file}: {e}")
            return PersistedState()

    def save(self, state: PersistedState) -> None:
        atomic_write_json(self.state_file, state.to_dict())


class ConversationLog:
    """Append-only message log with a single-writer lock.

    Every mutation is followed by a write of the whole state blob, using the
    most recent snapshot handed to remember_snapshot().
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        messages: Sequence[Message] = (),
        snapshot: Optional[Snapshot] = None,
    ):
        self.store = store
        self._messages: List[Message] = list(messages)
        self._snapshot = snapshot
        self._lock = asyncio.Lock()

    @classmethod
    def from_store(cls, store: StateStore) -> "ConversationLog":
        state = store.load()
        snapshot = None
        if state.tabs or state.last_tab_update:
            snapshot = Snapshot.build(state.tabs, last_updated=state.last_tab_update)
        return cls(store=store, messages=state.messages, snapshot=snapshot)

    @property
    def restored_snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    def remember_snapshot(self, snapshot: Snapshot) -> None:
        """Snapshot listener: keep the latest tabs for the next save."""
        self._snapshot = snapshot
        self._persist()

    def _persist(self) -> None:
        if self.store is None:
            return
        snapshot = self._snapshot
        state = PersistedState(
            messages=list(self._messages),
            tabs=list(snapshot.tabs) if snapshot else [],
            last_tab_update=snapshot.last_updated if snapshot else None,
        )
        try:
            self.store.save(state)
        except (OSError, TypeError) as e:
            logger.error(f"Error saving state: {e}")

    async def append(
        self,
        content: str,
        role: str,
        citations: Sequence[Citation] = (),
    ) -> Message:
        message = Message(content=content, role=role, citations=tuple(citations))
        async with self._lock:
            self._messages.append(message)
            self._persist()
        return message

    async def clear(self) -> List[Message]:
        """Drop all messages and start over with the greeting."""
        async with self._lock:
            self._messages = [Message(content=GREETING, role="assistant")]
            self._persist()
            return list(self._messages)
