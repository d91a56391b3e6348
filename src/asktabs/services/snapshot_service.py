"""Snapshot aggregation, publication and refresh scheduling.

The current Snapshot lives in a SnapshotStore and is only ever replaced
wholesale. Refreshes are serialized by the aggregator's lock, and every
published snapshot carries a version allocated when its refresh started, so
a slow refresh can never overwrite a newer one.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from asktabs.browser.base import BrowserGateway
from asktabs.core.errors import BrowserError, ErrorKind, TabEnumerationError
from asktabs.core.models import Snapshot, TabDescriptor, TabRecord

from .resolver import EXTRACTION_FAILED_TEXT, TabContentResolver

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Snapshot], None]


class SnapshotStore:
    """Single-writer holder of the current Snapshot.

    Readers get the immutable Snapshot object itself; there is no mutable
    handle to hold on to.
    """

    def __init__(self, initial: Optional[Snapshot] = None):
        self._snapshot = initial or Snapshot()
        self._next_version = self._snapshot.version + 1
        self._queues: List[asyncio.Queue] = []
        self._listeners: List[SnapshotListener] = []

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    @property
    def has_subscribers(self) -> bool:
        return bool(self._queues)

    def next_version(self) -> int:
        version = self._next_version
        self._next_version += 1
        return version

    def publish(self, snapshot: Snapshot) -> bool:
        """Replace the current snapshot unless it is older than the current one.

        Returns:
            True if the snapshot was published.
        """
        if snapshot.version <= self._snapshot.version:
            logger.warning(
                f"Discarding stale snapshot v{snapshot.version} "
                f"(current v{self._snapshot.version})"
            )
            return False

        self._snapshot = snapshot
        for queue in list(self._queues):
            if queue.full():
                # Subscribers only care about the latest snapshot
                queue.get_nowait()
            queue.put_nowait(snapshot)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Snapshot listener failed: {e}")
        return True

    def subscribe(self) -> asyncio.Queue:
        """Queue receiving every newly published snapshot."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._queues.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._queues:
            self._queues.remove(queue)

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)


class SnapshotAggregator:
    """Fans tab resolution out over all open tabs and publishes the result."""

    def __init__(
        self,
        gateway: BrowserGateway,
        resolver: TabContentResolver,
        store: SnapshotStore,
        excluded_prefixes: Sequence[str] = ("chrome://", "about:", "edge://"),
    ):
        self.gateway = gateway
        self.resolver = resolver
        self.store = store
        self.excluded_prefixes = tuple(excluded_prefixes)
        self._lock = asyncio.Lock()

    def is_eligible(self, tab: TabDescriptor) -> bool:
        """Browser system pages are never part of the corpus."""
        return bool(tab.url) and not tab.url.startswith(self.excluded_prefixes)

    async def _resolve(self, tab: TabDescriptor) -> TabRecord:
        try:
            return await self.resolver.resolve(tab)
        except Exception as e:
            logger.exception(f"Unexpected failure resolving tab {tab.id}")
            return TabRecord(
                id=tab.id,
                url=tab.url,
                title=tab.title or "Untitled",
                favicon_url=tab.favicon_url,
                text=EXTRACTION_FAILED_TEXT,
                error=ErrorKind.EXTRACTION_FAILURE,
                error_detail=str(e),
            )

    async def refresh(self) -> Snapshot:
        """Build and publish a new snapshot of all open tabs.

        Raises:
            TabEnumerationError: If the open tabs cannot be listed.
        """
        async with self._lock:
            version = self.store.next_version()
            logger.info(f"Refresh v{version} started")

            try:
                tabs = await self.gateway.list_tabs()
            except BrowserError as e:
                logger.error(f"Refresh v{version} failed: {e}")
                raise TabEnumerationError(str(e)) from e

            eligible = [tab for tab in tabs if self.is_eligible(tab)]
            records = await asyncio.gather(*(self._resolve(tab) for tab in eligible))

            unique: List[TabRecord] = []
            seen = set()
            for record in records:
                if record.id in seen:
                    continue
                seen.add(record.id)
                unique.append(record)

            snapshot = Snapshot.build(unique, version=version)
            self.store.publish(snapshot)

            stats = snapshot.stats
            logger.info(
                f"Refresh v{version}: {stats.successful}/{stats.total} tabs with content "
                f"({stats.extensions} extension pages, {stats.failed} failed)"
            )
            return snapshot


class RefreshScheduler:
    """Single consumer of refresh requests.

    Tab events, focus changes and the periodic timer all call
    request_refresh(); bursts within the debounce window collapse into one
    refresh. The periodic timer only fires while someone is subscribed.
    """

    def __init__(
        self,
        aggregator: SnapshotAggregator,
        debounce: float = 0.5,
        interval: float = 10.0,
    ):
        self.aggregator = aggregator
        self.debounce = debounce
        self.interval = interval
        self._requested = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def request_refresh(self, reason: str = "event") -> None:
        logger.debug(f"Refresh requested: {reason}")
        self._requested.set()

    async def start(self) -> None:
        """Start the background scheduler loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("RefreshScheduler started")

    async def stop(self) -> None:
        """Cancel the scheduler loop."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("RefreshScheduler stopped")

    async def _run(self) -> None:
        while True:
            try:
                await asyncio.wait_for(self._requested.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                if not self.aggregator.store.has_subscribers:
                    continue
            else:
                await asyncio.sleep(self.debounce)

            self._requested.clear()
            try:
                await self.aggregator.refresh()
            except TabEnumerationError as e:
                logger.warning(f"Scheduled refresh failed: {e}")
            except Exception:
                logger.exception("Scheduled refresh crashed")
