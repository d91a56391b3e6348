"""Browser gateway interface.

The pipeline never talks to a browser directly; it goes through an object
satisfying BrowserGateway so the aggregation logic can run against the CDP
gateway in production and against fakes in tests.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from asktabs.core.models import TabDescriptor


@dataclass(frozen=True)
class PageCapture:
    """Serialized DOM of a live page."""

    html: str
    ready_state: Optional[str] = None
    title: str = ""


@runtime_checkable
class BrowserGateway(Protocol):
    """Operations the pipeline needs from the browser."""

    async def list_tabs(self) -> List[TabDescriptor]:
        """All open tabs across all windows.

        Raises:
            BrowserError: If the browser cannot be reached.
        """
        ...

    async def capture_page(self, tab: TabDescriptor) -> PageCapture:
        """Serialize the live DOM of a tab.

        Raises:
            ScriptInjectionError: If code cannot run inside the page.
        """
        ...

    async def probe(self, tab: TabDescriptor) -> None:
        """Check that code can run inside the page.

        Raises:
            ScriptInjectionError: If access is not granted.
        """
        ...

    async def activate_tab(self, tab_id: str) -> None:
        """Bring a tab to the foreground.

        Raises:
            TabNotFoundError: If the tab is gone.
        """
        ...

    async def open_tab(self, url: str) -> TabDescriptor:
        """Open a new foreground tab."""
        ...
