"""Per-tab content resolution.

Decides whether a tab may be read at all, runs extraction on the live page
and normalizes every outcome, including failures, into a TabRecord. Nothing
raised while handling one tab escapes resolve().
"""

import asyncio
import logging
from typing import Optional, Sequence

from asktabs.browser.base import BrowserGateway
from asktabs.core.constants import DEFAULT_TAB_TIMEOUT, SUCCESS_MIN_CHARS
from asktabs.core.errors import BrowserError, ErrorKind
from asktabs.core.extraction import PageTextExtractor
from asktabs.core.models import TabDescriptor, TabRecord

from .summarizer import Summarizer

logger = logging.getLogger(__name__)

EXTENSION_SCHEME = "chrome-extension:"
FILE_SCHEME = "file:"

RESTRICTED_TEXT = "Restricted page"
FILE_PERMISSION_TEXT = (
    'File URL - Enable "Allow access to file URLs" in extension settings'
)
NO_CONTENT_TEXT = "No extractable content"
EXTRACTION_FAILED_TEXT = "Extraction failed - no permission"


def describe_extension_page(tab: TabDescriptor) -> str:
    """One-line description for pages code cannot be injected into."""
    if "claude.ai" in tab.url:
        kind = "Claude AI conversation interface."
    else:
        kind = "Browser extension interface."
    return f"Extension page: {tab.title or 'Untitled'}. {kind}"


class TabContentResolver:
    """Turns a TabDescriptor into a TabRecord."""

    def __init__(
        self,
        gateway: BrowserGateway,
        extractor: Optional[PageTextExtractor] = None,
        summarizer: Optional[Summarizer] = None,
        restricted_schemes: Sequence[str] = (
            "chrome:",
            "edge:",
            "about:",
            "data:",
            "devtools:",
            "view-source:",
        ),
        tab_timeout: float = DEFAULT_TAB_TIMEOUT,
        success_min_chars: int = SUCCESS_MIN_CHARS,
    ):
        self.gateway = gateway
        self.extractor = extractor or PageTextExtractor()
        self.summarizer = summarizer
        self.restricted_schemes = tuple(restricted_schemes)
        self.tab_timeout = tab_timeout
        self.success_min_chars = success_min_chars

    def _base(
        self, tab: TabDescriptor, page_title: str = "", **fields
    ) -> TabRecord:
        return TabRecord(
            id=tab.id,
            url=tab.url,
            title=tab.title or page_title or "Untitled",
            favicon_url=tab.favicon_url,
            **fields,
        )

    async def resolve(self, tab: TabDescriptor) -> TabRecord:
        """Resolve one tab, applying the scheme policy in order."""
        url = tab.url or ""

        if url.startswith(self.restricted_schemes):
            return self._base(
                tab, text=RESTRICTED_TEXT, has_content=False, error=ErrorKind.RESTRICTED
            )

        if url.startswith(EXTENSION_SCHEME):
            description = describe_extension_page(tab)
            return self._base(
                tab,
                text=description,
                summary=f"Extension: {tab.title or 'Untitled'}",
                has_content=True,
                length=len(description),
                is_extension=True,
            )

        if url.startswith(FILE_SCHEME):
            try:
                await asyncio.wait_for(self.gateway.probe(tab), self.tab_timeout)
            except (BrowserError, asyncio.TimeoutError) as e:
                logger.info(f"No file access for tab {tab.id}: {e}")
                return self._base(
                    tab,
                    text=FILE_PERMISSION_TEXT,
                    has_content=False,
                    error=ErrorKind.PERMISSION_DENIED,
                    error_detail=str(e) or None,
                )

        return await self._extract(tab)

    async def _extract(self, tab: TabDescriptor) -> TabRecord:
        try:
            capture = await asyncio.wait_for(
                self.gateway.capture_page(tab), self.tab_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Tab {tab.id} extraction timed out after {self.tab_timeout}s")
            return self._base(
                tab,
                text=EXTRACTION_FAILED_TEXT,
                has_content=False,
                error=ErrorKind.EXTRACTION_FAILURE,
                error_detail="timeout",
            )
        except BrowserError as e:
            logger.warning(f"Tab {tab.id} extraction failed: {e}")
            return self._base(
                tab,
                text=EXTRACTION_FAILED_TEXT,
                has_content=False,
                error=ErrorKind.EXTRACTION_FAILURE,
                error_detail=str(e),
            )

        result = self.extractor.extract(capture.html, capture.ready_state)
        # The target list can lag behind document.title right after navigation
        page_title = capture.title or result.title

        if result.success and len(result.text) > self.success_min_chars:
            summary = None
            if self.summarizer is not None:
                summary = await self.summarizer.summarize(
                    tab.title or page_title, result.text
                )
            return self._base(
                tab,
                page_title,
                text=result.text,
                summary=summary,
                has_content=True,
                length=len(result.text),
            )

        return self._base(
            tab,
            page_title,
            text=result.text or NO_CONTENT_TEXT,
            has_content=False,
            length=len(result.text),
            error=ErrorKind.EXTRACTION_FAILURE,
            error_detail=result.error,
        )
