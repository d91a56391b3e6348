"""
Pytest configuration and shared fixtures.
"""

import asyncio
from typing import Dict, List, Optional, Union

import pytest

from asktabs.browser.base import PageCapture
from asktabs.core.errors import BrowserError, ScriptInjectionError, TabNotFoundError
from asktabs.core.models import Snapshot, TabDescriptor, TabRecord

# ============================================================================
# Sample Pages
# ============================================================================

ARTICLE_PARAGRAPH = (
    "Ownership is Rust's most unique feature and has deep implications for "
    "the rest of the language. It enables Rust to make memory safety "
    "guarantees without needing a garbage collector. "
)


def article_html(title: str = "Rust Book", repeat: int = 6) -> str:
    body = ARTICLE_PARAGRAPH * repeat
    return f"""
    <html>
    <head><title>{title}</title><script>var tracking = "noise";</script></head>
    <body>
        <nav>Home | Docs | Blog | Community | Sign in</nav>
        <main>
            <h1>{title}</h1>
            <p>{body}</p>
            <aside class="sidebar">Related: unrelated sidebar links</aside>
        </main>
        <footer>Copyright footer text</footer>
    </body>
    </html>
    """


@pytest.fixture
def sample_article_html():
    return article_html()


@pytest.fixture
def article_capture():
    """Factory for a fully loaded article PageCapture."""

    def _make(title: str = "Rust Book", repeat: int = 6) -> PageCapture:
        return PageCapture(html=article_html(title, repeat), ready_state="complete")

    return _make


# ============================================================================
# Fake Browser
# ============================================================================


class FakeBrowser:
    """In-memory BrowserGateway.

    pages maps tab id to a PageCapture, an exception to raise, or a float
    delay in seconds before a default page is returned.
    """

    def __init__(self, tabs: Optional[List[TabDescriptor]] = None):
        self.tabs: List[TabDescriptor] = list(tabs or [])
        self.pages: Dict[str, Union[PageCapture, Exception, float]] = {}
        self.denied_probes: set = set()
        self.list_error: Optional[Exception] = None
        self.capture_calls: List[str] = []
        self.activated: List[str] = []
        self.opened: List[str] = []

    def add_tab(
        self,
        tab_id: str,
        url: str,
        title: str = "",
        page: Union[PageCapture, Exception, float, None] = None,
    ) -> TabDescriptor:
        tab = TabDescriptor(id=tab_id, url=url, title=title)
        self.tabs.append(tab)
        if page is not None:
            self.pages[tab_id] = page
        return tab

    async def list_tabs(self) -> List[TabDescriptor]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.tabs)

    async def capture_page(self, tab: TabDescriptor) -> PageCapture:
        self.capture_calls.append(tab.id)
        page = self.pages.get(tab.id)
        if isinstance(page, Exception):
            raise page
        if isinstance(page, (int, float)):
            await asyncio.sleep(page)
            return PageCapture(html=article_html(tab.title), ready_state="complete")
        if page is None:
            raise ScriptInjectionError(tab.id, "no page registered")
        return page

    async def probe(self, tab: TabDescriptor) -> None:
        if tab.id in self.denied_probes:
            raise ScriptInjectionError(tab.id, "Cannot access contents of url")

    async def activate_tab(self, tab_id: str) -> None:
        if not any(t.id == tab_id for t in self.tabs):
            raise TabNotFoundError(tab_id)
        self.activated.append(tab_id)

    async def open_tab(self, url: str) -> TabDescriptor:
        if url.startswith("invalid:"):
            raise BrowserError(f"cannot open {url}")
        tab = TabDescriptor(id=f"new-{len(self.opened) + 1}", url=url)
        self.opened.append(url)
        self.tabs.append(tab)
        return tab

    async def close(self) -> None:
        pass


@pytest.fixture
def fake_browser():
    """Empty fake browser; tests add tabs with add_tab()."""
    return FakeBrowser()


# ============================================================================
# Record Fixtures
# ============================================================================


def make_record(
    tab_id: str,
    title: str,
    text: str = "",
    has_content: bool = True,
    summary: Optional[str] = None,
    url: Optional[str] = None,
) -> TabRecord:
    return TabRecord(
        id=tab_id,
        url=url or f"https://example.com/{tab_id}",
        title=title,
        favicon_url=f"https://example.com/{tab_id}.ico",
        text=text,
        summary=summary,
        has_content=has_content,
        length=len(text),
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def rust_snapshot():
    """Snapshot with one content-bearing tab about Rust."""
    text = ("The Rust Programming Language book covers ownership. " * 20)[:1000]
    return Snapshot.build([make_record("1", "Rust Book", text)], version=1)


@pytest.fixture
def mixed_snapshot():
    """Three content tabs and one failed tab."""
    return Snapshot.build(
        [
            make_record(
                "1",
                "Go Concurrency Patterns",
                "Goroutines and channels make golang concurrency simple. " * 10,
            ),
            make_record(
                "2",
                "Python Packaging Guide",
                "How to build wheels and publish with twine. " * 10,
            ),
            make_record("3", "Broken Page", "Restricted page", has_content=False),
            make_record(
                "4",
                "Cooking Pasta at Home",
                "Boil water, add salt, cook pasta al dente. " * 10,
            ),
        ],
        version=1,
    )
