"""Plain-text extraction from a page's DOM.

Three strategies run in order, each trading precision for recall: the
longest main-content region, then the whole body, then a harvest of
paragraph-like blocks. The first one that yields enough text wins.
"""

import copy
import logging
import re
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .constants import (
    BLOCK_MAX_CHARS,
    BLOCK_MIN_CHARS,
    BLOCKS_TOTAL_CHARS,
    BODY_SUFFICIENT,
    MAIN_CONTENT_FLOOR,
    MAIN_CONTENT_SUFFICIENT,
    MAX_TEXT_CHARS,
    SUCCESS_MIN_CHARS,
)

logger = logging.getLogger(__name__)

MAIN_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    ".content",
    ".main-content",
    "#main-content",
    ".post-content",
    ".entry-content",
    ".story-content",
    "#content",
    ".body",
    ".text",
]

# Subtrees removed from a main-content candidate
REGION_NOISE = (
    "script, style, nav, header, footer, aside, "
    ".ad, .ads, .navigation, .menu, .sidebar, .comments, .social-share"
)

# Subtrees removed from the body fallback
BODY_NOISE = (
    "script, style, noscript, template, nav, header, footer, aside, "
    ".ad, .ads, .advertisement, .navigation, .menu, .sidebar, "
    ".comments, .social-share, .share-buttons, .newsletter, "
    ".popup, .modal, .cookie-consent, .newsletter-signup"
)

BLOCK_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li, div"

LOADING_TEXT = "Page still loading..."

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of running the extraction cascade on one page."""

    text: str
    length: int
    title: str
    success: bool
    strategy: Optional[str] = None
    error: Optional[str] = None


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def strip_noise(element: Tag, selector: str) -> Tag:
    """Return a copy of element with every subtree matching selector removed."""
    if isinstance(element, BeautifulSoup):
        # Fragment without <body>: re-parse rather than copy the document
        clone = BeautifulSoup(str(element), "html.parser")
    else:
        clone = copy.copy(element)
    for tag in clone.select(selector):
        tag.extract()
    return clone


def _clean_text(element: Tag) -> str:
    return collapse_whitespace(element.get_text(" "))


class PageTextExtractor:
    """Extracts cleaned plain text from page HTML."""

    def __init__(
        self,
        max_chars: int = MAX_TEXT_CHARS,
        success_min_chars: int = SUCCESS_MIN_CHARS,
        parser: str = "html.parser",
    ):
        self.max_chars = max_chars
        self.success_min_chars = success_min_chars
        self.parser = parser

    def extract(self, html: str, ready_state: Optional[str] = None) -> ExtractionResult:
        """Run the cascade on a serialized page.

        Args:
            html: The page's serialized DOM.
            ready_state: ``document.readyState`` at capture time, if known.

        Returns:
            ExtractionResult; never raises for malformed pages.
        """
        if ready_state == "loading":
            return ExtractionResult(
                text=LOADING_TEXT, length=len(LOADING_TEXT), title="", success=False
            )

        try:
            soup = BeautifulSoup(html or "", self.parser)
            title_tag = soup.find("title")
            title = title_tag.get_text(strip=True) if title_tag else ""

            strategy = "main"
            text = self._main_content_text(soup)

            if len(text) < MAIN_CONTENT_SUFFICIENT:
                strategy = "body"
                text = self._body_text(soup)

            if len(text) < BODY_SUFFICIENT:
                strategy = "blocks"
                text = self._block_text(soup)
        except Exception as e:
            logger.warning(f"Extraction failed: {e}")
            return ExtractionResult(
                text="", length=0, title="", success=False, error=str(e)
            )

        return ExtractionResult(
            text=text[: self.max_chars],
            length=len(text),
            title=title,
            success=len(text) >= self.success_min_chars,
            strategy=strategy,
        )

    def _main_content_text(self, soup: BeautifulSoup) -> str:
        """Longest cleaned main-content region above the floor."""
        best = ""
        for selector in MAIN_SELECTORS:
            for element in soup.select(selector):
                text = _clean_text(strip_noise(element, REGION_NOISE))
                if len(text) > len(best) and len(text) > MAIN_CONTENT_FLOOR:
                    best = text
        return best

    def _body_text(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        return _clean_text(strip_noise(body, BODY_NOISE))

    def _block_text(self, soup: BeautifulSoup) -> str:
        """Join mid-sized paragraph, heading and list blocks."""
        texts = []
        for element in soup.select(BLOCK_SELECTOR):
            text = _clean_text(element)
            if BLOCK_MIN_CHARS < len(text) < BLOCK_MAX_CHARS:
                texts.append(text)
        return " ".join(texts)[:BLOCKS_TOTAL_CHARS]
