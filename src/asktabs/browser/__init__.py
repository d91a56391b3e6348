"""Browser access for the tab pipeline."""

from .base import BrowserGateway, PageCapture
from .cdp import CDPBrowserGateway

__all__ = ["BrowserGateway", "CDPBrowserGateway", "PageCapture"]
