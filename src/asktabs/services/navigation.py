"""Bring a cited tab to the foreground."""

import logging
from dataclasses import dataclass
from typing import Optional

from asktabs.browser.base import BrowserGateway
from asktabs.core.errors import BrowserError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationResult:
    success: bool
    tab_id: Optional[str] = None
    error: Optional[str] = None


class NavigationService:
    """Activates an open tab with the URL, else the given tab, else opens one."""

    def __init__(self, gateway: BrowserGateway):
        self.gateway = gateway

    async def navigate(self, url: str, tab_id: Optional[str] = None) -> NavigationResult:
        try:
            for tab in await self.gateway.list_tabs():
                if tab.url == url:
                    await self.gateway.activate_tab(tab.id)
                    return NavigationResult(success=True, tab_id=tab.id)

            if tab_id:
                await self.gateway.activate_tab(tab_id)
                return NavigationResult(success=True, tab_id=tab_id)

            opened = await self.gateway.open_tab(url)
            return NavigationResult(success=True, tab_id=opened.id)
        except BrowserError as e:
            logger.warning(f"Navigation to {url} failed: {e}")
            return NavigationResult(success=False, error=str(e))
