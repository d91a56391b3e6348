"""Browser gateway over the Chrome DevTools Protocol.

Talks to a Chromium-family browser started with ``--remote-debugging-port``.
Tab management uses the HTTP endpoints; page access opens a short-lived
WebSocket per tab and runs ``Runtime.evaluate``.
"""

import asyncio
import itertools
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp

from asktabs.core.constants import DEFAULT_CDP_URL
from asktabs.core.errors import BrowserError, ScriptInjectionError, TabNotFoundError
from asktabs.core.models import TabDescriptor

from .base import PageCapture

logger = logging.getLogger(__name__)

CAPTURE_EXPRESSION = (
    "({"
    "html: document.documentElement ? document.documentElement.outerHTML : '', "
    "readyState: document.readyState, "
    "title: document.title || ''"
    "})"
)

PROBE_EXPRESSION = "true"


class CDPBrowserGateway:
    """BrowserGateway backed by the DevTools HTTP and WebSocket endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_CDP_URL,
        request_timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the gateway.

        Args:
            base_url: DevTools endpoint, e.g. ``http://localhost:9222``.
            request_timeout: Timeout in seconds for each HTTP call.
            session: Optional shared session. One is created lazily otherwise.
        """
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self._session = session
        self._owns_session = session is None
        self._ws_urls: Dict[str, str] = {}
        self._message_ids = itertools.count(1)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this gateway created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def _targets(self) -> List[Dict[str, Any]]:
        session = await self._get_session()
        try:
            async with session.get(f"{self.base_url}/json/list") as response:
                if response.status != 200:
                    raise BrowserError(f"HTTP {response.status} listing targets")
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BrowserError(f"Cannot reach browser at {self.base_url}: {e}") from e
        except (ValueError, TypeError) as e:
            raise BrowserError(f"Invalid target list from {self.base_url}: {e}") from e
        if not isinstance(payload, list):
            raise BrowserError(
                f"Invalid target list from {self.base_url}: expected a JSON array"
            )
        return payload

    async def list_tabs(self) -> List[TabDescriptor]:
        targets = await self._targets()
        tabs = []
        for target in targets:
            if not isinstance(target, dict) or target.get("type") != "page":
                continue
            tab_id = str(target.get("id", ""))
            if not tab_id:
                continue
            if target.get("webSocketDebuggerUrl"):
                self._ws_urls[tab_id] = target["webSocketDebuggerUrl"]
            tabs.append(
                TabDescriptor(
                    id=tab_id,
                    url=target.get("url", ""),
                    title=target.get("title", ""),
                    favicon_url=target.get("faviconUrl", ""),
                )
            )
        logger.debug(f"Browser reports {len(tabs)} page targets")
        return tabs

    async def _ws_url(self, tab_id: str) -> str:
        if tab_id not in self._ws_urls:
            await self.list_tabs()
        try:
            return self._ws_urls[tab_id]
        except KeyError:
            # Another DevTools client may already be attached to the tab
            raise ScriptInjectionError(tab_id, "no debugger URL for target")

    async def evaluate(self, tab_id: str, expression: str) -> Any:
        """Evaluate a JavaScript expression in a tab and return its value.

        Raises:
            ScriptInjectionError: On connection failure or a thrown exception.
        """
        ws_url = await self._ws_url(tab_id)
        session = await self._get_session()
        message_id = next(self._message_ids)
        request = {
            "id": message_id,
            "method": "Runtime.evaluate",
            "params": {"expression": expression, "returnByValue": True},
        }
        try:
            async with session.ws_connect(ws_url, max_msg_size=0) as ws:
                await ws.send_json(request)
                async for msg in ws:
                    if msg.type != aiohttp.WSMsgType.TEXT:
                        break
                    data = json.loads(msg.data)
                    if data.get("id") != message_id:
                        continue
                    if "error" in data:
                        raise ScriptInjectionError(
                            tab_id, data["error"].get("message", "unknown error")
                        )
                    result = data.get("result", {})
                    if "exceptionDetails" in result:
                        detail = result["exceptionDetails"].get("text", "exception")
                        raise ScriptInjectionError(tab_id, detail)
                    return result.get("result", {}).get("value")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._ws_urls.pop(tab_id, None)
            raise ScriptInjectionError(tab_id, str(e)) from e
        raise ScriptInjectionError(tab_id, "connection closed before reply")

    async def capture_page(self, tab: TabDescriptor) -> PageCapture:
        value = await self.evaluate(tab.id, CAPTURE_EXPRESSION)
        if not isinstance(value, dict):
            raise ScriptInjectionError(tab.id, "unexpected capture result")
        return PageCapture(
            html=value.get("html") or "",
            ready_state=value.get("readyState"),
            title=value.get("title") or "",
        )

    async def probe(self, tab: TabDescriptor) -> None:
        await self.evaluate(tab.id, PROBE_EXPRESSION)

    async def activate_tab(self, tab_id: str) -> None:
        session = await self._get_session()
        try:
            async with session.get(
                f"{self.base_url}/json/activate/{tab_id}"
            ) as response:
                if response.status == 404:
                    raise TabNotFoundError(tab_id)
                if response.status != 200:
                    raise BrowserError(f"HTTP {response.status} activating {tab_id}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BrowserError(f"Failed to activate tab {tab_id}: {e}") from e

    async def open_tab(self, url: str) -> TabDescriptor:
        session = await self._get_session()
        try:
            async with session.put(
                f"{self.base_url}/json/new?{quote(url, safe='')}"
            ) as response:
                if response.status != 200:
                    raise BrowserError(f"HTTP {response.status} opening {url}")
                target = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BrowserError(f"Failed to open {url}: {e}") from e

        tab_id = str(target.get("id", ""))
        if target.get("webSocketDebuggerUrl"):
            self._ws_urls[tab_id] = target["webSocketDebuggerUrl"]
        return TabDescriptor(
            id=tab_id,
            url=target.get("url", url),
            title=target.get("title", ""),
            favicon_url=target.get("faviconUrl", ""),
        )
