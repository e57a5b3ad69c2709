"""Open profile links in the user's browser."""

from __future__ import annotations

import asyncio
import webbrowser
from logging import getLogger

log = getLogger(__name__)


class BrowserLinkOpener:
    async def open_link(self, url: str) -> None:
        log.debug(f"Opening {url}")
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            log.warning(f"No browser available to open {url}")
