"""Automation driver interface and its Playwright implementation."""

from __future__ import annotations

import base64
import logging
from typing import Any, Protocol

from playwright.async_api import Page

from visual_compare.models.config import CapabilitiesConfig

logger = logging.getLogger(__name__)


class AutomationDriver(Protocol):
    """What the pipeline needs from a live browser/device session."""

    async def capture_screenshot(self) -> str:
        """Return the current screenshot as a base64-encoded PNG."""
        ...

    async def run_page_script(self, script: str, args: Any) -> Any:
        """Run a JavaScript function expression in the page with ``args``."""
        ...

    async def get_session_capabilities(self) -> dict[str, Any]:
        ...


class PlaywrightDriver:
    """Drives a Playwright page.

    Playwright does not report mobile capabilities, so platform and device
    names come from the configured declaration.
    """

    def __init__(self, page: Page, capabilities: CapabilitiesConfig | None = None):
        self.page = page
        self.capabilities = capabilities or CapabilitiesConfig()

    async def capture_screenshot(self) -> str:
        png = await self.page.screenshot(full_page=False, type="png")
        return base64.b64encode(png).decode("ascii")

    async def run_page_script(self, script: str, args: Any) -> Any:
        return await self.page.evaluate(script, args)

    async def get_session_capabilities(self) -> dict[str, Any]:
        browser = self.page.context.browser
        browser_name = browser.browser_type.name if browser else ""
        caps = {"browser_name": browser_name, **self.capabilities.model_dump()}
        logger.debug("Session capabilities: %s", caps)
        return caps
