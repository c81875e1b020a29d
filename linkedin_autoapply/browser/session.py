"""Browser session management"""

import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class BrowserSession:
    playwright: object
    context: object
    page: object

    async def close(self):
        """Close the context and stop Playwright. Safe on an already closed browser."""
        try:
            await self.context.close()
        except PlaywrightError as e:
            log.debug("Context already closed: %s", e)
        await self.playwright.stop()


async def launch_browser(user_data_dir="./browser_data", headless=False):
    """
    Launch a persistent browser context and return a BrowserSession.
    Reuses the login session across runs.
    """
    log.info("Launching browser (profile: %s)", user_data_dir)

    p = await async_playwright().start()

    context = await p.chromium.launch_persistent_context(
        user_data_dir=user_data_dir,
        headless=headless,
        args=[
            "--disable-blink-features=AutomationControlled",
            "--disable-features=site-per-process",
        ],
        user_agent=USER_AGENT,
    )

    page = context.pages[0] if context.pages else await context.new_page()

    return BrowserSession(playwright=p, context=context, page=page)
