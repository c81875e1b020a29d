"""LinkedIn login state machine"""

import asyncio
import logging
import time

from playwright.async_api import Error as PlaywrightError

from linkedin_autoapply.errors import BrowserClosedError, CheckpointTimeoutError, raise_if_closed
from linkedin_autoapply.models import AuthState, SessionState
from linkedin_autoapply.reporting.progress import AUTHENTICATED, ProgressReporter

log = logging.getLogger(__name__)

ROOT_URL = "https://www.linkedin.com"
LOGIN_URL = "https://www.linkedin.com/login"
FEED_URL = "https://www.linkedin.com/feed/"

AUTHENTICATED_ROUTES = ("/feed", "/mynetwork", "/in/")
SECURITY_CHECK_ROUTES = ("/checkpoint/", "/challenge")
NAV_BAR_SELECTOR = "nav.global-nav"

WAITING_NOTICE_INTERVAL = 10.0


def is_authenticated_url(url):
    return "linkedin.com" in url and any(route in url for route in AUTHENTICATED_ROUTES)


def is_security_check_url(url):
    return any(route in url for route in SECURITY_CHECK_ROUTES)


class Authenticator:
    """
    NOT_STARTED → NAVIGATING → AWAITING_LOGIN → (SECURITY_CHECK) → AUTHENTICATED

    The login wait is unbounded except for the stop signal; a positive
    login check only counts once it still holds after the debounce delay.
    Security checkpoints get a bounded sub-wait. A closed browser is fatal
    in every state.
    """

    def __init__(self, page, context, settings, reporter=None, clock=time.monotonic, sleep=asyncio.sleep):
        self.page = page
        self.context = context
        self.settings = settings
        self.reporter = reporter or ProgressReporter()
        self._clock = clock
        self._sleep = sleep
        self.session = SessionState()

    def _transition(self, state):
        if self.session.state is not state:
            log.info("Auth: %s → %s", self.session.state.value, state.value)
        self.session.state = state

    def _current_url(self):
        if self.page.is_closed():
            self._transition(AuthState.FATAL)
            raise BrowserClosedError("Browser closed during login")
        self.session.last_known_url = self.page.url
        return self.session.last_known_url

    async def _goto(self, url):
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=60000)
        except PlaywrightError as e:
            self._fail_if_closed(e)
            log.warning("Navigation to %s failed: %s", url, e)

    def _fail_if_closed(self, error):
        try:
            raise_if_closed(error)
        except BrowserClosedError:
            self._transition(AuthState.FATAL)
            raise

    async def _nav_bar_visible(self):
        try:
            return await self.page.locator(NAV_BAR_SELECTOR).first.is_visible(timeout=1000)
        except PlaywrightError as e:
            self._fail_if_closed(e)
            return False

    async def looks_logged_in(self):
        url = self._current_url()
        if is_security_check_url(url):
            return False
        return is_authenticated_url(url) or await self._nav_bar_visible()

    async def _confirmed(self):
        """Debounce: the logged-in signal must still hold after the delay"""
        await self._sleep(self.settings.login_debounce)
        return await self.looks_logged_in()

    def _authenticated(self):
        self._transition(AuthState.AUTHENTICATED)
        self.session.authenticated = True
        log.info("✓ Logged in to LinkedIn")
        self.reporter.emit(AUTHENTICATED, url=self.session.last_known_url)
        return True

    async def start(self):
        """Block until logged in. False only when stopped before authenticating."""
        self._transition(AuthState.NAVIGATING)
        await self._goto(ROOT_URL)

        if await self.looks_logged_in() and await self._confirmed():
            return self._authenticated()

        await self._goto(LOGIN_URL)
        self._transition(AuthState.AWAITING_LOGIN)
        log.info("Waiting for manual login in the browser window...")
        last_notice = self._clock()

        while True:
            if self.context.stop.is_set():
                log.info("Stop requested before login completed")
                return False

            url = self._current_url()
            if is_security_check_url(url):
                await self._await_security_check()
                continue

            if await self.looks_logged_in() and await self._confirmed():
                if "/login" in self._current_url():
                    await self._goto(FEED_URL)
                return self._authenticated()

            if self._clock() - last_notice >= WAITING_NOTICE_INTERVAL:
                log.info("Still waiting for login (%s)", url)
                last_notice = self._clock()
            await self._sleep(self.settings.login_poll_interval)

    async def _await_security_check(self):
        self._transition(AuthState.SECURITY_CHECK)
        log.info("Security checkpoint detected, complete it in the browser (max %.0fs)", self.settings.checkpoint_timeout)
        deadline = self._clock() + self.settings.checkpoint_timeout

        while is_security_check_url(self._current_url()):
            if self.context.stop.is_set():
                return
            if self._clock() >= deadline:
                self._transition(AuthState.FATAL)
                raise CheckpointTimeoutError()
            await self._sleep(self.settings.checkpoint_poll_interval)

        log.info("Security checkpoint passed")
        self._transition(AuthState.AWAITING_LOGIN)
