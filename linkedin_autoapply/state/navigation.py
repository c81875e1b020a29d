"""Easy Apply entry point, step detection and modal navigation"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkedin_autoapply.config import DELAYS, TIMING_PROFILES
from linkedin_autoapply.errors import PageLoadError, raise_if_closed
from linkedin_autoapply.interaction.buttons import activate_button_in_modal, first_present
from linkedin_autoapply.models import StepAction, StepDecision
from linkedin_autoapply.perception.controls import ERROR_SELECTORS, MODAL_SELECTOR
from linkedin_autoapply.reasoning.normalize import normalize_text
from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)

LINKEDIN_ROOT = "https://www.linkedin.com"

# Apply-state containers only; titles like "Applied Scientist" must not match
ALREADY_APPLIED_SELECTORS = (
    '.jobs-details-top-card__apply-status--applied',
    '.jobs-s-apply .artdeco-inline-feedback:has-text("Applied")',
    '.artdeco-inline-feedback__message:text-matches("^\\s*(Applied|Application (sent|submitted))\\b", "i")',
)

ENTRY_POINT_SELECTORS = (
    '[data-view-name="job-apply-button"]',
    'button.jobs-apply-button',
    'a[aria-label*="Easy Apply"]',
    'button[data-control-name="jobdetails_topcard_inapply"]',
    '.jobs-s-apply button',
)

EASY_APPLY_MODAL_SELECTOR = f'div.jobs-easy-apply-modal, {MODAL_SELECTOR}'

DESCRIPTION_SELECTORS = (
    'span[data-testid="expandable-text-box"]',
    '#job-details',
    'div.jobs-description',
)

BUTTON_SELECTORS = {
    StepAction.SUBMIT: ('button[aria-label*="Submit application"]',),
    StepAction.REVIEW: ('button[aria-label*="Review"]',),
    StepAction.NEXT: (
        'button[aria-label*="Continue to next step"]',
        'button[data-easy-apply-next-button]',
        'button:has-text("Next")',
    ),
}

# Primary control precedence
STEP_PRECEDENCE = (StepAction.SUBMIT, StepAction.REVIEW, StepAction.NEXT)

SPINNER_SELECTOR = '.artdeco-spinner'
DISMISS_SELECTOR = 'button[aria-label*="Dismiss"]'
DISCARD_SELECTORS = ('button[data-test-dialog-primary-btn]', 'button:has-text("Discard")')
SUCCESS_PATTERN = re.compile(r'application\s+(was\s+)?(sent|submitted)', re.IGNORECASE)

MODAL_OPEN_ATTEMPTS = 3
MODAL_OPEN_TIMEOUT_MS = 10000
SUBMIT_CONFIRM_POLLS = 10


class OpenResult(Enum):
    OPENED = "opened"
    ALREADY_APPLIED = "already_applied"
    NOT_SUPPORTED = "not_supported"
    FAILED = "failed"


@dataclass(frozen=True)
class StepSnapshot:
    """What the modal looks like right now. Pure data, no page handles."""

    modal_open: bool
    buttons: dict = field(default_factory=dict)
    validation_errors: tuple = ()
    invalid_fields: int = 0
    loading: bool = False
    success_visible: bool = False


def classify_step(snapshot):
    """
    Decide the next step action from a snapshot - NO ACTIONS, only detection.

    1. Modal gone → BLOCKED (modal_closed)
    2. Visible validation errors or aria-invalid fields → BLOCKED (validation_error)
    3. Primary control is the first present of Submit, Review, Next
    4. Primary present but disabled, no validation signal → not reachable yet (ready=False)
    5. No control: spinner visible → loading (ready=False); otherwise BLOCKED (no_step_control)

    ready=False means the page is still settling and must be polled again;
    it never counts as blocked.
    """
    if not snapshot.modal_open:
        return StepDecision(StepAction.BLOCKED, reason="modal_closed")

    if snapshot.validation_errors or snapshot.invalid_fields:
        return StepDecision(
            StepAction.BLOCKED,
            reason="validation_error",
            errors=tuple(snapshot.validation_errors),
        )

    for action in STEP_PRECEDENCE:
        if action not in snapshot.buttons:
            continue
        if snapshot.loading:
            return StepDecision(action, ready=False, reason="loading")
        if not snapshot.buttons[action]:
            return StepDecision(action, ready=False, reason="not_reachable")
        return StepDecision(action)

    if snapshot.loading:
        return StepDecision(StepAction.BLOCKED, ready=False, reason="loading")
    return StepDecision(StepAction.BLOCKED, reason="no_step_control")


class NavigationController:
    """Owns every page interaction outside the form fields of the modal"""

    def __init__(self, page, settings=None, sleep=asyncio.sleep):
        self.page = page
        self.settings = settings
        self.timing = settings.timing if settings is not None else TIMING_PROFILES["default"]
        self._sleep = sleep
        self.job_description = ""

    @property
    def modal(self):
        return self.page.locator(MODAL_SELECTOR).first

    # ========================================
    # OPENING
    # ========================================

    async def goto(self, url):
        attempts = self.settings.page_load_attempts if self.settings is not None else 2
        for attempt in range(1, attempts + 1):
            try:
                await self.page.goto(url, wait_until="domcontentloaded", timeout=30000)
                await human_delay(*DELAYS["page_transition"])
                return
            except PlaywrightError as e:
                raise_if_closed(e)
                log.warning("Page load failed (attempt %d/%d): %s", attempt, attempts, e)
        raise PageLoadError(f"Could not load {url}")

    async def open(self, posting):
        """Navigate to the listing and open the Easy Apply modal"""
        await self.goto(posting.listing_url)

        for selector in ALREADY_APPLIED_SELECTORS:
            if await self.page.locator(selector).first.is_visible():
                return OpenResult.ALREADY_APPLIED

        self.job_description = await self.read_job_description()

        button = None
        for selector in ENTRY_POINT_SELECTORS:
            candidate = self.page.locator(selector).first
            if await candidate.is_visible():
                button = candidate
                break
        if button is None:
            return OpenResult.NOT_SUPPORTED

        href = await button.get_attribute("href")
        if href:
            await self.goto(href if href.startswith("http") else LINKEDIN_ROOT + href)
        else:
            await button.click()
            await human_delay(*DELAYS["click"])

        for attempt in range(1, MODAL_OPEN_ATTEMPTS + 1):
            try:
                await self.page.locator(EASY_APPLY_MODAL_SELECTOR).first.wait_for(
                    state="visible", timeout=MODAL_OPEN_TIMEOUT_MS
                )
                return OpenResult.OPENED
            except PlaywrightTimeoutError:
                log.info("  Waiting for Easy Apply modal (attempt %d/%d)", attempt, MODAL_OPEN_ATTEMPTS)
        return OpenResult.FAILED

    async def read_job_description(self):
        for selector in DESCRIPTION_SELECTORS:
            locator = self.page.locator(selector).first
            try:
                if await locator.count() > 0:
                    text = (await locator.inner_text()).strip()
                    if text:
                        return text
            except PlaywrightError as e:
                raise_if_closed(e)
        return ""

    # ========================================
    # STEP DETECTION
    # ========================================

    async def is_open(self):
        try:
            return await self.modal.is_visible()
        except PlaywrightError as e:
            raise_if_closed(e)
            return False

    async def success_visible(self):
        return await self.page.get_by_text(SUCCESS_PATTERN).count() > 0

    async def read_snapshot(self):
        if not await self.is_open():
            return StepSnapshot(modal_open=False)

        modal = self.modal
        buttons = {}
        for action, selectors in BUTTON_SELECTORS.items():
            button = await first_present(modal, selectors)
            if button is not None:
                buttons[action] = await button.is_enabled()

        errors = []
        for text in await modal.locator(", ".join(ERROR_SELECTORS)).all_inner_texts():
            text = " ".join(text.split())
            if text:
                errors.append(text)

        spinner = modal.locator(SPINNER_SELECTOR).first
        return StepSnapshot(
            modal_open=True,
            buttons=buttons,
            validation_errors=tuple(errors),
            invalid_fields=await modal.locator('[aria-invalid="true"]').count(),
            loading=await spinner.is_visible(),
            success_visible=await self.success_visible(),
        )

    async def determine_action(self):
        """classify_step on fresh snapshots, re-polling while the page settles"""
        attempts = self.settings.settle_attempts if self.settings is not None else 3
        decision = None
        for attempt in range(attempts):
            decision = classify_step(await self.read_snapshot())
            if decision.ready:
                break
            log.debug("  Step not ready (%s), polling again", decision.reason)
            await self._sleep(1.0)
        log.info("  Step decision: %s%s", decision.action.value, f" ({decision.reason})" if decision.reason else "")
        return decision

    # ========================================
    # ACTIONS
    # ========================================

    async def advance(self, action):
        """Click Next or Review"""
        return await activate_button_in_modal(self.modal, BUTTON_SELECTORS[action], action.value.title(), self.timing)

    async def submit(self):
        """Click Submit and wait for confirmation (success text or modal closing)"""
        if not await activate_button_in_modal(self.modal, BUTTON_SELECTORS[StepAction.SUBMIT], "Submit", self.timing):
            return False
        for _ in range(SUBMIT_CONFIRM_POLLS):
            if await self.success_visible() or not await self.is_open():
                return True
            await self._sleep(1.0)
        return False

    async def ensure_closed(self):
        """Dismiss the modal (and the discard confirmation). True when no modal remains."""
        for _ in range(3):
            if not await self.is_open():
                return True
            dismiss = self.page.locator(DISMISS_SELECTOR).first
            if await dismiss.is_visible():
                await dismiss.click()
            else:
                await self.page.keyboard.press("Escape")
            await human_delay(*DELAYS["click"])

            confirm = await first_present(self.page, DISCARD_SELECTORS)
            if confirm is not None and "discard" in normalize_text(await confirm.inner_text()):
                await confirm.click()
                await human_delay(*DELAYS["click"])
        return not await self.is_open()
