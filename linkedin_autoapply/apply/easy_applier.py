"""Per-posting Easy Apply state machine"""

import logging

from playwright.async_api import Error as PlaywrightError

from linkedin_autoapply.errors import FatalBotError, PageLoadError, is_browser_closed, raise_if_closed
from linkedin_autoapply.models import ApplicationAttempt, Outcome, StepAction, StepDecision
from linkedin_autoapply.state.navigation import OpenResult

log = logging.getLogger(__name__)

# Posting-level reasons
SKIP_NOT_SUPPORTED = "not_supported"
SKIP_ALREADY_APPLIED = "already_applied"
SKIP_DRY_RUN = "dry_run"
ABORT_MODAL_NOT_OPENED = "modal_not_opened"
ABORT_PAGE_LOAD = "page_load_failed"
ABORT_UNRESOLVABLE_FIELD = "unresolvable_field"
ABORT_STEP_LIMIT = "step_limit_exceeded"
ABORT_MODAL_CLOSED = "modal_closed"
ABORT_UNEXPECTED_STATE = "unexpected_state"
ABORT_SUBMIT_FAILED = "submit_failed"
ABORT_UNEXPECTED_ERROR = "unexpected_error"

# Consecutive blocked decisions tolerated before giving up
MAX_BLOCKED = 2


def hold_for_required(decision, report):
    """Never advance past a step while a required control is still unresolved"""
    if decision.action is StepAction.BLOCKED or not decision.ready:
        return decision
    missing = [c.question for c in report.unresolved if c.required]
    if not missing:
        return decision
    return StepDecision(StepAction.BLOCKED, reason="unresolved_required", errors=tuple(missing))


class EasyApplier:
    """
    Drives one modal session: CLOSED → MODAL_OPEN → FILLING ⇄ ADVANCING →
    SUBMITTED | SKIPPED | ABORTED.

    Returns exactly one ApplicationAttempt per posting and always leaves the
    modal closed. Fatal errors propagate; everything else becomes an
    outcome with a reason.
    """

    def __init__(self, navigator, form, answerer=None, max_steps=15, dry_run=False):
        self.navigator = navigator
        self.form = form
        self.answerer = answerer
        self.max_steps = max_steps
        self.dry_run = dry_run
        self._steps = 0

    def _attempt(self, posting, outcome, reason=""):
        return ApplicationAttempt(posting=posting, outcome=outcome, reason=reason, steps_completed=self._steps)

    async def apply(self, posting):
        self._steps = 0
        self.form.begin_session(posting)
        attempt = None
        try:
            attempt = await self._run(posting)
        except FatalBotError:
            raise
        except PageLoadError as e:
            log.warning("  %s", e)
            attempt = self._attempt(posting, Outcome.ABORTED, ABORT_PAGE_LOAD)
        except Exception as e:
            raise_if_closed(e)
            log.exception("  Unexpected error while applying to %s", posting.listing_url)
            attempt = self._attempt(posting, Outcome.ABORTED, ABORT_UNEXPECTED_ERROR)
        finally:
            await self._cleanup()
            if attempt is not None:
                self.form.end_session(attempt.outcome.value, attempt.reason)
            else:
                self.form.end_session(Outcome.ABORTED.value, "fatal_error")
        return attempt

    async def _cleanup(self):
        try:
            if not await self.navigator.ensure_closed():
                log.warning("  Modal still open after cleanup")
        except FatalBotError as e:
            log.debug("  Cleanup skipped: %s", e)
        except PlaywrightError as e:
            if is_browser_closed(e):
                log.debug("  Cleanup skipped, browser closed")
            else:
                log.warning("  Cleanup failed: %s", e)

    async def _run(self, posting):
        opened = await self.navigator.open(posting)
        if opened is OpenResult.ALREADY_APPLIED:
            return self._attempt(posting, Outcome.SKIPPED, SKIP_ALREADY_APPLIED)
        if opened is OpenResult.NOT_SUPPORTED:
            return self._attempt(posting, Outcome.SKIPPED, SKIP_NOT_SUPPORTED)
        if opened is OpenResult.FAILED:
            return self._attempt(posting, Outcome.ABORTED, ABORT_MODAL_NOT_OPENED)

        if self.answerer is not None:
            self.answerer.job_description = self.navigator.job_description

        blocked = 0
        retry = False
        for step in range(1, self.max_steps + 1):
            log.info("  Step %d/%d", step, self.max_steps)
            report = await self.form.fill(retry=retry)
            decision = await self.navigator.determine_action()
            decision = hold_for_required(decision, report)

            if not decision.ready:
                retry = False
                continue

            if decision.action is StepAction.BLOCKED:
                if decision.reason == "modal_closed":
                    return self._attempt(posting, Outcome.ABORTED, ABORT_MODAL_CLOSED)
                if decision.reason == "no_step_control":
                    return self._attempt(posting, Outcome.ABORTED, ABORT_UNEXPECTED_STATE)
                blocked += 1
                if decision.errors:
                    log.info("  Blocked: %s", "; ".join(decision.errors))
                if blocked >= MAX_BLOCKED:
                    return self._attempt(posting, Outcome.ABORTED, ABORT_UNRESOLVABLE_FIELD)
                retry = True
                continue

            blocked = 0
            retry = False

            if decision.action is StepAction.SUBMIT:
                if self.dry_run:
                    log.info("  Dry run: stopping before submit")
                    return self._attempt(posting, Outcome.SKIPPED, SKIP_DRY_RUN)
                if await self.navigator.submit():
                    self._steps += 1
                    return self._attempt(posting, Outcome.SUBMITTED)
                return self._attempt(posting, Outcome.ABORTED, ABORT_SUBMIT_FAILED)

            if await self.navigator.advance(decision.action):
                self._steps += 1

        return self._attempt(posting, Outcome.ABORTED, ABORT_STEP_LIMIT)
