import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from linkedin_autoapply.apply.easy_applier import EasyApplier
from linkedin_autoapply.errors import BrowserClosedError, PageLoadError
from linkedin_autoapply.handlers.form import FillReport
from linkedin_autoapply.models import ControlKind, FieldContext, Outcome, StepAction, StepDecision
from linkedin_autoapply.state.navigation import OpenResult, StepSnapshot, classify_step


# ---------------------------------------------------------------------------
# Step classification
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "snapshot, action, ready, reason",
    [
        (StepSnapshot(modal_open=False), StepAction.BLOCKED, True, "modal_closed"),
        (StepSnapshot(True, {StepAction.NEXT: True}), StepAction.NEXT, True, ""),
        (StepSnapshot(True, {StepAction.NEXT: True, StepAction.REVIEW: True}), StepAction.REVIEW, True, ""),
        (StepSnapshot(True, {StepAction.SUBMIT: True, StepAction.NEXT: True}), StepAction.SUBMIT, True, ""),
        (StepSnapshot(True, {StepAction.NEXT: False}), StepAction.NEXT, False, "not_reachable"),
        (StepSnapshot(True, {StepAction.NEXT: True}, loading=True), StepAction.NEXT, False, "loading"),
        (StepSnapshot(True, {}, loading=True), StepAction.BLOCKED, False, "loading"),
        (StepSnapshot(True, {}), StepAction.BLOCKED, True, "no_step_control"),
        (StepSnapshot(True, {StepAction.NEXT: True}, invalid_fields=1), StepAction.BLOCKED, True, "validation_error"),
    ],
)
def test_classify_step(snapshot, action, ready, reason):
    decision = classify_step(snapshot)
    assert (decision.action, decision.ready, decision.reason) == (action, ready, reason)


def test_validation_error_text_is_carried():
    decision = classify_step(StepSnapshot(True, {StepAction.NEXT: True}, validation_errors=("Enter a whole number",)))
    assert decision.errors == ("Enter a whole number",)


# ---------------------------------------------------------------------------
# EasyApplier
# ---------------------------------------------------------------------------


class FakeNavigator:
    def __init__(self, decisions=(), open_result=OpenResult.OPENED, submit_ok=True, open_error=None):
        self.decisions = list(decisions)
        self.open_result = open_result
        self.submit_ok = submit_ok
        self.open_error = open_error
        self.job_description = "We build engines."
        self.advanced = []
        self.submitted = 0
        self.closed = 0

    async def open(self, posting):
        if self.open_error is not None:
            raise self.open_error
        return self.open_result

    async def determine_action(self):
        if len(self.decisions) > 1:
            return self.decisions.pop(0)
        return self.decisions[0]

    async def advance(self, action):
        self.advanced.append(action)
        return True

    async def submit(self):
        self.submitted += 1
        return self.submit_ok

    async def ensure_closed(self):
        self.closed += 1
        return True


class FakeForm:
    def __init__(self, unresolved=()):
        self.fills = []
        self.sessions = []
        self.unresolved = list(unresolved)

    def begin_session(self, posting):
        self.sessions.append(("begin", posting.external_id))

    def end_session(self, outcome, reason=""):
        self.sessions.append(("end", outcome, reason))

    async def fill(self, retry=False):
        self.fills.append(retry)
        return FillReport(unresolved=list(self.unresolved))


NEXT = StepDecision(StepAction.NEXT)
REVIEW = StepDecision(StepAction.REVIEW)
SUBMIT = StepDecision(StepAction.SUBMIT)
INVALID = StepDecision(StepAction.BLOCKED, reason="validation_error", errors=("Required",))


def run_apply(navigator, posting, **kwargs):
    form = FakeForm()
    applier = EasyApplier(navigator, form, **kwargs)
    return asyncio.run(applier.apply(posting)), form


def test_next_review_submit_is_submitted(make_posting):
    navigator = FakeNavigator([NEXT, REVIEW, SUBMIT])

    attempt, form = run_apply(navigator, make_posting())

    assert attempt.outcome is Outcome.SUBMITTED
    assert attempt.steps_completed == 3
    assert navigator.advanced == [StepAction.NEXT, StepAction.REVIEW]
    assert navigator.closed == 1
    assert form.sessions[-1] == ("end", "submitted", "")


def test_two_consecutive_blocks_abort_as_unresolvable(make_posting):
    navigator = FakeNavigator([INVALID, INVALID])

    attempt, form = run_apply(navigator, make_posting())

    assert attempt.outcome is Outcome.ABORTED
    assert attempt.reason == "unresolvable_field"
    assert form.fills == [False, True]
    assert navigator.closed == 1


def test_block_then_progress_resets_counter(make_posting):
    navigator = FakeNavigator([INVALID, NEXT, INVALID, SUBMIT])

    attempt, _ = run_apply(navigator, make_posting())

    assert attempt.outcome is Outcome.SUBMITTED


def test_step_limit(make_posting):
    navigator = FakeNavigator([NEXT])

    attempt, _ = run_apply(navigator, make_posting(), max_steps=4)

    assert attempt.outcome is Outcome.ABORTED
    assert attempt.reason == "step_limit_exceeded"
    assert len(navigator.advanced) == 4


def test_dry_run_never_submits(make_posting):
    navigator = FakeNavigator([NEXT, SUBMIT])

    attempt, _ = run_apply(navigator, make_posting(), dry_run=True)

    assert attempt.outcome is Outcome.SKIPPED
    assert attempt.reason == "dry_run"
    assert navigator.submitted == 0
    assert navigator.closed == 1


def test_failed_submit_confirmation_aborts(make_posting):
    attempt, _ = run_apply(FakeNavigator([SUBMIT], submit_ok=False), make_posting())
    assert (attempt.outcome, attempt.reason) == (Outcome.ABORTED, "submit_failed")


@pytest.mark.parametrize(
    "open_result, outcome, reason",
    [
        (OpenResult.NOT_SUPPORTED, Outcome.SKIPPED, "not_supported"),
        (OpenResult.ALREADY_APPLIED, Outcome.SKIPPED, "already_applied"),
        (OpenResult.FAILED, Outcome.ABORTED, "modal_not_opened"),
    ],
)
def test_open_results(make_posting, open_result, outcome, reason):
    navigator = FakeNavigator([NEXT], open_result=open_result)

    attempt, form = run_apply(navigator, make_posting())

    assert (attempt.outcome, attempt.reason) == (outcome, reason)
    assert form.fills == []
    assert navigator.closed == 1


def test_modal_closed_mid_flow_aborts(make_posting):
    navigator = FakeNavigator([NEXT, StepDecision(StepAction.BLOCKED, reason="modal_closed")])
    attempt, _ = run_apply(navigator, make_posting())
    assert (attempt.outcome, attempt.reason) == (Outcome.ABORTED, "modal_closed")


def test_no_step_control_aborts_as_unexpected_state(make_posting):
    navigator = FakeNavigator([StepDecision(StepAction.BLOCKED, reason="no_step_control")])
    attempt, _ = run_apply(navigator, make_posting())
    assert attempt.reason == "unexpected_state"


def test_page_load_failure_aborts(make_posting):
    navigator = FakeNavigator(open_error=PageLoadError("timeout"))
    attempt, _ = run_apply(navigator, make_posting())
    assert (attempt.outcome, attempt.reason) == (Outcome.ABORTED, "page_load_failed")
    assert navigator.closed == 1


def test_unexpected_error_becomes_aborted_attempt(make_posting):
    navigator = FakeNavigator(open_error=RuntimeError("boom"))
    attempt, _ = run_apply(navigator, make_posting())
    assert (attempt.outcome, attempt.reason) == (Outcome.ABORTED, "unexpected_error")


def test_browser_closed_propagates_after_cleanup(make_posting):
    navigator = FakeNavigator(open_error=PlaywrightError("Target page, context or browser has been closed"))
    form = FakeForm()

    with pytest.raises(BrowserClosedError):
        asyncio.run(EasyApplier(navigator, form).apply(make_posting()))

    assert navigator.closed == 1
    assert form.sessions[-1][0] == "end"


def test_answerer_receives_job_description(make_posting):
    class Answerer:
        job_description = ""

    answerer = Answerer()
    run_apply(FakeNavigator([SUBMIT]), make_posting(), answerer=answerer)

    assert answerer.job_description == "We build engines."


def test_required_unresolved_control_holds_the_step(make_posting):
    navigator = FakeNavigator([NEXT])
    salary = FieldContext(key="salary", control_kind=ControlKind.TEXT, label="Salary", required=True)
    form = FakeForm(unresolved=[salary])

    attempt = asyncio.run(EasyApplier(navigator, form).apply(make_posting()))

    assert (attempt.outcome, attempt.reason) == (Outcome.ABORTED, "unresolvable_field")
    assert navigator.advanced == []
    assert form.fills == [False, True]


def test_optional_unresolved_control_does_not_block(make_posting):
    navigator = FakeNavigator([SUBMIT])
    note = FieldContext(key="note", control_kind=ControlKind.TEXTAREA, label="Anything else?")

    attempt = asyncio.run(EasyApplier(navigator, FakeForm(unresolved=[note])).apply(make_posting()))

    assert attempt.outcome is Outcome.SUBMITTED
