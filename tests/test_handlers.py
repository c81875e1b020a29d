import asyncio
from types import SimpleNamespace

import pytest
from playwright.async_api import Error as PlaywrightError

from conftest import ScriptedGenerator, no_sleep
from linkedin_autoapply.ai.answerer import Answerer
from linkedin_autoapply.config import BotSettings
from linkedin_autoapply.errors import BrowserClosedError
from linkedin_autoapply.handlers import base, numeric, text
from linkedin_autoapply.handlers.checkbox import CheckboxHandler
from linkedin_autoapply.handlers.choice import RadioHandler, SelectHandler
from linkedin_autoapply.handlers.file_upload import USE_EXISTING, FileUploadHandler
from linkedin_autoapply.handlers.numeric import NumericHandler
from linkedin_autoapply.handlers.text import TextHandler
from linkedin_autoapply.handlers.typeahead import TypeaheadHandler
from linkedin_autoapply.models import ControlKind, FieldContext


class NoBackend:
    async def generate(self, request):
        raise AssertionError(f"backend should not be called for {request.question!r}")


def make_answerer(resume, generator=None):
    return Answerer(generator or NoBackend(), resume, sleep=no_sleep)


def control():
    return SimpleNamespace(section=object(), element=object())


@pytest.fixture
def typed(monkeypatch):
    """Capture keyboard_fill calls and report no validation errors by default"""
    values = []

    async def fake_fill(page, element, value, timing=None):
        values.append(value)

    async def no_error(section):
        return ""

    monkeypatch.setattr(numeric, "keyboard_fill", fake_fill)
    monkeypatch.setattr(text, "keyboard_fill", fake_fill)
    monkeypatch.setattr(base, "section_error", no_error)
    return values


def test_years_question_is_answered_from_resume_without_backend(resume, typed):
    handler = NumericHandler(None, make_answerer(resume), resume)
    context = FieldContext(
        key="years",
        control_kind=ControlKind.NUMBER,
        label="How many years of experience do you have with Python?",
    )

    result = asyncio.run(handler.handle(control(), context))

    assert result.success
    assert result.answer == "5"
    assert typed == ["5"]
    assert handler.answerer.calls == 0


def test_numeric_validation_error_gets_one_corrected_answer(resume, typed, monkeypatch):
    errors = iter(["Enter a whole number between 0 and 99", ""])

    async def scripted_error(section):
        return next(errors)

    monkeypatch.setattr(base, "section_error", scripted_error)
    generator = ScriptedGenerator("4.5", "4")
    handler = NumericHandler(None, make_answerer(resume, generator), resume)
    context = FieldContext(key="reports", control_kind=ControlKind.NUMBER, label="How many direct reports have you managed?")

    result = asyncio.run(handler.handle(control(), context))

    assert result.success
    assert typed == ["4", "4"]
    assert generator.requests[1].error.startswith("Enter a whole number")


def test_persistent_validation_error_fails_the_control(resume, typed, monkeypatch):
    async def always_error(section):
        return "Please enter a valid answer"

    monkeypatch.setattr(base, "section_error", always_error)
    handler = TextHandler(None, make_answerer(resume, ScriptedGenerator("abc", "def")), resume)
    context = FieldContext(key="q", control_kind=ControlKind.TEXT, label="Referral code")

    result = asyncio.run(handler.handle(control(), context))

    assert not result.success
    assert result.reason.startswith("validation_error")


def test_unanswerable_question_fails_without_raising(resume, typed):
    generator = ScriptedGenerator("N/A", "N/A")
    handler = TextHandler(None, make_answerer(resume, generator), resume)
    context = FieldContext(key="q", control_kind=ControlKind.TEXT, label="Favourite colour")

    result = asyncio.run(handler.handle(control(), context))

    assert not result.success
    assert result.reason == "answer_unavailable"
    assert typed == []


def test_closed_browser_escapes_handler(resume, monkeypatch, typed):
    async def closed(page, element, value, timing=None):
        raise PlaywrightError("Target page, context or browser has been closed")

    monkeypatch.setattr(text, "keyboard_fill", closed)
    handler = TextHandler(None, make_answerer(resume), resume)
    context = FieldContext(key="city", control_kind=ControlKind.TEXT, label="City")

    with pytest.raises(BrowserClosedError):
        asyncio.run(handler.handle(control(), context))


def test_other_playwright_errors_fail_the_control(resume, monkeypatch, typed):
    async def flaky(page, element, value, timing=None):
        raise PlaywrightError("Element is not attached to the DOM")

    monkeypatch.setattr(text, "keyboard_fill", flaky)
    handler = TextHandler(None, make_answerer(resume), resume)
    context = FieldContext(key="city", control_kind=ControlKind.TEXT, label="City")

    result = asyncio.run(handler.handle(control(), context))

    assert result.reason == "interaction_failed"


def test_choice_from_resume_then_backend(resume):
    radio = RadioHandler(None, make_answerer(resume, ScriptedGenerator("LinkedIn")), resume)
    sponsorship = FieldContext(
        key="s", control_kind=ControlKind.RADIO, label="Do you require visa sponsorship?", options=["Yes", "No"]
    )
    source = FieldContext(
        key="h", control_kind=ControlKind.RADIO, label="How did you hear about us?", options=["Referral", "LinkedIn"]
    )

    assert asyncio.run(radio.resolve(sponsorship)) == "No"
    assert asyncio.run(radio.resolve(source)) == "LinkedIn"


def test_select_with_only_placeholder_has_no_answer(resume):
    select = SelectHandler(None, make_answerer(resume), resume)
    context = FieldContext(key="s", control_kind=ControlKind.SELECT, label="Pick", options=["Select an option"])
    assert asyncio.run(select.resolve(context)) is None


def test_consent_checkbox_is_ticked_without_backend(resume):
    handler = CheckboxHandler(None, make_answerer(resume), resume)
    context = FieldContext(
        key="c", control_kind=ControlKind.CHECKBOX, options=["I agree to the terms and privacy policy"]
    )
    assert asyncio.run(handler.resolve(context)) == "I agree to the terms and privacy policy"


def test_checkbox_group_uses_multi_choice(resume):
    handler = CheckboxHandler(None, make_answerer(resume, ScriptedGenerator("Python\nGo")), resume)
    context = FieldContext(
        key="g", control_kind=ControlKind.CHECKBOX, label="Languages you use", options=["Python", "Go", "Rust"]
    )
    assert asyncio.run(handler.resolve(context)) == "Python\nGo"


def test_resume_upload_paths(resume, tmp_path):
    pdf = tmp_path / "resume.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    settings = BotSettings(resume_path=str(pdf), cover_letter_path=str(tmp_path / "missing.pdf"))
    handler = FileUploadHandler(None, make_answerer(resume), resume, settings)

    resume_ctx = FieldContext(key="r", control_kind=ControlKind.FILE, label="Upload resume")
    cover_ctx = FieldContext(key="c", control_kind=ControlKind.FILE, label="Cover letter")
    required_cover = FieldContext(key="c2", control_kind=ControlKind.FILE, label="Cover letter", required=True)

    assert asyncio.run(handler.resolve(resume_ctx)) == str(pdf.resolve())
    assert asyncio.run(handler.resolve(cover_ctx)) == ""
    assert asyncio.run(handler.resolve(required_cover)) is None


def test_resume_upload_without_file_keeps_existing(resume):
    handler = FileUploadHandler(None, make_answerer(resume), resume, BotSettings())
    context = FieldContext(key="r", control_kind=ControlKind.FILE, label="Resume")
    assert asyncio.run(handler.resolve(context)) == USE_EXISTING


def test_typeahead_prefers_resume_city(resume):
    handler = TypeaheadHandler(None, make_answerer(resume), resume)
    context = FieldContext(key="loc", control_kind=ControlKind.TYPEAHEAD, label="Location (city)")
    assert asyncio.run(handler.resolve(context)) == "London"
