import asyncio
import json
from argparse import Namespace

import pytest

from linkedin_autoapply import bot as bot_module
from linkedin_autoapply.bot import LinkedInBot, validate_config
from linkedin_autoapply.config import BotConfig, BotSettings, get_active_timing, TIMING_PROFILES
from linkedin_autoapply.errors import ConfigError
from linkedin_autoapply.main import load_config
from linkedin_autoapply.models import ApplicationAttempt, BlacklistRules, Outcome, SearchCriteria
from linkedin_autoapply.reporting.progress import POSTING_FINISHED, ProgressReporter, ResultLogSink
from linkedin_autoapply.state.run_context import RunContext

CONFIG = {
    "search": {"keywords": ["Python"], "locations": ["Paris"], "filters": [{"remote": True}]},
    "blacklist": {"companies": ["Acme"]},
    "settings": {"max_pages": 2, "login_debounce": 0, "unknown_key": 1},
}


def make_config(tmp_path, **settings):
    data = json.loads(json.dumps(CONFIG))
    data["settings"].update(output_dir=str(tmp_path), **settings)
    return BotConfig.from_dict(data)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def test_config_from_dict(tmp_path):
    config = make_config(tmp_path)

    assert config.criteria.keywords == ("Python",)
    assert config.criteria.filters[0].remote
    assert config.blacklist.companies == ("Acme",)
    assert config.settings.max_pages == 2
    assert config.settings.max_steps == 15


def test_unknown_or_unsafe_timing_profile_falls_back_to_default(monkeypatch):
    assert get_active_timing("warp") is TIMING_PROFILES["default"]
    monkeypatch.setitem(TIMING_PROFILES, "reckless", dict(TIMING_PROFILES["super_dev"], modal_transition_min=50))
    assert get_active_timing("reckless") is TIMING_PROFILES["default"]
    assert get_active_timing("dev_test") is TIMING_PROFILES["dev_test"]


def test_cli_flags_override_settings(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG))
    args = Namespace(config=str(path), dry_run=True, headless=True, resume_file="cv.pdf", speed="super")

    settings = load_config(args).settings

    assert settings.dry_run and settings.headless
    assert settings.resume_path == "cv.pdf"
    assert settings.timing_mode == "super_dev"


@pytest.mark.parametrize(
    "criteria, settings, message",
    [
        (SearchCriteria(keywords=(), locations=("Paris",)), BotSettings(), "no search keywords"),
        (SearchCriteria(keywords=("Python",), locations=()), BotSettings(), "no search locations"),
        (SearchCriteria(keywords=("Python",), locations=("Paris",)), BotSettings(max_steps=0), "max_steps"),
        (SearchCriteria(keywords=("Python",), locations=("Paris",)), BotSettings(resume_path="/nope.pdf"), "not found"),
    ],
)
def test_invalid_configuration(resume, criteria, settings, message):
    with pytest.raises(ConfigError, match=message):
        validate_config(BotConfig(criteria=criteria, settings=settings), resume)


def test_resume_needs_name_or_email(tmp_path, resume):
    resume.personal.name = resume.personal.surname = resume.personal.email = ""
    with pytest.raises(ConfigError, match="neither name nor email"):
        validate_config(make_config(tmp_path), resume)


# ---------------------------------------------------------------------------
# Progress reporting
# ---------------------------------------------------------------------------


def test_failing_sink_does_not_break_other_sinks():
    received = []

    def broken(event):
        raise RuntimeError("sink down")

    reporter = ProgressReporter([broken, received.append])
    event = reporter.emit("authenticated", url="https://www.linkedin.com/feed/")

    assert received == [event]
    assert event.payload["url"] == "https://www.linkedin.com/feed/"


def test_result_log_sink_appends_jsonl(tmp_path, make_posting):
    path = tmp_path / "log.jsonl"
    reporter = ProgressReporter([ResultLogSink(path)])
    posting = make_posting("11")

    reporter.emit(POSTING_FINISHED, posting=posting, attempt=ApplicationAttempt(posting, Outcome.SUBMITTED, "", 3))
    reporter.emit(POSTING_FINISHED, posting=posting, attempt=ApplicationAttempt(posting, Outcome.ABORTED, "modal_closed", 1))
    reporter.emit("run_finished", stats={})

    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert [line["status"] for line in lines] == ["submitted", "aborted"]
    assert lines[0]["steps_completed"] == 3
    assert "reason" not in lines[0]
    assert lines[1]["reason"] == "modal_closed"


def test_run_stats_as_dict():
    context = RunContext()
    context.stats.record(Outcome.SUBMITTED)
    context.stats.record(Outcome.ABORTED)
    assert context.stats.attempted == 2
    assert context.stats.as_dict()["submitted"] == 1


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------


class FakeLocator:
    def __init__(self):
        self.first = self

    async def is_visible(self, timeout=None):
        return False


class FakePage:
    def __init__(self, url="https://www.linkedin.com/feed/", closed=False):
        self.url = url
        self.closed = closed

    def is_closed(self):
        return self.closed

    async def goto(self, url, **kwargs):
        return None

    def locator(self, selector):
        return FakeLocator()


class FakeSession:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def close(self):
        self.closed = True


class FakeGenerator:
    def __init__(self):
        self.closed = False

    async def generate(self, request):
        raise AssertionError("no questions expected")

    async def aclose(self):
        self.closed = True


def make_bot(page, reporter=None):
    session = FakeSession(page)

    async def launcher(user_data_dir, headless):
        return session

    return LinkedInBot(reporter=reporter or ProgressReporter(), launcher=launcher), session


def test_closed_browser_ends_run_with_fatal_summary(tmp_path, resume):
    bot, session = make_bot(FakePage(closed=True))
    generator = FakeGenerator()
    bot.initialize(make_config(tmp_path), resume, generator)

    summary = asyncio.run(bot.start())

    assert not summary.ok
    assert summary.fatal_reason == "browser_closed"
    assert not summary.authenticated
    assert session.closed
    assert generator.closed


def test_authenticated_run_hands_over_to_job_manager(tmp_path, resume, monkeypatch):
    started = []

    class FakeManager:
        def __init__(self, criteria, blacklist, reader, applier, context, settings, reporter, pacer):
            self.context = context
            self.blacklist = blacklist

        async def start(self):
            started.append(self.blacklist)
            self.context.stats.submitted += 2
            return self.context.stats

    monkeypatch.setattr(bot_module, "JobManager", FakeManager)
    finished = []
    reporter = ProgressReporter([lambda event: finished.append(event) if event.kind == "run_finished" else None])
    bot, session = make_bot(FakePage(), reporter)
    bot.initialize(make_config(tmp_path), resume, FakeGenerator())

    summary = asyncio.run(bot.start())

    assert summary.ok and summary.authenticated
    assert summary.stats["submitted"] == 2
    assert started == [BlacklistRules(companies=("Acme",))]
    assert finished[0].payload["stats"]["submitted"] == 2
    assert session.closed


def test_failing_browser_shutdown_still_finishes_run(tmp_path, resume):
    class BrokenSession(FakeSession):
        async def close(self):
            raise RuntimeError("playwright stop failed")

    finished = []
    reporter = ProgressReporter([lambda event: finished.append(event.kind)])
    session = BrokenSession(FakePage(closed=True))

    async def launcher(user_data_dir, headless):
        return session

    bot = LinkedInBot(reporter=reporter, launcher=launcher)
    generator = FakeGenerator()
    bot.initialize(make_config(tmp_path), resume, generator)

    summary = asyncio.run(bot.start())

    assert summary.fatal_reason == "browser_closed"
    assert finished == ["run_finished"]
    assert generator.closed


def test_start_requires_initialize():
    bot = LinkedInBot(launcher=None)
    with pytest.raises(ConfigError):
        asyncio.run(bot.start())


def test_stop_sets_signal():
    bot = LinkedInBot(launcher=None)
    bot.stop()
    assert bot.context.stop.is_set()
