"""LinkedInBot facade: wires the components together for one run"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from linkedin_autoapply.ai.answerer import Answerer
from linkedin_autoapply.apply.easy_applier import EasyApplier
from linkedin_autoapply.auth.authenticator import Authenticator
from linkedin_autoapply.browser.session import launch_browser
from linkedin_autoapply.debug.unresolved_collector import UnresolvedCollector
from linkedin_autoapply.errors import ConfigError, FatalBotError
from linkedin_autoapply.handlers.form import FormHandler, build_handlers
from linkedin_autoapply.perception.controls import ControlScanner
from linkedin_autoapply.reporting.progress import RUN_FINISHED, LoggingSink, ProgressReporter, ResultLogSink
from linkedin_autoapply.search.job_manager import JobManager
from linkedin_autoapply.search.results import ResultsPageReader
from linkedin_autoapply.state.navigation import NavigationController
from linkedin_autoapply.state.run_context import RunContext
from linkedin_autoapply.utils.timing import Pacer

log = logging.getLogger(__name__)


@dataclass
class RunSummary:
    authenticated: bool = False
    stats: dict = field(default_factory=dict)
    fatal_reason: str = ""
    stopped: bool = False

    @property
    def ok(self):
        return not self.fatal_reason


def validate_config(config, resume):
    """Raise ConfigError for a configuration that cannot produce a single search"""
    problems = []
    if not config.criteria.keywords:
        problems.append("no search keywords")
    if not config.criteria.locations:
        problems.append("no search locations")
    if config.settings.max_steps < 1:
        problems.append("max_steps must be at least 1")
    if config.settings.max_pages < 1:
        problems.append("max_pages must be at least 1")
    if config.settings.resume_path and not Path(config.settings.resume_path).is_file():
        problems.append(f"resume file not found: {config.settings.resume_path}")
    if resume is None:
        problems.append("no resume data")
    elif not (resume.personal.email or resume.personal.full_name):
        problems.append("resume has neither name nor email")
    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))


class LinkedInBot:
    """
    initialize() validates and stores the run inputs, start() runs the
    whole session and always returns a RunSummary, stop() requests a
    cooperative stop from any thread.
    """

    def __init__(self, reporter=None, launcher=launch_browser):
        self.reporter = reporter or ProgressReporter([LoggingSink()])
        self.context = RunContext()
        self._launcher = launcher
        self.config = None
        self.resume = None
        self.answerer = None

    def initialize(self, config, resume, text_generator):
        validate_config(config, resume)
        self.config = config
        self.resume = resume
        settings = config.settings
        self.answerer = Answerer(
            text_generator,
            resume,
            attempts=settings.answer_attempts,
            timeout=settings.answer_timeout,
        )
        output = Path(settings.output_dir)
        output.mkdir(parents=True, exist_ok=True)
        self.reporter.subscribe(ResultLogSink(output / "log.jsonl"))
        log.info(
            "Initialized: %d keyword(s), %d location(s)%s",
            len(config.criteria.keywords),
            len(config.criteria.locations),
            ", DRY RUN" if settings.dry_run else "",
        )

    def stop(self):
        log.info("Stop requested")
        self.context.stop.set()

    def _build(self, page):
        settings = self.config.settings
        pacer = Pacer()
        navigator = NavigationController(page, settings)
        form = FormHandler(
            ControlScanner(page),
            build_handlers(page, self.answerer, self.resume, settings),
            collector=UnresolvedCollector(Path(settings.output_dir) / "debug_unresolved.jsonl"),
            pacer=pacer,
        )
        applier = EasyApplier(navigator, form, self.answerer, max_steps=settings.max_steps, dry_run=settings.dry_run)
        authenticator = Authenticator(page, self.context, settings, self.reporter)
        manager = JobManager(
            self.config.criteria,
            self.config.blacklist,
            ResultsPageReader(page),
            applier,
            self.context,
            settings,
            self.reporter,
            pacer,
        )
        return authenticator, manager

    async def start(self):
        if self.config is None:
            raise ConfigError("initialize() must be called before start()")

        summary = RunSummary()
        session = None
        try:
            session = await self._launcher(
                user_data_dir=self.config.settings.user_data_dir,
                headless=self.config.settings.headless,
            )
            authenticator, manager = self._build(session.page)

            summary.authenticated = await authenticator.start()
            if summary.authenticated:
                await manager.start()
        except FatalBotError as e:
            log.error("Fatal: %s", e)
            summary.fatal_reason = e.reason
        finally:
            summary.stats = self.context.stats.as_dict()
            summary.stopped = self.context.stop.is_set()
            self.reporter.emit(RUN_FINISHED, stats=summary.stats, fatal_reason=summary.fatal_reason)
            if session is not None:
                try:
                    await session.close()
                except Exception as e:
                    log.warning("Browser session did not shut down cleanly: %s", e)
            close = getattr(self.answerer.generator, "aclose", None)
            if close is not None:
                await close()
        return summary
