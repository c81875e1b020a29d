"""Progress events for whatever is watching the run (CLI, desktop shell, tests)"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from linkedin_autoapply.utils.logging import log_result

log = logging.getLogger(__name__)

AUTHENTICATED = "authenticated"
POSTING_STARTED = "posting_started"
POSTING_FINISHED = "posting_finished"
RUN_FINISHED = "run_finished"


@dataclass(frozen=True)
class ProgressEvent:
    kind: str
    payload: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ProgressReporter:
    """Fans events out to subscribed sinks. A failing sink never breaks the run."""

    def __init__(self, sinks=None):
        self._sinks = list(sinks or [])

    def subscribe(self, sink):
        self._sinks.append(sink)

    def emit(self, kind, **payload):
        event = ProgressEvent(kind=kind, payload=payload)
        for sink in self._sinks:
            try:
                sink(event)
            except Exception:
                log.exception("Progress sink %r failed on %s", sink, kind)
        return event


class LoggingSink:
    def __call__(self, event):
        payload = event.payload
        if event.kind == POSTING_STARTED:
            posting = payload["posting"]
            log.info("Applying: %s at %s (%s)", posting.title, posting.company_name, posting.listing_url)
        elif event.kind == POSTING_FINISHED:
            attempt = payload["attempt"]
            suffix = f" - {attempt.reason}" if attempt.reason else ""
            log.info("[%s] %s%s", attempt.outcome.value.upper(), attempt.posting.listing_url, suffix)
        elif event.kind == RUN_FINISHED:
            log.info("Run finished: %s", payload.get("stats"))
            if payload.get("fatal_reason"):
                log.error("Run ended early: %s", payload["fatal_reason"])
        else:
            log.info("Progress: %s", event.kind)


class ResultLogSink:
    """Appends each finished posting to a JSONL results file"""

    def __init__(self, path):
        self.path = Path(path)

    def __call__(self, event):
        if event.kind != POSTING_FINISHED:
            return
        attempt = event.payload["attempt"]
        log_result(self.path, attempt.posting, attempt.outcome, attempt.reason, attempt.steps_completed)
