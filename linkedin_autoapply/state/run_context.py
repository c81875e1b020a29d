"""Run-scoped state shared by reference between components"""

import threading
from dataclasses import dataclass, field

from linkedin_autoapply.models import Outcome


class StopSignal:
    """Cooperative stop flag. `set()` is safe from any thread."""

    def __init__(self):
        self._event = threading.Event()

    def set(self):
        self._event.set()

    def is_set(self):
        return self._event.is_set()


@dataclass
class RunStats:
    submitted: int = 0
    skipped: int = 0
    aborted: int = 0
    duplicates: int = 0
    blacklisted: int = 0
    pages_scanned: int = 0
    queries_run: int = 0

    def record(self, outcome):
        if outcome is Outcome.SUBMITTED:
            self.submitted += 1
        elif outcome is Outcome.SKIPPED:
            self.skipped += 1
        else:
            self.aborted += 1

    @property
    def attempted(self):
        return self.submitted + self.skipped + self.aborted

    def as_dict(self):
        return {
            "submitted": self.submitted,
            "skipped": self.skipped,
            "aborted": self.aborted,
            "duplicates": self.duplicates,
            "blacklisted": self.blacklisted,
            "pages_scanned": self.pages_scanned,
            "queries_run": self.queries_run,
        }


@dataclass
class RunContext:
    seen: set = field(default_factory=set)
    stop: StopSignal = field(default_factory=StopSignal)
    stats: RunStats = field(default_factory=RunStats)
