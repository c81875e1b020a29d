"""Fills every visible control of the current modal step"""

import logging
from dataclasses import dataclass, field

from linkedin_autoapply.handlers.checkbox import CheckboxHandler
from linkedin_autoapply.handlers.choice import RadioHandler, SelectHandler
from linkedin_autoapply.handlers.date import DateHandler
from linkedin_autoapply.handlers.file_upload import FileUploadHandler
from linkedin_autoapply.handlers.numeric import NumericHandler
from linkedin_autoapply.handlers.text import TextHandler
from linkedin_autoapply.handlers.typeahead import TypeaheadHandler

log = logging.getLogger(__name__)

# First handler whose can_handle() accepts a control wins
HANDLER_PRIORITY = (
    FileUploadHandler,
    RadioHandler,
    SelectHandler,
    CheckboxHandler,
    TypeaheadHandler,
    DateHandler,
    NumericHandler,
    TextHandler,
)

MAX_FILL_PASSES = 5


@dataclass
class FillReport:
    handled: list = field(default_factory=list)
    unresolved: list = field(default_factory=list)
    passes: int = 0

    @property
    def complete(self):
        return not self.unresolved


def build_handlers(page, answerer, resume, settings=None, priority=HANDLER_PRIORITY):
    return [handler_cls(page, answerer, resume, settings) for handler_cls in priority]


class FormHandler:
    """
    Multi-pass fill of the controls visible in the modal.

    A pass enumerates the controls, skips those holding a value or settled
    earlier in this modal session, and dispatches the rest to the first
    matching handler. Passes repeat until every control is filled, or until
    the unresolved set has not shrunk for two consecutive passes (answers can
    reveal conditional controls), up to MAX_FILL_PASSES.

    Retry mode lets controls that failed, or that show a validation error,
    be attempted once more.
    """

    def __init__(self, scanner, handlers, collector=None, pacer=None):
        self.scanner = scanner
        self.handlers = list(handlers)
        self.collector = collector
        self.pacer = pacer
        self.begin_session(None)

    def begin_session(self, posting):
        self._posting = posting
        self._settled = set()
        self._failed = set()
        self._recorded = set()

    def end_session(self, outcome="", reason=""):
        if self.collector is not None:
            self.collector.flush(outcome, reason)

    def dispatch(self, context):
        for handler in self.handlers:
            if handler.can_handle(context):
                return handler
        return None

    def _record(self, context, reason):
        if self.collector is None or context.key in self._recorded:
            return
        self._recorded.add(context.key)
        self.collector.record(posting=self._posting, context=context, reason=reason)

    async def fill(self, retry=False):
        report = FillReport()
        retried = set()
        stalled = 0

        for pass_number in range(1, MAX_FILL_PASSES + 1):
            report.passes = pass_number
            controls = await self.scanner.find_controls()
            progress = False
            unresolved = []

            for control in controls:
                context = control.context
                key = context.key
                reopen = retry and key not in retried and (context.error or key in self._failed)

                if reopen:
                    retried.add(key)
                    self._settled.discard(key)
                elif context.has_value:
                    self._settled.add(key)
                    continue
                elif key in self._settled:
                    continue
                elif key in self._failed:
                    unresolved.append(context)
                    continue

                handler = self.dispatch(context)
                if handler is None:
                    log.info("  No handler for %s control %r", context.control_kind.value, context.question[:60])
                    self._failed.add(key)
                    self._record(context, "no_handler")
                    unresolved.append(context)
                    continue

                result = await handler.handle(control, context)
                if result.success:
                    self._settled.add(key)
                    self._failed.discard(key)
                    report.handled.append(key)
                    progress = True
                    if self.pacer is not None:
                        await self.pacer.pause("field")
                else:
                    self._failed.add(key)
                    self._record(context, result.reason)
                    unresolved.append(context)

            report.unresolved = unresolved
            stalled = 0 if progress else stalled + 1
            if not progress and (not unresolved or stalled >= 2):
                break
            await self.scanner.scroll_form()

        if report.unresolved:
            log.info(
                "  %d control(s) unresolved: %s",
                len(report.unresolved),
                ", ".join(c.question[:40] for c in report.unresolved),
            )
        return report
