"""Field handler contract"""

import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError

from linkedin_autoapply.config import TIMING_PROFILES
from linkedin_autoapply.errors import AnswerUnavailable, FatalBotError, raise_if_closed
from linkedin_autoapply.perception.controls import section_error

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerResult:
    success: bool
    answer: str = ""
    reason: str = ""

    @classmethod
    def ok(cls, answer=""):
        return cls(True, answer=answer)

    @classmethod
    def failed(cls, reason):
        return cls(False, reason=reason)


class FieldHandler:
    """
    Fills one kind of control.

    can_handle() is pure over the FieldContext. handle() performs one
    control's worth of interaction and reports failure through
    HandlerResult instead of raising; only fatal errors (browser closed,
    backend out of credits) escape.

    Subclasses implement resolve() (context -> answer, None when there is
    none) and apply() (type/click the answer into the control).
    """

    kinds = ()

    def __init__(self, page, answerer, resume, settings=None):
        self.page = page
        self.answerer = answerer
        self.resume = resume
        self.settings = settings
        self.timing = settings.timing if settings is not None else TIMING_PROFILES["default"]

    @property
    def name(self):
        return type(self).__name__

    def can_handle(self, context):
        return context.control_kind in self.kinds

    async def resolve(self, context):
        raise NotImplementedError

    async def apply(self, control, context, answer):
        raise NotImplementedError

    async def retry_answer(self, context, previous_answer, error):
        """Corrected answer after an inline validation error, or None to give up"""
        return None

    async def handle(self, control, context):
        try:
            answer = await self.resolve(context)
            if answer is None:
                return HandlerResult.failed("no_answer")
            await self.apply(control, context, answer)

            error = await section_error(control.section)
            if error:
                log.info("  Validation error on %r: %s", context.question[:60], error)
                corrected = await self.retry_answer(context, answer, error)
                if corrected is None:
                    return HandlerResult.failed(f"validation_error: {error}")
                await self.apply(control, context, corrected)
                answer = corrected
                error = await section_error(control.section)
                if error:
                    return HandlerResult.failed(f"validation_error: {error}")

            log.info("  ✓ %s: %r → %r", self.name, context.question[:60], str(answer)[:60])
            return HandlerResult.ok(str(answer))
        except FatalBotError:
            raise
        except AnswerUnavailable as e:
            log.warning("  No answer for %r: %s", context.question[:60], e.last_error)
            return HandlerResult.failed("answer_unavailable")
        except PlaywrightError as e:
            raise_if_closed(e)
            log.warning("  %s could not fill %r: %s", self.name, context.question[:60], e)
            return HandlerResult.failed("interaction_failed")

    async def click_option(self, control, index):
        """Click the label of the nth radio/checkbox, falling back to a forced check"""
        element = control.elements.nth(index)
        element_id = await element.get_attribute("id")
        if element_id:
            label = control.section.locator(f'label[for="{element_id}"]')
            if await label.count() > 0:
                await label.first.click()
                return
        await element.check(force=True)
