"""Typeahead (autocomplete) inputs such as city pickers"""

import logging

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.interaction.keyboard import keyboard_fill, pick_first_suggestion
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.resolve_text import resolve_text_answer

log = logging.getLogger(__name__)

SUGGESTION_SELECTOR = (
    '[role="listbox"] [role="option"], .basic-typeahead__selectable, .search-typeahead-v2__hit'
)


class TypeaheadHandler(FieldHandler):
    kinds = (ControlKind.TYPEAHEAD,)

    async def resolve(self, context):
        answer = resolve_text_answer(context, self.resume)
        if answer is None:
            answer = await self.answerer.answer_text(context.question)
        return answer

    async def apply(self, control, context, answer):
        await keyboard_fill(self.page, control.element, answer, self.timing)
        try:
            await self.page.locator(SUGGESTION_SELECTOR).first.wait_for(state="visible", timeout=3000)
        except PlaywrightTimeoutError:
            log.debug("  No suggestions for %r, keeping typed value", answer)
            return
        await pick_first_suggestion(self.page, self.timing)
