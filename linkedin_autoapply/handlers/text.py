"""Single-line text inputs and textareas"""

from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.interaction.keyboard import keyboard_fill
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.resolve_text import resolve_deterministic
from linkedin_autoapply.utils.timing import human_delay


class TextHandler(FieldHandler):
    kinds = (ControlKind.TEXT, ControlKind.TEXTAREA)

    async def resolve(self, context):
        answer = resolve_deterministic(context, self.resume)
        if answer is not None:
            return answer
        return await self.answerer.answer_text(context.question, kind=context.control_kind.value)

    async def retry_answer(self, context, previous_answer, error):
        return await self.answerer.answer_text(
            context.question,
            kind=context.control_kind.value,
            previous_answer=previous_answer,
            error=error,
        )

    async def apply(self, control, context, answer):
        if context.control_kind is ControlKind.TEXTAREA:
            # Long answers are filled in one go
            await control.element.fill(answer)
            await human_delay(self.timing["post_input_min"], self.timing["post_input_max"])
        else:
            await keyboard_fill(self.page, control.element, answer, self.timing)
