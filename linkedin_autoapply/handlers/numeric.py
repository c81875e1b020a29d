"""Numeric inputs (years of experience, GPA, notice period, salary)"""

from linkedin_autoapply.data.answer_bank import NUMERIC_DEFAULT
from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.interaction.keyboard import keyboard_fill
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.resolve_text import resolve_deterministic


class NumericHandler(FieldHandler):
    kinds = (ControlKind.NUMBER,)

    async def resolve(self, context):
        answer = resolve_deterministic(context, self.resume)
        if answer is not None:
            return answer
        return str(await self.answerer.answer_numeric(context.question, default=NUMERIC_DEFAULT))

    async def retry_answer(self, context, previous_answer, error):
        number = await self.answerer.answer_numeric(
            context.question, default=NUMERIC_DEFAULT, previous_answer=previous_answer, error=error
        )
        return str(number)

    async def apply(self, control, context, answer):
        await keyboard_fill(self.page, control.element, answer, self.timing)
