"""Date inputs"""

from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.resolve_text import resolve_date_answer
from linkedin_autoapply.utils.timing import human_delay


class DateHandler(FieldHandler):
    kinds = (ControlKind.DATE,)

    async def resolve(self, context):
        return resolve_date_answer(context, self.resume)

    async def apply(self, control, context, answer):
        await control.element.fill(answer)
        # Tab closes the date picker; Escape would dismiss the whole modal
        await control.element.press("Tab")
        await human_delay(self.timing["post_input_min"], self.timing["post_input_max"])
