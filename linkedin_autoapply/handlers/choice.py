"""Radio group and dropdown handlers"""

from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.resolve_choice import real_options, resolve_choice
from linkedin_autoapply.utils.timing import human_delay


class ChoiceHandler(FieldHandler):
    """Resume answer first, then the backend; the answer is always one of the options"""

    async def resolve(self, context):
        options = real_options(context.options)
        if not options:
            return None
        answer = resolve_choice(context.question, options, self.resume)
        if answer is None:
            answer = await self.answerer.answer_choice(context.question, options)
        return answer


class RadioHandler(ChoiceHandler):
    kinds = (ControlKind.RADIO,)

    async def apply(self, control, context, answer):
        await self.click_option(control, context.options.index(answer))
        await human_delay(self.timing["post_input_min"], self.timing["post_input_max"])


class SelectHandler(ChoiceHandler):
    kinds = (ControlKind.SELECT,)

    async def apply(self, control, context, answer):
        await control.element.select_option(label=answer)
        await human_delay(self.timing["dropdown_open_min"], self.timing["dropdown_open_max"])
