"""Checkbox handler: consent boxes, yes/no boxes and multi-select groups"""

from linkedin_autoapply.data.answer_bank import CONSENT_KEYWORDS
from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.normalize import normalize_text
from linkedin_autoapply.reasoning.resolve_choice import resolve_choice
from linkedin_autoapply.utils.timing import human_delay

SEPARATOR = "\n"


def is_consent(context):
    text = normalize_text(f"{context.label} {' '.join(context.options)}")
    return any(keyword in text for keyword in CONSENT_KEYWORDS)


class CheckboxHandler(FieldHandler):
    kinds = (ControlKind.CHECKBOX,)

    async def resolve(self, context):
        options = context.options
        if len(options) <= 1:
            if is_consent(context):
                return options[0] if options else "checked"
            question = context.question or (options[0] if options else "")
            choice = resolve_choice(question, ["Yes", "No"], self.resume)
            if choice is None:
                choice = await self.answerer.answer_choice(question, ["Yes", "No"])
            # An unchecked box is a valid answer
            return (options[0] if options else "checked") if choice == "Yes" else ""

        chosen = await self.answerer.answer_multi_choice(context.question, options)
        if not chosen:
            return None if context.required else ""
        return SEPARATOR.join(chosen)

    async def apply(self, control, context, answer):
        if not answer:
            return
        if len(context.options) <= 1:
            await self.click_option(control, 0)
        else:
            for option in answer.split(SEPARATOR):
                await self.click_option(control, context.options.index(option))
                await human_delay(self.timing["key_delay_min"], self.timing["key_delay_max"])
        await human_delay(self.timing["post_input_min"], self.timing["post_input_max"])
