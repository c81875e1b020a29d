"""Resume and cover letter uploads"""

import logging
from pathlib import Path

from linkedin_autoapply.handlers.base import FieldHandler
from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.normalize import normalize_text

log = logging.getLogger(__name__)

# Keep whatever resume LinkedIn already has on file
USE_EXISTING = "existing_document"

RESUME_CARD_SELECTOR = '.jobs-document-upload-redesign-card__container, .jobs-resume-picker__resume'


def is_cover_letter(label):
    return "cover" in normalize_text(label)


class FileUploadHandler(FieldHandler):
    kinds = (ControlKind.FILE,)

    def document_path(self, context):
        settings = self.settings
        if settings is None:
            return ""
        return settings.cover_letter_path if is_cover_letter(context.label) else settings.resume_path

    async def resolve(self, context):
        path = self.document_path(context)
        if path and Path(path).is_file():
            return str(Path(path).resolve())
        if path:
            log.warning("  Document not found: %s", path)
        if is_cover_letter(context.label):
            # Optional cover letters are left empty
            return None if context.required else ""
        return USE_EXISTING

    async def apply(self, control, context, answer):
        if not answer:
            return
        if answer == USE_EXISTING:
            cards = control.section.locator(RESUME_CARD_SELECTOR)
            if await cards.count() > 0:
                await cards.first.click()
            return
        await control.element.set_input_files(answer)
