"""Form control detection inside the Easy Apply modal"""

import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError

from linkedin_autoapply.errors import raise_if_closed
from linkedin_autoapply.models import ControlKind, FieldContext
from linkedin_autoapply.reasoning.classify import classify_control
from linkedin_autoapply.reasoning.normalize import deduplicate_text, normalize_text

log = logging.getLogger(__name__)

MODAL_SELECTOR = '[data-test-modal], [role="dialog"]'

SECTION_SELECTORS = (
    '.jobs-easy-apply-form-section__grouping',
    '.fb-dash-form-element',
    '[data-test-form-element]',
    '.jobs-document-upload',
    '.jobs-resume-picker',
    '[data-test-document-upload]',
)

TEXT_INPUT_SELECTOR = (
    'input:not([type="hidden"]):not([type="file"]):not([type="radio"])'
    ':not([type="checkbox"]):not([type="button"]):not([type="submit"])'
)

ELEMENT_SELECTORS = {
    ControlKind.FILE: 'input[type="file"]',
    ControlKind.RADIO: 'input[type="radio"]',
    ControlKind.SELECT: 'select',
    ControlKind.CHECKBOX: 'input[type="checkbox"]',
    ControlKind.TEXTAREA: 'textarea',
    ControlKind.TYPEAHEAD: TEXT_INPUT_SELECTOR,
    ControlKind.DATE: TEXT_INPUT_SELECTOR,
    ControlKind.NUMBER: TEXT_INPUT_SELECTOR,
    ControlKind.TEXT: TEXT_INPUT_SELECTOR,
}

ERROR_SELECTORS = (
    '.artdeco-inline-feedback--error',
    '[data-test-form-element-error-message]',
    '.fb-form-element__error-text',
)

# Reads everything classify_control and FieldContext need in one round trip
DESCRIBE_SECTION_JS = """
(section) => {
    const visible = el => !!(el.offsetWidth || el.offsetHeight || el.getClientRects().length);
    const clean = el => {
        if (!el) return '';
        const copy = el.cloneNode(true);
        copy.querySelectorAll('.visually-hidden, .sr-only').forEach(n => n.remove());
        return (copy.textContent || '').replace(/\\s+/g, ' ').trim();
    };
    const labelFor = el => {
        if (!el || !el.id) return null;
        return section.querySelector(`label[for="${CSS.escape(el.id)}"]`);
    };
    const excluded = ['button', 'submit', 'checkbox', 'radio', 'file', 'hidden'];

    const fileInputs = Array.from(section.querySelectorAll('input[type="file"]'));
    const radios = Array.from(section.querySelectorAll('input[type="radio"]'));
    const checkboxes = Array.from(section.querySelectorAll('input[type="checkbox"]'));
    const selects = Array.from(section.querySelectorAll('select')).filter(visible);
    const textareas = Array.from(section.querySelectorAll('textarea')).filter(visible);
    const textInputs = Array.from(section.querySelectorAll('input'))
        .filter(el => !excluded.includes((el.type || 'text').toLowerCase()) && visible(el));
    const resumePicker = !!section.querySelector('.jobs-resume-picker, .jobs-document-upload-redesign-card__container, [data-test-document-upload]');

    const primary = fileInputs[0] || radios[0] || selects[0] || checkboxes[0] || textareas[0] || textInputs[0] || null;

    let label = '';
    const titleSelectors = [
        'legend',
        '[data-test-form-builder-radio-button-form-component__title]',
        '[data-test-checkbox-form-title]',
        '[data-test-text-entity-list-form-title]',
    ];
    for (const sel of titleSelectors) {
        const text = clean(section.querySelector(sel));
        if (text) { label = text; break; }
    }
    if (!label) label = clean(labelFor(primary));
    if (!label) label = clean(section.querySelector('label'));
    if (!label && primary) label = primary.getAttribute('aria-label') || primary.getAttribute('name') || '';

    let options = [];
    let value = '';
    if (radios.length) {
        options = radios.map(r => clean(labelFor(r)) || r.value || '');
        const checked = radios.findIndex(r => r.checked);
        value = checked >= 0 ? options[checked] : '';
    } else if (selects.length) {
        const select = selects[0];
        options = Array.from(select.options).slice(0, 100).map(o => (o.textContent || '').trim());
        const chosen = select.selectedIndex >= 0 ? select.options[select.selectedIndex] : null;
        value = chosen && select.selectedIndex > 0 ? (chosen.textContent || '').trim() : '';
    } else if (checkboxes.length) {
        options = checkboxes.map(c => clean(labelFor(c)) || c.value || '');
        value = checkboxes.map((c, i) => (c.checked ? options[i] : null)).filter(Boolean).join(', ');
    } else if (fileInputs.length || resumePicker) {
        const selected = section.querySelector(
            '.jobs-document-upload-redesign-card__container--selected, [aria-checked="true"], .jobs-document-upload__uploaded-file'
        );
        const hasFile = fileInputs.some(f => f.files && f.files.length > 0);
        value = selected || hasFile ? 'uploaded' : '';
    } else if (primary) {
        value = primary.value || '';
    }

    const errorEl = section.querySelector(
        '.artdeco-inline-feedback--error, [data-test-form-element-error-message], .fb-form-element__error-text'
    );
    const attr = name => (primary && primary.getAttribute(name)) || '';

    return {
        file_inputs: fileInputs.length,
        resume_picker: resumePicker,
        radios: radios.length,
        checkboxes: checkboxes.length,
        selects: selects.length,
        textareas: textareas.length,
        text_inputs: textInputs.length,
        tag: primary ? primary.tagName.toLowerCase() : '',
        input_type: primary && primary.tagName === 'INPUT' ? (primary.type || 'text').toLowerCase() : '',
        input_mode: attr('inputmode'),
        id: attr('id'),
        name: attr('name'),
        placeholder: attr('placeholder'),
        autocomplete: attr('autocomplete'),
        aria_autocomplete: attr('aria-autocomplete'),
        combobox: attr('role') === 'combobox' || !!section.querySelector('[data-test-single-typeahead-input], [role="combobox"]'),
        date_picker: !!section.querySelector('.artdeco-datepicker, [data-test-date-picker]'),
        required: !!(primary && (primary.required || attr('aria-required') === 'true')) || label.includes('*'),
        invalid: attr('aria-invalid') === 'true',
        label: label,
        options: options,
        value: value,
        error: errorEl ? clean(errorEl) : '',
    };
}
"""

SECTION_ERROR_JS = """
(section) => {
    const el = section.querySelector(
        '.artdeco-inline-feedback--error, [data-test-form-element-error-message], .fb-form-element__error-text'
    );
    const invalid = section.querySelector('[aria-invalid="true"]');
    if (el && el.textContent.trim()) return el.textContent.replace(/\\s+/g, ' ').trim();
    return invalid ? 'Validation error (no error text found)' : '';
}
"""


@dataclass
class FormControl:
    """One visible form control: the section locator plus what was read from it"""

    section: object
    context: FieldContext

    @property
    def elements(self):
        return self.section.locator(ELEMENT_SELECTORS[self.context.control_kind])

    @property
    def element(self):
        return self.elements.first


def control_key(kind, metadata):
    ident = metadata.get('id') or metadata.get('name') or normalize_text(metadata.get('label', ''))
    return f"{kind.value}:{ident}"


def build_context(kind, metadata):
    """FieldContext from section metadata"""
    return FieldContext(
        key=control_key(kind, metadata),
        control_kind=kind,
        label=deduplicate_text(metadata.get('label', '')).rstrip('*').strip(),
        options=[deduplicate_text(opt) for opt in metadata.get('options', [])],
        required=bool(metadata.get('required')),
        input_type=metadata.get('input_type', ''),
        element_id=metadata.get('id', ''),
        element_name=metadata.get('name', ''),
        placeholder=metadata.get('placeholder', ''),
        current_value=metadata.get('value', '') or '',
        error=metadata.get('error', '') or ('Invalid value' if metadata.get('invalid') else ''),
    )


class ControlScanner:
    """Enumerates and describes the visible controls of the current modal step"""

    def __init__(self, page):
        self.page = page

    @property
    def modal(self):
        return self.page.locator(MODAL_SELECTOR).first

    async def find_controls(self):
        sections = self.modal.locator(', '.join(SECTION_SELECTORS))
        try:
            count = await sections.count()
        except PlaywrightError as e:
            raise_if_closed(e)
            log.warning("Could not enumerate form sections: %s", e)
            return []

        controls = []
        keys = set()
        for i in range(count):
            control = await self.describe(sections.nth(i))
            if control is None or control.context.key in keys:
                continue
            keys.add(control.context.key)
            controls.append(control)
        return controls

    async def describe(self, section):
        """FormControl for one section, or None when it holds nothing fillable"""
        try:
            if not await section.is_visible():
                return None
            metadata = await section.evaluate(DESCRIBE_SECTION_JS)
        except PlaywrightError as e:
            raise_if_closed(e)
            log.debug("Section vanished while reading it: %s", e)
            return None

        kind = classify_control(metadata)
        if kind is None:
            return None
        return FormControl(section=section, context=build_context(kind, metadata))

    async def scroll_form(self):
        """Scroll the modal body so lazily rendered controls appear"""
        try:
            await self.modal.evaluate(
                """(modal) => {
                    const body = modal.querySelector('.jobs-easy-apply-modal__content, .artdeco-modal__content') || modal;
                    body.scrollTop = body.scrollHeight;
                }"""
            )
        except PlaywrightError as e:
            raise_if_closed(e)
            log.debug("Scroll failed: %s", e)


async def section_error(section):
    """Inline validation error text for a section, or ''"""
    try:
        return await section.evaluate(SECTION_ERROR_JS)
    except PlaywrightError as e:
        raise_if_closed(e)
        return ""
