"""Control classification logic"""

from linkedin_autoapply.models import ControlKind

DATE_FORMAT_PATTERNS = ('mm/dd/yyyy', 'mm-dd-yyyy', 'mm/dd/yy', 'dd/mm/yyyy')
BIRTH_PATTERNS = ('birth', 'dob', 'born')
EXCLUDED_INPUT_TYPES = ('button', 'submit', 'checkbox', 'radio', 'file', 'hidden')


def is_numeric_input(metadata):
    input_type = (metadata.get('input_type') or '').lower()
    input_mode = (metadata.get('input_mode') or '').lower()
    ident = f"{metadata.get('id', '')} {metadata.get('name', '')}".lower()
    if input_type == 'number' or input_mode in ('numeric', 'decimal'):
        return True
    return 'numeric' in ident or ('number' in ident and 'phone' not in ident)


def is_date_input(metadata):
    input_type = (metadata.get('input_type') or '').lower()
    if input_type == 'date' or metadata.get('date_picker'):
        return True
    combined = f"{metadata.get('label', '')} {metadata.get('placeholder', '')}".lower()
    has_format = any(pattern in combined for pattern in DATE_FORMAT_PATTERNS)
    return has_format and not any(pattern in combined for pattern in BIRTH_PATTERNS)


def is_typeahead_input(metadata):
    if metadata.get('combobox'):
        return True
    return (
        (metadata.get('autocomplete') or '').lower() == 'off'
        and (metadata.get('aria_autocomplete') or '').lower() == 'list'
    )


def classify_control(metadata):
    """
    Classify one form section from its DOM metadata, or return None.

    Element-based kinds are decided first, then text inputs are refined:
    file → radio → select → checkbox → textarea → typeahead → date → number → text
    """
    if metadata.get('file_inputs') or metadata.get('resume_picker'):
        return ControlKind.FILE
    if metadata.get('radios'):
        return ControlKind.RADIO
    if metadata.get('selects'):
        return ControlKind.SELECT
    if metadata.get('checkboxes'):
        return ControlKind.CHECKBOX
    if metadata.get('textareas'):
        return ControlKind.TEXTAREA

    if not metadata.get('text_inputs'):
        return None
    input_type = (metadata.get('input_type') or 'text').lower()
    if input_type in EXCLUDED_INPUT_TYPES:
        return None

    if is_typeahead_input(metadata):
        return ControlKind.TYPEAHEAD
    if is_date_input(metadata):
        return ControlKind.DATE
    if is_numeric_input(metadata):
        return ControlKind.NUMBER
    return ControlKind.TEXT
