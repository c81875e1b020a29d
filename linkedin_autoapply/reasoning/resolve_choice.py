"""Radio and dropdown resolution logic"""

from linkedin_autoapply.data.answer_bank import BOOLEAN_QUESTIONS, DECLINE_PATTERNS, EEO_KEYWORDS
from linkedin_autoapply.models import flag
from linkedin_autoapply.reasoning.normalize import (
    contains_all,
    find_best_match,
    normalize_text,
)

# Resume self-identification keys per EEO topic
EEO_TOPICS = (
    (('gender', 'sex'), 'gender'),
    (('pronoun',), 'pronouns'),
    (('veteran', 'military'), 'veteran'),
    (('disability', 'disabled', 'impairment'), 'disability'),
    (('race', 'ethnicity', 'ethnic'), 'ethnicity'),
)


def is_placeholder_option(option):
    normalized = normalize_text(option)
    return not normalized or normalized.startswith(('select', 'please select', 'choose'))


def real_options(options):
    """Options without the "Select an option" placeholder"""
    return [opt for opt in options if not is_placeholder_option(opt)]


def is_eeo_question(question, options):
    normalized = normalize_text(question)
    if any(kw in normalized for kw in EEO_KEYWORDS):
        return True
    options_str = ' '.join(normalize_text(opt) for opt in options)
    if 'male' in options_str and 'female' in options_str:
        return True
    if any(race in options_str for race in ('white', 'black', 'asian', 'hispanic', 'african american')):
        return True
    return 'protected veteran' in options_str or 'disability' in options_str


def decline_option(options):
    for option in options:
        normalized = normalize_text(option)
        if any(normalize_text(pattern) in normalized for pattern in DECLINE_PATTERNS):
            return option
    return None


def yes_no_option(options, value):
    wanted = 'yes' if value else 'no'
    for option in options:
        if normalize_text(option) == wanted:
            return option
    for option in options:
        if normalize_text(option).startswith(wanted + ' '):
            return option
    return None


def is_yes_no(options):
    normalized = {normalize_text(opt).split(' ')[0] for opt in options if normalize_text(opt)}
    return {'yes', 'no'} <= normalized


def _eeo_answer(question, options, resume):
    normalized = normalize_text(question)
    for keywords, key in EEO_TOPICS:
        if any(kw in normalized for kw in keywords):
            value = resume.self_identification.get(key)
            if value:
                return find_best_match(str(value), options)
    return decline_option(options)


def _boolean_answer(question, options, resume):
    normalized = normalize_text(question)
    for keywords, section, name, default in BOOLEAN_QUESTIONS:
        if contains_all(normalized, keywords):
            value = flag(getattr(resume, section).get(name), default)
            return yes_no_option(options, value)
    if 'bachelor' in normalized:
        has_degree = any('bachelor' in e.degree.lower() or e.degree.upper() in ('BS', 'BA', 'BSC') for e in resume.education)
        return yes_no_option(options, has_degree)
    return None


def _language_answer(question, options, resume):
    normalized = normalize_text(question)
    for entry in resume.languages:
        language = normalize_text(entry.get('language', ''))
        if language and language in normalized and entry.get('proficiency'):
            return find_best_match(entry['proficiency'], options)
    return None


def resolve_choice(question, options, resume):
    """
    Pure function: pick an option for a radio group or dropdown from the resume.

    Returns the chosen option text, or None to ask the backend.
    - EEO / self-identification: resume value when given, else the decline option
    - Yes/no: work authorization, sponsorship, relocation and similar resume flags
    - Language proficiency from the resume languages
    """
    options = real_options(options)
    if not options:
        return None

    if is_eeo_question(question, options):
        answer = _eeo_answer(question, options, resume)
        if answer:
            return answer

    if is_yes_no(options):
        answer = _boolean_answer(question, options, resume)
        if answer:
            return answer

    if 'proficien' in normalize_text(question) or 'level' in normalize_text(question):
        return _language_answer(question, options, resume)
    return None
