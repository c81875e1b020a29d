"""Deterministic answers for text, numeric and date controls"""

import re
from datetime import date, timedelta

from linkedin_autoapply.models import ControlKind
from linkedin_autoapply.reasoning.experience import years_of_experience_answer
from linkedin_autoapply.reasoning.normalize import contains_all, extract_number, normalize_text

SIGNATURE_PATTERNS = ('sign', 'signature', 'initials')
TODAY_PATTERNS = ("today", "current date", "todays date", "signature date", "date signed")


def _education(resume, attr):
    for entry in resume.education:
        value = getattr(entry, attr, "")
        if value:
            return value
    return ""


# Keyword → resume value, most specific first
TEXT_MAPPINGS = (
    (('first', 'name'), lambda r: r.personal.name),
    (('given', 'name'), lambda r: r.personal.name),
    (('last', 'name'), lambda r: r.personal.surname),
    (('surname',), lambda r: r.personal.surname),
    (('family', 'name'), lambda r: r.personal.surname),
    (('full', 'name'), lambda r: r.personal.full_name),
    (('legal', 'name'), lambda r: r.personal.full_name),
    (('your', 'name'), lambda r: r.personal.full_name),
    (('signature',), lambda r: r.personal.full_name),
    (('email',), lambda r: r.personal.email),
    (('phone',), lambda r: r.personal.phone_national),
    (('mobile',), lambda r: r.personal.phone_national),
    (('linkedin',), lambda r: r.personal.linkedin),
    (('github',), lambda r: r.personal.github),
    (('portfolio',), lambda r: r.personal.website or r.personal.github),
    (('website',), lambda r: r.personal.website or r.personal.github),
    (('city',), lambda r: r.personal.city),
    (('location',), lambda r: r.personal.city),
    (('country',), lambda r: r.personal.country),
    (('university',), lambda r: _education(r, 'university')),
    (('college',), lambda r: _education(r, 'university')),
    (('school',), lambda r: _education(r, 'university')),
    (('field', 'study'), lambda r: _education(r, 'field_of_study')),
    (('major',), lambda r: _education(r, 'field_of_study')),
    (('degree',), lambda r: _education(r, 'degree')),
    (('notice',), lambda r: r.notice_period),
    (('salary',), lambda r: r.salary_expectation),
    (('compensation',), lambda r: r.salary_expectation),
)


def combined_text(context):
    return normalize_text(f"{context.label} {context.placeholder}")


def resolve_text_answer(context, resume):
    """
    Pure function: resume-derived answer for a text-like control, or None.

    None means "ask the text-generation backend".
    """
    text = combined_text(context)
    if not text:
        return None
    if 'country code' in text or 'extension' in text:
        return None

    for keywords, getter in TEXT_MAPPINGS:
        if contains_all(text, keywords):
            value = getter(resume)
            return value or None
    return None


def first_number(text):
    """First number in free text, thousands separators ignored"""
    return extract_number(re.sub(r'(?<=\d)[,.](?=\d{3}\b)', '', text or ''))


def resolve_numeric_answer(context, resume, today=None):
    """Numeric answer from the resume (int, or the GPA as written), or None"""
    question = context.question
    years = years_of_experience_answer(question, resume, today)
    if years is not None:
        return years

    text = combined_text(context)
    if 'gpa' in text:
        gpa = _education(resume, 'gpa')
        return gpa if re.match(r'^\d+(\.\d+)?$', gpa or '') else None
    if 'notice' in text:
        weeks = notice_period_days(resume.notice_period) // 7
        return weeks if 'week' in text else notice_period_days(resume.notice_period)
    if 'salary' in text or 'compensation' in text:
        return first_number(resume.salary_expectation)
    return None


def notice_period_days(notice_period):
    text = (notice_period or '').lower()
    amount = extract_number(text)
    if amount is None:
        return 0 if 'immediate' in text else 14
    if 'month' in text:
        return amount * 30
    if 'day' in text:
        return amount
    return amount * 7


def resolve_date_answer(context, resume, today=None):
    """Today's date for signature dates, otherwise the earliest start date"""
    today = today or date.today()
    text = combined_text(context)
    if 'birth' in text or 'dob' in text.split():
        return None
    if any(normalize_text(p) in text for p in TODAY_PATTERNS):
        value = today
    else:
        value = today + timedelta(days=notice_period_days(resume.notice_period))

    if context.input_type == 'date':
        return value.isoformat()
    return value.strftime('%m/%d/%Y')


def resolve_deterministic(context, resume, today=None):
    """Dispatch on control kind; the single entry point handlers use"""
    kind = context.control_kind
    if kind is ControlKind.NUMBER:
        number = resolve_numeric_answer(context, resume, today)
        return None if number is None else str(number)
    if kind is ControlKind.DATE:
        return resolve_date_answer(context, resume, today)
    if kind is ControlKind.TEXTAREA:
        # Long-form prompts only get resume values when they ask for one
        text = combined_text(context)
        if any(p in text for p in SIGNATURE_PATTERNS):
            return resume.personal.full_name or None
        return None
    return resolve_text_answer(context, resume)
