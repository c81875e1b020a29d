"""Years of experience derived from resume employment periods"""

import re
from datetime import date

from linkedin_autoapply.reasoning.normalize import normalize_text

YEAR_RE = re.compile(r'\b(?:19|20)\d{2}\b')
PRESENT_WORDS = ('present', 'current', 'now', 'today', 'ongoing')
# "experience with X", "years in X", "years using X" name a specific technology
SPECIFIC_MARKERS = (' with ', ' in ', ' using ', ' of experience as ', ' working on ')


def period_bounds(period, today=None):
    """(start_year, end_year) for a period such as "2019 - 2024" or "03/2021 - Present" """
    today = today or date.today()
    years = [int(y) for y in YEAR_RE.findall(period or '')]
    if not years:
        return None
    start = years[0]
    if len(years) > 1:
        end = years[-1]
    elif any(word in (period or '').lower() for word in PRESENT_WORDS):
        end = today.year
    else:
        end = start
    if end < start:
        return None
    return start, end


def merged_years(periods, today=None):
    """Total years covered by periods, overlapping spans counted once"""
    spans = sorted(b for b in (period_bounds(p, today) for p in periods) if b)
    total = 0
    current_start = current_end = None
    for start, end in spans:
        if current_end is None or start > current_end:
            if current_end is not None:
                total += current_end - current_start
            current_start, current_end = start, end
        else:
            current_end = max(current_end, end)
    if current_end is not None:
        total += current_end - current_start
    return total


def total_years(resume, today=None):
    return merged_years([e.employment_period for e in resume.experiences], today)


def _mentions(experience, skill):
    needle = f" {normalize_text(skill)} "
    haystack = " ".join([experience.position] + list(experience.skills) + list(experience.responsibilities))
    return needle in f" {normalize_text(haystack)} "


def years_with_skill(resume, skill, today=None):
    periods = [e.employment_period for e in resume.experiences if _mentions(e, skill)]
    return merged_years(periods, today)


def skill_in_question(question, resume):
    """Longest resume skill named in the question, or None"""
    normalized = f" {normalize_text(question)} "
    candidates = [s for s in resume.all_skills() if normalize_text(s)]
    candidates.sort(key=lambda s: len(normalize_text(s)), reverse=True)
    for skill in candidates:
        if f" {normalize_text(skill)} " in normalized:
            return skill
    return None


def is_years_question(question):
    normalized = normalize_text(question)
    return ('year' in normalized or 'yrs' in normalized) and ('experience' in normalized or 'worked' in normalized)


def years_of_experience_answer(question, resume, today=None):
    """
    Years of experience for a question, computed from the resume.

    Returns None when the question is not about years of experience, or names
    something the resume gives no dated evidence for.
    """
    if not is_years_question(question):
        return None

    skill = skill_in_question(question, resume)
    if skill:
        years = years_with_skill(resume, skill, today)
        return years if years > 0 else None

    padded = f" {normalize_text(question)} ".replace(" in total ", " ")
    if any(marker in padded for marker in SPECIFIC_MARKERS):
        return None
    years = total_years(resume, today)
    return years if resume.experiences else None
