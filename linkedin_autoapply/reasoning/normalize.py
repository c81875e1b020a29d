"""Text normalization and matching utilities"""

import re
import string

from linkedin_autoapply.data.answer_bank import PLACEHOLDER_ANSWERS


def normalize_text(text):
    """Normalize text for keyword matching - lowercase, strip punctuation"""
    if not text:
        return ""
    text = text.lower()
    text = text.translate(str.maketrans('', '', string.punctuation))
    return ' '.join(text.split())


def normalize_option_text(text):
    """Normalize dropdown option text for matching - removes filler words"""
    text = normalize_text(text)
    for filler in ('please select', 'select one', 'choose', 'pick'):
        text = text.replace(filler, '')
    return ' '.join(text.split())


def deduplicate_text(text):
    """LinkedIn renders some labels twice ("TitleTitle" or "Title Title")"""
    text = ' '.join((text or '').split())
    if not text:
        return ""
    half = len(text) // 2
    if len(text) % 2 == 0 and text[:half] == text[half:]:
        return text[:half].strip()
    words = text.split(' ')
    if len(words) % 2 == 0 and words[: len(words) // 2] == words[len(words) // 2:]:
        return ' '.join(words[: len(words) // 2])
    return text


def levenshtein(a, b):
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (ca != cb)))
        previous = current
    return previous[-1]


def find_best_match(answer, options):
    """
    Map a free-form answer onto one of `options`.

    Order: exact (normalized), then containment either way, then the
    smallest edit distance. Returns None only when there are no options.
    """
    if not options:
        return None
    target = normalize_option_text(answer)
    normalized = [normalize_option_text(opt) for opt in options]

    for option, norm in zip(options, normalized):
        if norm == target:
            return option

    if target:
        for option, norm in zip(options, normalized):
            if norm and (target in norm or norm in target):
                return option

    distances = [levenshtein(target, norm) for norm in normalized]
    return options[distances.index(min(distances))]


def extract_number(text):
    """First integer in `text`, or None"""
    match = re.search(r'\d+', text or '')
    return int(match.group(0)) if match else None


def is_placeholder_answer(text):
    """True for empty answers and template filler that should never be typed"""
    normalized = (text or '').strip().lower()
    if not normalized:
        return True
    if normalized in PLACEHOLDER_ANSWERS:
        return True
    return bool(re.search(r'\[[a-z _]+\]|\{[a-z_]+\}|<[a-z _]+>', normalized))


def contains_all(text, keywords):
    return all(kw in text for kw in keywords)
