"""Static fallback values - known defaults only, nothing applicant-specific"""

# Numeric answer when neither the resume nor the backend gives one
NUMERIC_DEFAULT = 3

# Single checkbox labels that are safe to tick without asking
CONSENT_KEYWORDS = (
    "agree", "accept", "consent", "acknowledge", "confirm",
    "terms", "privacy", "policy", "understand", "certify",
)

# Voluntary self-identification questions
EEO_KEYWORDS = (
    "gender", "sex", "race", "ethnicity", "ethnic", "veteran", "military",
    "disability", "disabled", "impairment", "voluntary self identification",
    "equal opportunity", "affirmative action", "pronoun", "sexual orientation",
)

# Options that decline to self-identify
DECLINE_PATTERNS = (
    "decline", "prefer not", "do not wish", "dont wish", "i dont wish", "not to disclose",
)

# Dropdown first options and answers that carry no information
PLACEHOLDER_ANSWERS = (
    "select an option", "select", "please select", "choose", "choose an option",
    "n/a", "na", "none", "null", "undefined", "[your answer]", "your answer here",
    "lorem ipsum", "todo", "tbd", "xxx",
)

# Yes/no questions answered from resume flags: (keywords, resume section, flag name, default)
BOOLEAN_QUESTIONS = (
    (("authorized", "work"), "legal_authorization", "authorized_to_work", True),
    (("legally", "authorized"), "legal_authorization", "authorized_to_work", True),
    (("legal", "right", "work"), "legal_authorization", "authorized_to_work", True),
    (("work", "authorization"), "legal_authorization", "authorized_to_work", True),
    (("require", "sponsorship"), "legal_authorization", "requires_sponsorship", False),
    (("need", "sponsorship"), "legal_authorization", "requires_sponsorship", False),
    (("visa", "sponsorship"), "legal_authorization", "requires_sponsorship", False),
    (("require", "visa"), "legal_authorization", "requires_visa", False),
    (("willing", "relocate"), "work_preferences", "open_to_relocation", False),
    (("open", "relocation"), "work_preferences", "open_to_relocation", False),
    (("commut",), "work_preferences", "in_person_work", True),
    (("onsite",), "work_preferences", "in_person_work", True),
    (("on site",), "work_preferences", "in_person_work", True),
    (("hybrid",), "work_preferences", "in_person_work", True),
    (("remote",), "work_preferences", "remote_work", True),
    (("background", "check"), "work_preferences", "background_checks", True),
    (("criminal", "background"), "work_preferences", "background_checks", True),
    (("drug", "test"), "work_preferences", "drug_tests", True),
    (("drug", "screen"), "work_preferences", "drug_tests", True),
    (("assessment",), "work_preferences", "assessments", True),
    (("over", "18"), "legal_authorization", "over_18", True),
    (("18", "years", "age"), "legal_authorization", "over_18", True),
)
