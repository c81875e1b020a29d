"""Core records shared across the engine"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from urllib.parse import urlencode


# ========================================
# AUTH
# ========================================


class AuthState(Enum):
    NOT_STARTED = "not_started"
    NAVIGATING = "navigating"
    AWAITING_LOGIN = "awaiting_login"
    SECURITY_CHECK = "security_check"
    AUTHENTICATED = "authenticated"
    FATAL = "fatal"


@dataclass
class SessionState:
    authenticated: bool = False
    last_known_url: str = ""
    started_at: datetime = field(default_factory=datetime.now)
    state: AuthState = AuthState.NOT_STARTED


# ========================================
# SEARCH
# ========================================

EXPERIENCE_LEVEL_CODES = {
    "internship": "1",
    "entry": "2",
    "associate": "3",
    "mid-senior level": "4",
    "director": "5",
    "executive": "6",
}

JOB_TYPE_CODES = {
    "full-time": "F",
    "contract": "C",
    "part-time": "P",
    "temporary": "T",
    "internship": "I",
    "other": "O",
    "volunteer": "V",
}

DATE_POSTED_CODES = {
    "month": "r2592000",
    "week": "r604800",
    "24 hours": "r86400",
}


@dataclass(frozen=True)
class SearchFilters:
    """One filter set. Unknown level/type/date names are ignored."""

    remote: bool = False
    experience_levels: tuple = ()
    job_types: tuple = ()
    date_posted: str = ""
    distance: int = 0

    @classmethod
    def from_dict(cls, data):
        return cls(
            remote=bool(data.get("remote", False)),
            experience_levels=tuple(data.get("experience_levels", ())),
            job_types=tuple(data.get("job_types", ())),
            date_posted=data.get("date_posted", "") or "",
            distance=int(data.get("distance", 0) or 0),
        )

    def query_params(self):
        """LinkedIn query parameters for this filter set, Easy Apply only"""
        params = []
        if self.remote:
            params.append(("f_WT", "2"))
        levels = [EXPERIENCE_LEVEL_CODES[l] for l in self.experience_levels if l in EXPERIENCE_LEVEL_CODES]
        if levels:
            params.append(("f_E", ",".join(levels)))
        types = [JOB_TYPE_CODES[t] for t in self.job_types if t in JOB_TYPE_CODES]
        if types:
            params.append(("f_JT", ",".join(types)))
        if self.date_posted in DATE_POSTED_CODES:
            params.append(("f_TPR", DATE_POSTED_CODES[self.date_posted]))
        if self.distance > 0:
            params.append(("distance", str(self.distance)))
        params.append(("f_AL", "true"))
        return params


@dataclass(frozen=True)
class SearchCriteria:
    keywords: tuple
    locations: tuple
    filters: tuple = ()

    @classmethod
    def from_dict(cls, data):
        return cls(
            keywords=tuple(data.get("keywords", ())),
            locations=tuple(data.get("locations", ())),
            filters=tuple(SearchFilters.from_dict(f) for f in data.get("filters", ())),
        )


SEARCH_BASE_URL = "https://www.linkedin.com/jobs/search/"
RESULTS_PAGE_SIZE = 25


@dataclass(frozen=True)
class SearchQuery:
    keyword: str
    location: str
    filters: SearchFilters

    @property
    def url(self):
        return self.url_for_page(0)

    def url_for_page(self, page_number):
        params = list(self.filters.query_params())
        params += [
            ("keywords", self.keyword),
            ("location", self.location),
            ("start", str(page_number * RESULTS_PAGE_SIZE)),
        ]
        return f"{SEARCH_BASE_URL}?{urlencode(params)}"

    def describe(self):
        return f"{self.keyword!r} in {self.location!r}"


@dataclass(frozen=True)
class JobPosting:
    external_id: str
    title: str
    company_name: str
    listing_url: str
    location: str = ""
    apply_method: str = ""

    @property
    def already_applied(self):
        return self.apply_method.lower() == "applied"


@dataclass(frozen=True)
class BlacklistRules:
    companies: tuple = ()
    titles: tuple = ()

    @classmethod
    def from_dict(cls, data):
        return cls(
            companies=tuple(data.get("companies", ())),
            titles=tuple(data.get("titles", ())),
        )

    def matches(self, posting):
        """Case-insensitive partial match on company or title"""
        company = posting.company_name.lower()
        title = posting.title.lower()
        if any(entry.lower() in company for entry in self.companies if entry):
            return True
        return any(entry.lower() in title for entry in self.titles if entry)


# ========================================
# APPLICATION
# ========================================


class Outcome(Enum):
    SUBMITTED = "submitted"
    SKIPPED = "skipped"
    ABORTED = "aborted"


@dataclass(frozen=True)
class ApplicationAttempt:
    posting: JobPosting
    outcome: Outcome
    reason: str = ""
    steps_completed: int = 0


class ControlKind(Enum):
    FILE = "file"
    RADIO = "radio"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TYPEAHEAD = "typeahead"
    DATE = "date"
    NUMBER = "number"
    TEXTAREA = "textarea"
    TEXT = "text"


@dataclass
class FieldContext:
    """Everything known about one form control, built right before dispatch"""

    key: str
    control_kind: ControlKind
    label: str = ""
    options: list = field(default_factory=list)
    required: bool = False
    input_type: str = ""
    element_id: str = ""
    element_name: str = ""
    placeholder: str = ""
    current_value: str = ""
    error: str = ""

    @property
    def question(self):
        return self.label or self.placeholder or self.element_name

    @property
    def has_value(self):
        return bool(self.current_value and self.current_value.strip())


class StepAction(Enum):
    NEXT = "next"
    REVIEW = "review"
    SUBMIT = "submit"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class StepDecision:
    action: StepAction
    ready: bool = True
    reason: str = ""
    errors: tuple = ()


# ========================================
# RESUME
# ========================================


@dataclass
class PersonalInfo:
    name: str = ""
    surname: str = ""
    email: str = ""
    phone: str = ""
    city: str = ""
    country: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""

    @property
    def full_name(self):
        return " ".join(part for part in (self.name, self.surname) if part)

    @property
    def phone_national(self):
        """Phone number without a leading +XX country prefix"""
        phone = self.phone.strip()
        if phone.startswith("+"):
            parts = phone.split(None, 1)
            if len(parts) == 2:
                return parts[1]
            match = re.match(r"\+\d{1,3}[\s-]?(.*)", phone)
            if match:
                return match.group(1)
        return phone


@dataclass
class Experience:
    position: str = ""
    company: str = ""
    employment_period: str = ""
    location: str = ""
    skills: list = field(default_factory=list)
    responsibilities: list = field(default_factory=list)


@dataclass
class Education:
    degree: str = ""
    university: str = ""
    field_of_study: str = ""
    graduation_year: str = ""
    gpa: str = ""


@dataclass
class ResumeData:
    personal: PersonalInfo = field(default_factory=PersonalInfo)
    experiences: list = field(default_factory=list)
    education: list = field(default_factory=list)
    skills: list = field(default_factory=list)
    languages: list = field(default_factory=list)
    legal_authorization: dict = field(default_factory=dict)
    work_preferences: dict = field(default_factory=dict)
    self_identification: dict = field(default_factory=dict)
    notice_period: str = "2 weeks"
    salary_expectation: str = ""
    summary: str = ""

    @classmethod
    def from_dict(cls, data):
        personal = data.get("personal_information", {}) or {}
        if not personal.get("surname") and " " in personal.get("name", ""):
            first, _, rest = personal["name"].partition(" ")
            personal = {**personal, "name": first, "surname": rest}
        return cls(
            personal=PersonalInfo(**{k: str(v) for k, v in personal.items() if k in PersonalInfo.__dataclass_fields__}),
            experiences=[
                Experience(
                    position=e.get("position", ""),
                    company=e.get("company", ""),
                    employment_period=e.get("employment_period", ""),
                    location=e.get("location", ""),
                    skills=list(e.get("skills", [])),
                    responsibilities=list(e.get("responsibilities", [])),
                )
                for e in data.get("experience_details", [])
            ],
            education=[
                Education(**{k: str(v) for k, v in e.items() if k in Education.__dataclass_fields__})
                for e in data.get("education_details", [])
            ],
            skills=list(data.get("skills", [])),
            languages=list(data.get("languages", [])),
            legal_authorization=dict(data.get("legal_authorization", {})),
            work_preferences=dict(data.get("work_preferences", {})),
            self_identification=dict(data.get("self_identification", {})),
            notice_period=(data.get("availability", {}) or {}).get("notice_period", "2 weeks"),
            salary_expectation=(data.get("salary_expectations", {}) or {}).get("salary_range_usd", ""),
            summary=data.get("summary", ""),
        )

    def all_skills(self):
        """Every skill named in the resume, resume-level first, deduplicated"""
        seen = []
        for skill in list(self.skills) + [s for e in self.experiences for s in e.skills]:
            if skill and skill.lower() not in [s.lower() for s in seen]:
                seen.append(skill)
        return seen


def flag(value: Optional[object], default=False):
    """Read a yes/no style resume flag"""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("yes", "true", "y", "1")
