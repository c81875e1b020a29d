"""Configuration, timing profiles and run settings"""

import logging
from dataclasses import dataclass, field, fields

from linkedin_autoapply.models import BlacklistRules, SearchCriteria

log = logging.getLogger(__name__)

# ========================================
# TIMING PROFILES
# ========================================
# All delays are in milliseconds (ms) and jittered through human_delay()

TIMING_PROFILES = {
    "default": {
        "key_delay_min": 200,
        "key_delay_max": 400,
        "focus_delay_min": 300,
        "focus_delay_max": 500,
        "dropdown_open_min": 300,
        "dropdown_open_max": 500,
        "modal_transition_min": 400,
        "modal_transition_max": 600,
        "post_input_min": 200,
        "post_input_max": 400,
    },
    "dev_test": {
        "key_delay_min": 120,
        "key_delay_max": 240,
        "focus_delay_min": 180,
        "focus_delay_max": 300,
        "dropdown_open_min": 180,
        "dropdown_open_max": 300,
        "modal_transition_min": 400,
        "modal_transition_max": 450,
        "post_input_min": 120,
        "post_input_max": 240,
    },
    "super_dev": {
        "key_delay_min": 60,
        "key_delay_max": 120,
        "focus_delay_min": 100,
        "focus_delay_max": 150,
        "dropdown_open_min": 90,
        "dropdown_open_max": 150,
        "modal_transition_min": 400,
        "modal_transition_max": 450,
        "post_input_min": 60,
        "post_input_max": 120,
    },
}

_MIN_DELAY_MS = 25
_MIN_MODAL_TRANSITION_MS = 400

# Jitter ranges (ms) between discrete operations
DELAYS = {
    "field": (300, 600),
    "click": (500, 1000),
    "page_transition": (1000, 2000),
    "between_postings": (3000, 6000),
    "between_pages": (9000, 12000),
}


def timing_violations(profile):
    violations = []
    for key, value in profile.items():
        if value < _MIN_DELAY_MS:
            violations.append(f"{key}={value}ms < {_MIN_DELAY_MS}ms minimum")
        if "modal" in key and value < _MIN_MODAL_TRANSITION_MS:
            violations.append(f"{key}={value}ms < {_MIN_MODAL_TRANSITION_MS}ms minimum")
    return violations


def get_active_timing(mode="default"):
    """Timing profile for `mode`, falling back to default when unknown or unsafe"""
    profile = TIMING_PROFILES.get(mode)
    if profile is None:
        log.warning("Unknown timing profile %r, using default", mode)
        return TIMING_PROFILES["default"]

    violations = timing_violations(profile)
    if violations:
        log.warning("Timing profile %r violates minimums, using default: %s", mode, "; ".join(violations))
        return TIMING_PROFILES["default"]

    if mode != "default":
        log.info("Timing profile %r active", mode)
    return profile


# ========================================
# RUN SETTINGS
# ========================================


@dataclass
class BotSettings:
    max_steps: int = 15
    max_pages: int = 40
    page_load_attempts: int = 2
    answer_attempts: int = 2
    answer_timeout: float = 60.0
    login_poll_interval: float = 1.0
    login_debounce: float = 2.0
    checkpoint_timeout: float = 300.0
    checkpoint_poll_interval: float = 5.0
    settle_attempts: int = 3
    dry_run: bool = False
    resume_path: str = ""
    cover_letter_path: str = ""
    user_data_dir: str = "./browser_data"
    headless: bool = False
    output_dir: str = "."
    timing_mode: str = "default"

    @classmethod
    def from_dict(cls, data):
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            log.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    @property
    def timing(self):
        return get_active_timing(self.timing_mode)


@dataclass
class BotConfig:
    criteria: SearchCriteria
    blacklist: BlacklistRules = field(default_factory=BlacklistRules)
    settings: BotSettings = field(default_factory=BotSettings)

    @classmethod
    def from_dict(cls, data):
        return cls(
            criteria=SearchCriteria.from_dict(data.get("search", {})),
            blacklist=BlacklistRules.from_dict(data.get("blacklist", {})),
            settings=BotSettings.from_dict(data.get("settings", {})),
        )
