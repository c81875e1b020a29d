"""Keyboard interactions"""

import random

from linkedin_autoapply.config import TIMING_PROFILES
from linkedin_autoapply.utils.timing import human_delay


async def keyboard_fill(page, element, value, timing=None):
    """Fill an input by typing (more human-like than element.fill)"""
    timing = timing or TIMING_PROFILES["default"]

    await element.focus()
    await human_delay(timing["focus_delay_min"], timing["focus_delay_max"])

    # Clear existing value
    await page.keyboard.press("Control+a")
    await page.keyboard.press("Backspace")
    await human_delay(timing["key_delay_min"], timing["key_delay_max"])

    await page.keyboard.type(value, delay=random.randint(50, 150))
    await human_delay(timing["post_input_min"], timing["post_input_max"])


async def pick_first_suggestion(page, timing=None):
    """Accept the first typeahead suggestion with ArrowDown + Enter"""
    timing = timing or TIMING_PROFILES["default"]
    await page.keyboard.press("ArrowDown")
    await human_delay(timing["key_delay_min"], timing["key_delay_max"])
    await page.keyboard.press("Enter")
    await human_delay(timing["post_input_min"], timing["post_input_max"])
