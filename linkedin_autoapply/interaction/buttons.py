"""Button interactions"""

import logging

from linkedin_autoapply.config import TIMING_PROFILES
from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)


async def first_present(scope, selectors):
    """First locator among `selectors` that exists inside `scope`, or None"""
    for selector in selectors:
        locator = scope.locator(selector)
        if await locator.count() > 0:
            return locator.first
    return None


async def activate_button_in_modal(modal, selectors, label, timing=None):
    """Focus and activate a button INSIDE the modal only. False when missing or disabled."""
    timing = timing or TIMING_PROFILES["default"]

    button = await first_present(modal, selectors)
    if button is None:
        log.info("  '%s' button not found in modal", label)
        return False

    if await button.is_disabled():
        log.info("  '%s' button found but DISABLED", label)
        return False

    await button.focus()
    await human_delay(timing["focus_delay_min"], timing["focus_delay_max"])
    await button.press("Enter")
    await human_delay(timing["modal_transition_min"], timing["modal_transition_max"])
    log.info("  ✓ Activated '%s' button in modal", label)
    return True
