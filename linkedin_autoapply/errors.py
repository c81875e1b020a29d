"""Error taxonomy for the application engine"""

# Substrings Playwright uses when the page, context or browser is gone
BROWSER_CLOSED_MARKERS = (
    "Target page, context or browser has been closed",
    "Target closed",
    "Browser closed",
    "Browser has been closed",
    "Connection closed",
)


class FatalBotError(Exception):
    """Ends the whole run. Never retried."""

    reason = "fatal_error"


class BrowserClosedError(FatalBotError):
    reason = "browser_closed"


class CheckpointTimeoutError(FatalBotError):
    reason = "checkpoint_timeout"

    def __init__(self, message="Login aborted: security checkpoint not passed within time limit"):
        super().__init__(message)


class InsufficientCreditsError(FatalBotError):
    reason = "insufficient_credits"


class ConfigError(ValueError):
    """Raised by the facade when configuration or resume data is unusable"""


class PageLoadError(Exception):
    """A result or listing page failed to load after its retries"""


class ListingParseError(Exception):
    """No posting on a result page could be parsed"""


class TextGenerationError(Exception):
    """The text-generation backend failed for a single request"""


class AnswerUnavailable(Exception):
    """No usable answer after the bounded number of attempts"""

    def __init__(self, question, attempts, last_error=None):
        self.question = question
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"No answer for {question!r} after {attempts} attempt(s): {last_error}")


def is_browser_closed(error) -> bool:
    """True when an exception means the browser session is gone"""
    if isinstance(error, BrowserClosedError):
        return True
    message = str(error)
    return any(marker in message for marker in BROWSER_CLOSED_MARKERS)


def raise_if_closed(error):
    """Re-raise a Playwright error as BrowserClosedError when the browser is gone"""
    if is_browser_closed(error):
        raise BrowserClosedError(str(error)) from error
