"""
Error Taxonomy

Every failure surfaced by the page object layer derives from AutomationError.
Backend modules translate Selenium and Playwright exceptions into these types
at the boundary so tests can assert on one vocabulary regardless of backend.
"""

from typing import Optional


class AutomationError(Exception):
    """Base class for all page object layer errors."""

    def __init__(self, message: str, selector: Optional[str] = None):
        super().__init__(message)
        self.selector = selector


class ElementNotFoundError(AutomationError):
    """Selector matched zero elements after the applicable wait."""


class StaleElementError(AutomationError):
    """An eagerly resolved reference was used after the DOM invalidated it."""


class StrictModeViolationError(AutomationError):
    """A lazy selector matched more than one element for a single-element operation."""


class WaitTimeoutError(AutomationError):
    """A wait condition never became true within its timeout."""

    def __init__(
        self,
        message: str,
        selector: Optional[str] = None,
        condition: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(message, selector)
        self.condition = condition
        self.timeout = timeout


class SessionClosedError(AutomationError):
    """An operation was attempted on a session that is closing or closed."""


class ActionNotPermittedError(AutomationError):
    """The target is present but cannot be interacted with (disabled, covered, readonly)."""


class SessionStartError(AutomationError):
    """Backend resources could not be acquired."""


class BackendError(AutomationError):
    """Any other backend failure. The original exception is chained as __cause__."""
