"""
Backend Error Translation

Context managers that convert Selenium and Playwright exceptions into the
dual_pom error taxonomy at the backend boundary. Errors that are already
AutomationErrors pass through untouched.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    InvalidElementStateException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from .errors import (
    ActionNotPermittedError,
    BackendError,
    ElementNotFoundError,
    StaleElementError,
    StrictModeViolationError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)

# Fragments of Playwright's call log that mean "present but not interactable"
NOT_PERMITTED_MARKERS = (
    "element is not enabled",
    "element is disabled",
    "element is not editable",
    "intercepts pointer events",
)

STRICT_MODE_MARKER = "strict mode violation"


@contextmanager
def selenium_errors(selector: Optional[str] = None) -> Iterator[None]:
    """Translate Selenium WebDriver exceptions raised inside the block."""
    try:
        yield
    except StaleElementReferenceException as e:
        raise StaleElementError(
            f"Element reference for '{selector}' is stale: the DOM changed after it was resolved",
            selector,
        ) from e
    except NoSuchElementException as e:
        raise ElementNotFoundError(f"No element matches '{selector}'", selector) from e
    except TimeoutException as e:
        raise WaitTimeoutError(
            f"Timed out waiting on '{selector}': {e.msg or 'condition not met'}",
            selector,
        ) from e
    except (
        ElementClickInterceptedException,
        ElementNotInteractableException,
        InvalidElementStateException,
    ) as e:
        raise ActionNotPermittedError(
            f"Element '{selector}' is present but not interactable: {e.msg}",
            selector,
        ) from e
    except WebDriverException as e:
        raise BackendError(f"WebDriver failure on '{selector}': {e.msg}", selector) from e


def _count_matches(probe: Any) -> Optional[int]:
    try:
        return probe.count()
    except PlaywrightError as e:
        logger.debug(f"Could not count matches after timeout: {e}")
        return None


@contextmanager
def playwright_errors(
    selector: Optional[str] = None,
    probe: Any = None,
    condition: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Iterator[None]:
    """
    Translate Playwright exceptions raised inside the block.

    Args:
        selector: Description used in error messages
        probe: Playwright Locator counted after a timeout to tell
            "never appeared" from "appeared but never became ready"
        condition: Wait condition, recorded on WaitTimeoutError
        timeout: Timeout in seconds, recorded on WaitTimeoutError
    """
    try:
        yield
    except PlaywrightTimeoutError as e:
        message = str(e)
        if any(marker in message for marker in NOT_PERMITTED_MARKERS):
            raise ActionNotPermittedError(
                f"Element '{selector}' is present but not interactable", selector
            ) from e
        if probe is not None and _count_matches(probe) == 0:
            raise ElementNotFoundError(
                f"No element matches '{selector}' after waiting", selector
            ) from e
        raise WaitTimeoutError(
            f"Timed out waiting on '{selector}'" + (f" to be {condition}" if condition else ""),
            selector,
            condition=condition,
            timeout=timeout,
        ) from e
    except PlaywrightError as e:
        if STRICT_MODE_MARKER in str(e):
            raise StrictModeViolationError(
                f"'{selector}' matched more than one element", selector
            ) from e
        raise BackendError(f"Playwright failure on '{selector}': {e.message}", selector) from e
