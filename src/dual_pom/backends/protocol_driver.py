"""
Protocol-Driver Backend

Selenium WebDriver implementation of the backend interface. One WebDriver
session per test; elements are located eagerly and every sensitive action is
preceded by an explicit wait.
"""

import base64
import logging
from pathlib import Path
from typing import Optional

from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support.ui import WebDriverWait

from ..config import AutomationConfig
from ..errors import ElementNotFoundError, StaleElementError
from ..locators import EagerLocator
from ..models import BackendKind, LocatorSpec, ResolutionMode, WaitCondition
from ..translate import selenium_errors
from ..waits import ExplicitWait
from .base import Backend, ReleaseStep

logger = logging.getLogger(__name__)

# browser_type -> (driver class name, options class name) on selenium.webdriver
DRIVER_CLASSES = {
    "chrome": ("Chrome", "ChromeOptions"),
    "chromium": ("Chrome", "ChromeOptions"),
    "firefox": ("Firefox", "FirefoxOptions"),
    "edge": ("Edge", "EdgeOptions"),
    "safari": ("Safari", "SafariOptions"),
    "webkit": ("Safari", "SafariOptions"),
}

HEADLESS_ARGUMENTS = {
    "Chrome": "--headless=new",
    "Edge": "--headless=new",
    "Firefox": "-headless",
}

# document.readyState values that satisfy each load state
READY_STATES = {
    "load": ("complete",),
    "networkidle": ("complete",),
    "domcontentloaded": ("interactive", "complete"),
    "commit": ("loading", "interactive", "complete"),
}


class ProtocolDriverBackend(Backend):
    """
    Drives the browser through a Selenium WebDriver session.

    Usage:
        >>> backend = ProtocolDriverBackend(AutomationConfig())
        >>> backend.open()
        >>> backend.navigate("https://example.com")
    """

    kind = BackendKind.PROTOCOL_DRIVER
    resolution_mode = ResolutionMode.EAGER

    def __init__(self, config: AutomationConfig):
        super().__init__(config)
        self._driver: Optional[WebDriver] = None

    @property
    def driver(self) -> WebDriver:
        if self._driver is None:
            raise RuntimeError("WebDriver session not started")
        return self._driver

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _build_driver(self) -> WebDriver:
        browser_type = self.config.browser_type.lower()
        if browser_type not in DRIVER_CLASSES:
            raise ValueError(
                f"Unsupported browser '{self.config.browser_type}' for WebDriver. "
                f"Valid values: {', '.join(DRIVER_CLASSES)}"
            )
        driver_name, options_name = DRIVER_CLASSES[browser_type]

        options = getattr(webdriver, options_name)()
        if self.config.headless:
            argument = HEADLESS_ARGUMENTS.get(driver_name)
            if argument:
                options.add_argument(argument)
            else:
                logger.warning(f"{driver_name} does not support headless mode; running headed")

        return getattr(webdriver, driver_name)(options=options)

    def open(self) -> None:
        if self._driver is not None:
            return

        logger.info(f"Starting WebDriver session ({self.config.browser_type})")
        self._driver = self._build_driver()
        self._driver.set_window_size(self.config.viewport_width, self.config.viewport_height)
        self._wait = ExplicitWait(self._driver, self.config.explicit_wait)

    def _quit(self) -> None:
        driver, self._driver = self._driver, None
        driver.quit()

    def release_steps(self) -> list[ReleaseStep]:
        if self._driver is None:
            return []
        return [("driver", self._quit)]

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def locator(self, spec: LocatorSpec) -> EagerLocator:
        return EagerLocator(self.driver, spec)

    # ------------------------------------------------------------------
    # Actions: explicit wait first, then act
    # ------------------------------------------------------------------

    def click(self, locator: EagerLocator) -> None:
        self.wait.await_ready(locator, WaitCondition.CLICKABLE)
        with selenium_errors(locator.description):
            locator.resolve().click()

    def fill(self, locator: EagerLocator, text: str) -> None:
        self.wait.await_ready(locator, WaitCondition.VISIBLE)
        with selenium_errors(locator.description):
            element = locator.resolve()
            element.clear()
            element.send_keys(text)

    def read_text(self, locator: EagerLocator) -> str:
        self.wait.await_ready(locator, WaitCondition.VISIBLE)
        with selenium_errors(locator.description):
            return locator.resolve().text

    def is_visible(self, locator: EagerLocator) -> bool:
        try:
            with selenium_errors(locator.description):
                return locator.resolve().is_displayed()
        except (ElementNotFoundError, StaleElementError):
            return False

    def is_enabled(self, locator: EagerLocator) -> bool:
        with selenium_errors(locator.description):
            return locator.resolve().is_enabled()

    def get_attribute(self, locator: EagerLocator, name: str) -> Optional[str]:
        self.wait.await_ready(locator, WaitCondition.PRESENT)
        with selenium_errors(locator.description):
            return locator.resolve().get_attribute(name)

    # ------------------------------------------------------------------
    # Page-level operations
    # ------------------------------------------------------------------

    def navigate(self, url: str, wait_until: str = "load") -> None:
        if wait_until not in READY_STATES:
            raise ValueError(
                f"Unknown wait_until '{wait_until}'. Valid values: {', '.join(READY_STATES)}"
            )
        if wait_until != "load":
            # get() blocks until the load event whatever is asked for
            logger.debug(f"wait_until={wait_until!r} is satisfied by the load event")
        logger.info(f"Navigating to {url}")
        with selenium_errors(url):
            self.driver.get(url)

    def wait_for_load(self, state: str = "load") -> None:
        ready_states = READY_STATES.get(state)
        if ready_states is None:
            raise ValueError(f"Unknown load state '{state}'. Valid values: {', '.join(READY_STATES)}")

        wait = WebDriverWait(
            self.driver, self.wait.timeout, poll_frequency=self.wait.poll_interval
        )
        with selenium_errors(f"document.readyState in {ready_states}"):
            wait.until(
                lambda d: d.execute_script("return document.readyState") in ready_states
            )

    def current_url(self) -> str:
        return self.driver.current_url

    def title(self) -> str:
        return self.driver.title

    def set_content(self, html: str) -> None:
        encoded = base64.b64encode(html.encode("utf-8")).decode("ascii")
        with selenium_errors("data URL"):
            self.driver.get(f"data:text/html;base64,{encoded}")

    def screenshot(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with selenium_errors(str(path)):
            self.driver.save_screenshot(str(path))
        return path
