"""
Configuration and Logging Setup

Provides the automation configuration consumed by session construction and
centralized logging for the page object layer. Values are read from
environment variables (and a .env file, if present).

Usage:
    from dual_pom.config import AutomationConfig, configure_logging

    configure_logging()
    config = AutomationConfig.from_env()
"""

import logging
import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .models import BackendKind, WaitPolicy

# Load environment variables
load_dotenv()

# Default configuration
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s: %(message)s"

DEFAULT_BASE_URL = "https://the-internet.herokuapp.com"

# Valid log levels
VALID_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Accepted spellings for the backend kind, including the framework names
BACKEND_ALIASES = {
    "protocol-driver": BackendKind.PROTOCOL_DRIVER,
    "protocol_driver": BackendKind.PROTOCOL_DRIVER,
    "selenium": BackendKind.PROTOCOL_DRIVER,
    "webdriver": BackendKind.PROTOCOL_DRIVER,
    "direct-control": BackendKind.DIRECT_CONTROL,
    "direct_control": BackendKind.DIRECT_CONTROL,
    "playwright": BackendKind.DIRECT_CONTROL,
}

TRUTHY = ("true", "1", "yes")

# Loggers that emit one record per driver command
DRIVER_LOGGERS = ("selenium", "urllib3", "playwright")


def parse_backend_kind(value: Union[str, BackendKind, None]) -> BackendKind:
    """
    Parse a backend kind from user input.

    Args:
        value: Kind name or alias (case-insensitive). None selects the default.

    Returns:
        BackendKind

    Raises:
        ValueError: If the value is not a known kind or alias
    """
    if value is None or value == "":
        return BackendKind.PROTOCOL_DRIVER
    if isinstance(value, BackendKind):
        return value

    kind = BACKEND_ALIASES.get(value.strip().lower())
    if kind is None:
        raise ValueError(
            f"Unknown backend kind '{value}'. "
            f"Valid values: {', '.join(k.value for k in BackendKind)}"
        )
    return kind


@dataclass
class AutomationConfig:
    """
    Configuration for one automation session.

    Only `backend` is consumed by the page object core; the remaining fields
    shape how the backend builds its browser.
    """

    # Backend selected for the session
    backend: BackendKind = BackendKind.PROTOCOL_DRIVER

    # Browser name: chrome/chromium, firefox, safari/webkit, edge
    browser_type: str = "chrome"

    headless: bool = True

    # Viewport size (window size for WebDriver)
    viewport_width: int = 1920
    viewport_height: int = 1080

    # Slow motion delay in ms (Playwright only)
    slow_mo: int = 0

    locale: str = "en-US"

    # Site under test
    base_url: str = DEFAULT_BASE_URL

    # Explicit-polling wait (seconds)
    explicit_timeout: float = 10.0
    explicit_poll_interval: float = 0.5

    # Auto-actionability wait (seconds)
    auto_timeout: float = 30.0
    auto_poll_interval: float = 0.1

    screenshot_dir: Path = field(default_factory=lambda: Path("screenshots"))

    @property
    def explicit_wait(self) -> WaitPolicy:
        return WaitPolicy(
            timeout=self.explicit_timeout,
            poll_interval=self.explicit_poll_interval,
        )

    @property
    def auto_wait(self) -> WaitPolicy:
        return WaitPolicy(
            timeout=self.auto_timeout,
            poll_interval=self.auto_poll_interval,
        )

    def with_backend(self, backend: Union[str, BackendKind]) -> "AutomationConfig":
        """Return a copy of this config targeting another backend."""
        return replace(self, backend=parse_backend_kind(backend))

    @classmethod
    def from_env(cls) -> "AutomationConfig":
        """
        Create AutomationConfig from environment variables.

        Environment variables:
            BACKEND_KIND: protocol-driver or direct-control (alias: FRAMEWORK)
            BROWSER_TYPE: chrome, chromium, firefox, safari, webkit, edge
            BROWSER_HEADLESS: true/false (default: true)
            BROWSER_VIEWPORT_WIDTH / BROWSER_VIEWPORT_HEIGHT: int
            BROWSER_SLOW_MO: int in ms (default: 0)
            BROWSER_LOCALE: locale for new contexts (default: en-US)
            BASE_URL: site under test
            EXPLICIT_WAIT_TIMEOUT / EXPLICIT_WAIT_POLL: seconds (10 / 0.5)
            AUTO_WAIT_TIMEOUT / AUTO_WAIT_POLL: seconds (30 / 0.1)
            SCREENSHOT_DIR: path (default: screenshots)
        """
        backend = parse_backend_kind(
            os.getenv("BACKEND_KIND") or os.getenv("FRAMEWORK")
        )

        headless = os.getenv("BROWSER_HEADLESS", "true").lower() in TRUTHY

        return cls(
            backend=backend,
            browser_type=os.getenv("BROWSER_TYPE", "chrome").lower(),
            headless=headless,
            viewport_width=int(os.getenv("BROWSER_VIEWPORT_WIDTH", "1920")),
            viewport_height=int(os.getenv("BROWSER_VIEWPORT_HEIGHT", "1080")),
            slow_mo=int(os.getenv("BROWSER_SLOW_MO", "0")),
            locale=os.getenv("BROWSER_LOCALE", "en-US"),
            base_url=os.getenv("BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            explicit_timeout=float(os.getenv("EXPLICIT_WAIT_TIMEOUT", "10")),
            explicit_poll_interval=float(os.getenv("EXPLICIT_WAIT_POLL", "0.5")),
            auto_timeout=float(os.getenv("AUTO_WAIT_TIMEOUT", "30")),
            auto_poll_interval=float(os.getenv("AUTO_WAIT_POLL", "0.1")),
            screenshot_dir=Path(os.getenv("SCREENSHOT_DIR", "screenshots")),
        )


def get_log_level(name: Optional[str] = None) -> int:
    """Resolve a level name, falling back to LOG_LEVEL and then INFO."""
    name = (name or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)).strip().upper()
    level = VALID_LEVELS.get(name)
    if level is None:
        print(
            f"Warning: unknown log level '{name}', expected one of "
            f"{', '.join(VALID_LEVELS)}; falling back to {DEFAULT_LOG_LEVEL}",
            file=sys.stderr,
        )
        level = VALID_LEVELS[DEFAULT_LOG_LEVEL]
    return level


def configure_logging(
    level: Optional[int] = None,
    verbose: Optional[bool] = None,
) -> None:
    """
    Route dual_pom and driver logs to stderr.

    Selenium and Playwright log every wire command at DEBUG, so their loggers
    follow *level* only when debugging and stay at WARNING otherwise.

    Args:
        level: Log level (default: from LOG_LEVEL)
        verbose: Timestamped format with logger names (default: LOG_VERBOSE)
    """
    if level is None:
        level = get_log_level()
    if verbose is None:
        verbose = os.getenv("LOG_VERBOSE", "false").lower() in TRUTHY

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT if verbose else LOG_FORMAT_SIMPLE,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("dual_pom").setLevel(level)

    driver_level = level if level <= logging.DEBUG else logging.WARNING
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(driver_level)
