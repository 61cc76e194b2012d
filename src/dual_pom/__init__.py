"""
Dual-Backend Page Objects

Page objects that run unchanged against Selenium WebDriver (protocol-driver)
or Playwright (direct-control). The backend is chosen per session; pages only
ever talk to the backend capability object.
"""

from .backends import (
    Backend,
    DirectControlBackend,
    ProtocolDriverBackend,
    SharedBrowser,
    create_backend,
)
from .config import AutomationConfig, configure_logging, parse_backend_kind
from .errors import (
    ActionNotPermittedError,
    AutomationError,
    BackendError,
    ElementNotFoundError,
    SessionClosedError,
    SessionStartError,
    StaleElementError,
    StrictModeViolationError,
    WaitTimeoutError,
)
from .locators import EagerLocator, LazyLocator, Locator
from .models import (
    BackendKind,
    LocatorSpec,
    SelectorStrategy,
    SessionState,
    TeardownReport,
    WaitCondition,
    WaitPolicy,
)
from .pages import BasePage, LoginPage, SecurePage, SelectorPlaygroundPage
from .session import Session, SessionManager
from .waits import AutoWait, ExplicitWait, WaitStrategy

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "AutomationConfig",
    "configure_logging",
    "parse_backend_kind",
    # Models
    "BackendKind",
    "LocatorSpec",
    "SelectorStrategy",
    "SessionState",
    "TeardownReport",
    "WaitCondition",
    "WaitPolicy",
    # Errors
    "AutomationError",
    "ActionNotPermittedError",
    "BackendError",
    "ElementNotFoundError",
    "SessionClosedError",
    "SessionStartError",
    "StaleElementError",
    "StrictModeViolationError",
    "WaitTimeoutError",
    # Locators and waits
    "Locator",
    "EagerLocator",
    "LazyLocator",
    "WaitStrategy",
    "ExplicitWait",
    "AutoWait",
    # Backends and sessions
    "Backend",
    "DirectControlBackend",
    "ProtocolDriverBackend",
    "SharedBrowser",
    "create_backend",
    "Session",
    "SessionManager",
    # Pages
    "BasePage",
    "LoginPage",
    "SecurePage",
    "SelectorPlaygroundPage",
]
