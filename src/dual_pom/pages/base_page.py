"""Base Page Object shared by every page.

Each page binds a mapping of logical names to LocatorSpecs when it is
constructed and exposes business-level operations built on the primitives
below. Every primitive is dispatched to the session's backend, which decides
how to locate (eager or lazy) and how to wait (explicit or automatic). Pages
never branch on which backend they run against.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Mapping, Optional, Union

from ..backends import Backend
from ..errors import ElementNotFoundError, StaleElementError
from ..locators import Locator
from ..models import LocatorSpec, WaitCondition
from ..session import Session

logger = logging.getLogger(__name__)

Target = Union[LocatorSpec, Locator]


class BasePage:
    """Abstract base for all page objects."""

    # Subclasses override with the page-specific path segment.
    path: str = "/"

    # Subclasses override with their named selectors.
    LOCATORS: ClassVar[Mapping[str, LocatorSpec]] = {}

    def __init__(self, session: Session, base_url: Optional[str] = None) -> None:
        self.session = session
        self.base_url = (base_url or session.config.base_url).rstrip("/")
        self.locators: dict[str, LocatorSpec] = dict(self.LOCATORS)

    @property
    def backend(self) -> Backend:
        return self.session.backend

    def locate(self, target: Target) -> Locator:
        """Turn a spec into a backend Locator. Eager backends query the DOM here."""
        backend = self.backend
        if isinstance(target, Locator):
            return target
        return backend.locator(target)

    def element(self, name: str) -> Locator:
        """Locate one of this page's named elements."""
        return self.locate(self.locators[name])

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        """The page's canonical URL."""
        return f"{self.base_url}{self.path}"

    def navigate(self, url: Optional[str] = None, wait_until: str = "load") -> None:
        """Go to *url* (absolute, or a path under base_url), or to the page's own URL."""
        if url is None:
            url = self.url
        elif url.startswith("/"):
            url = f"{self.base_url}{url}"
        self.backend.navigate(url, wait_until=wait_until)

    def wait_for_load(self, state: str = "load") -> None:
        self.backend.wait_for_load(state)

    def load_html(self, html: str) -> None:
        """Replace the current document with *html*."""
        self.backend.set_content(html)

    @property
    def current_url(self) -> str:
        return self.backend.current_url()

    @property
    def title(self) -> str:
        return self.backend.title()

    # ------------------------------------------------------------------
    # Element primitives
    # ------------------------------------------------------------------

    def click(self, target: Target) -> None:
        locator = self.locate(target)
        logger.debug(f"click {locator.description}")
        self.backend.click(locator)

    def fill(self, target: Target, text: str) -> None:
        """Replace the field's value with *text*."""
        locator = self.locate(target)
        logger.debug(f"fill {locator.description}")
        self.backend.fill(locator, text)

    def get_text(self, target: Target) -> str:
        return self.backend.read_text(self.locate(target))

    def is_visible(self, target: Target) -> bool:
        """Return False rather than raising when nothing matches."""
        try:
            locator = self.locate(target)
        except (ElementNotFoundError, StaleElementError):
            # Eager scoped lookups resolve their parent while locating
            return False
        return self.backend.is_visible(locator)

    def is_enabled(self, target: Target) -> bool:
        return self.backend.is_enabled(self.locate(target))

    def get_attribute(self, target: Target, name: str) -> Optional[str]:
        return self.backend.get_attribute(self.locate(target), name)

    def count(self, target: Target) -> int:
        return self.locate(target).count()

    def wait_for(
        self,
        target: Target,
        condition: Union[WaitCondition, str] = WaitCondition.VISIBLE,
        timeout: Optional[float] = None,
    ) -> None:
        """Block until *target* meets *condition* using the backend's wait strategy."""
        self.backend.await_ready(self.locate(target), condition, timeout)

    def screenshot(self, name: str) -> Path:
        """Capture the page to <screenshot_dir>/<name>.png."""
        path = Path(self.session.config.screenshot_dir) / f"{name}.png"
        logger.info(f"Saving screenshot to {path}")
        return self.backend.screenshot(path)
