"""
Backend Capability Interface

A Backend owns one session's browser resources and implements every
operation the page object layer needs. BasePage holds a single Backend
reference and never branches on which one it is.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import AutomationConfig
from ..locators import Locator
from ..models import BackendKind, LocatorSpec, ResolutionMode, WaitCondition
from ..waits import WaitStrategy

# (step name, release callable), innermost resource first
ReleaseStep = tuple[str, Callable[[], None]]


class Backend(ABC):
    """Base class for automation backends."""

    kind: BackendKind
    resolution_mode: ResolutionMode

    def __init__(self, config: AutomationConfig):
        self.config = config
        self._wait: Optional[WaitStrategy] = None

    @property
    def wait(self) -> WaitStrategy:
        if self._wait is None:
            raise RuntimeError(f"{type(self).__name__} has not been opened")
        return self._wait

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    def open(self) -> None:
        """Acquire browser resources. Partially acquired resources stay
        visible to release_steps() if this raises."""

    @abstractmethod
    def release_steps(self) -> list[ReleaseStep]:
        """Return the steps that release every acquired resource, innermost first."""

    # ------------------------------------------------------------------
    # Location and waiting
    # ------------------------------------------------------------------

    @abstractmethod
    def locator(self, spec: LocatorSpec) -> Locator:
        ...

    def await_ready(
        self,
        locator: Locator,
        condition: Union[WaitCondition, str],
        timeout: Optional[float] = None,
    ) -> None:
        self.wait.await_ready(locator, WaitCondition(condition), timeout)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    @abstractmethod
    def click(self, locator: Locator) -> None:
        ...

    @abstractmethod
    def fill(self, locator: Locator, text: str) -> None:
        ...

    @abstractmethod
    def read_text(self, locator: Locator) -> str:
        ...

    @abstractmethod
    def is_visible(self, locator: Locator) -> bool:
        """Never raises for missing elements; returns False instead."""

    @abstractmethod
    def is_enabled(self, locator: Locator) -> bool:
        ...

    @abstractmethod
    def get_attribute(self, locator: Locator, name: str) -> Optional[str]:
        ...

    # ------------------------------------------------------------------
    # Page-level operations
    # ------------------------------------------------------------------

    @abstractmethod
    def navigate(self, url: str, wait_until: str = "load") -> None:
        ...

    @abstractmethod
    def wait_for_load(self, state: str = "load") -> None:
        ...

    @abstractmethod
    def current_url(self) -> str:
        ...

    @abstractmethod
    def title(self) -> str:
        ...

    @abstractmethod
    def set_content(self, html: str) -> None:
        ...

    @abstractmethod
    def screenshot(self, path: Path) -> Path:
        ...
