"""
Data models for the dual-backend page object layer.

This module defines the enums and Pydantic models shared by every layer:
- BackendKind: which automation backend drives a session
- LocatorSpec: backend-neutral description of how to find elements
- WaitPolicy: timeout and polling interval for a wait strategy
- TeardownReport: outcome of a best-effort session teardown
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BackendKind(str, Enum):
    """Automation backend selected per test."""

    PROTOCOL_DRIVER = "protocol-driver"
    """Selenium WebDriver over the W3C wire protocol."""

    DIRECT_CONTROL = "direct-control"
    """Playwright talking to the browser directly."""


class SelectorStrategy(str, Enum):
    """How a LocatorSpec value is interpreted."""

    ID = "id"
    NAME = "name"
    CLASS_NAME = "class_name"
    CSS = "css"
    XPATH = "xpath"
    TEXT = "text"
    ROLE = "role"
    TEST_ID = "test_id"


class ResolutionMode(str, Enum):
    EAGER = "eager"
    LAZY = "lazy"


class WaitMode(str, Enum):
    EXPLICIT_POLLING = "explicit-polling"
    AUTO_ACTIONABILITY = "auto-actionability"


class WaitCondition(str, Enum):
    """Readiness conditions understood by the wait strategies."""

    PRESENT = "present"
    ATTACHED = "attached"
    VISIBLE = "visible"
    CLICKABLE = "clickable"
    EDITABLE = "editable"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    IN_USE = "in_use"
    CLOSING = "closing"
    CLOSED = "closed"


class LocatorSpec(BaseModel):
    """Backend-neutral element selector.

    Page objects declare these at construction; a backend turns them into an
    eager or lazy Locator at action time.

    Validation Rules:
    - value must be non-empty
    - name is only meaningful for the role strategy
    - index counts from the end when negative (-1 = last match)
    """

    model_config = ConfigDict(frozen=True)

    strategy: SelectorStrategy
    value: str = Field(min_length=1)
    name: Optional[str] = None
    """Accessible name filter for role selectors."""

    has_text: Optional[str] = None
    """Keep only matches whose text contains this substring."""

    index: Optional[int] = None
    """Pick one match by position. None means 'the single match'."""

    parent: Optional["LocatorSpec"] = None
    """Scope the lookup to descendants of this element."""

    @classmethod
    def id(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.ID, value=value)

    @classmethod
    def name_attr(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.NAME, value=value)

    @classmethod
    def class_name(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.CLASS_NAME, value=value)

    @classmethod
    def css(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.CSS, value=value)

    @classmethod
    def xpath(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.XPATH, value=value)

    @classmethod
    def text(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.TEXT, value=value)

    @classmethod
    def role(cls, value: str, name: Optional[str] = None) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.ROLE, value=value, name=name)

    @classmethod
    def test_id(cls, value: str) -> "LocatorSpec":
        return cls(strategy=SelectorStrategy.TEST_ID, value=value)

    def nth(self, index: int) -> "LocatorSpec":
        return self.model_copy(update={"index": index})

    def first(self) -> "LocatorSpec":
        return self.nth(0)

    def last(self) -> "LocatorSpec":
        return self.nth(-1)

    def containing(self, text: str) -> "LocatorSpec":
        return self.model_copy(update={"has_text": text})

    def within(self, parent: "LocatorSpec") -> "LocatorSpec":
        return self.model_copy(update={"parent": parent})

    def child(self, spec: "LocatorSpec") -> "LocatorSpec":
        """Return *spec* scoped to this element."""
        return spec.within(self)

    def describe(self) -> str:
        """Human-readable form used in logs and error messages."""
        text = f"{self.strategy.value}={self.value}"
        if self.name is not None:
            text += f"[name={self.name!r}]"
        if self.has_text is not None:
            text += f"[has_text={self.has_text!r}]"
        if self.index is not None:
            text += f"[{self.index}]"
        if self.parent is not None:
            text = f"{self.parent.describe()} >> {text}"
        return text


LocatorSpec.model_rebuild()


class WaitPolicy(BaseModel):
    """Timeout and polling interval, in seconds."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(gt=0)
    poll_interval: float = Field(gt=0)

    @property
    def timeout_ms(self) -> float:
        return self.timeout * 1000


class TeardownFailure(BaseModel):
    step: str
    error: str


class TeardownReport(BaseModel):
    """Record of a best-effort teardown: which steps ran and which failed."""

    backend: BackendKind
    attempted: list[str] = Field(default_factory=list)
    """Every step that was run, in execution order."""

    released: list[str] = Field(default_factory=list)
    failures: list[TeardownFailure] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.failures
