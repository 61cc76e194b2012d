"""
Locator Abstraction

A Locator is a handle to "the element(s) matching a LocatorSpec". Two modes:

- EagerLocator (Selenium): the query runs once, in the constructor, and the
  resulting WebElements are cached. They go stale if the DOM changes. When
  several elements match, the first one is used without complaint.
- LazyLocator (Playwright): nothing is cached. Every operation re-runs the
  query, so it never goes stale. Several matches for a single-element
  operation is a strict mode violation.

The divergence between the two on multiple matches is intentional.
"""

from abc import ABC, abstractmethod
from typing import Any, Union

from playwright.sync_api import Locator as PlaywrightLocator
from playwright.sync_api import Page
from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from .errors import ElementNotFoundError, StaleElementError
from .models import LocatorSpec, ResolutionMode, SelectorStrategy, WaitPolicy
from .translate import playwright_errors, selenium_errors

# XPath predicates for implicit ARIA roles (WebDriver has no role engine)
IMPLICIT_ROLES = {
    "button": 'self::button or (self::input and (@type="button" or @type="submit" or @type="reset"))',
    "link": "self::a[@href]",
    "textbox": (
        'self::textarea or (self::input and (not(@type) or @type="text" or @type="email" '
        'or @type="search" or @type="tel" or @type="url"))'
    ),
    "checkbox": 'self::input[@type="checkbox"]',
    "radio": 'self::input[@type="radio"]',
    "heading": "self::h1 or self::h2 or self::h3 or self::h4 or self::h5 or self::h6",
    "list": "self::ul or self::ol",
    "listitem": "self::li",
    "img": "self::img",
}


def xpath_literal(text: str) -> str:
    """Quote *text* as an XPath 1.0 string literal."""
    if '"' not in text:
        return f'"{text}"'
    if "'" not in text:
        return f"'{text}'"
    parts = text.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"


def to_by(spec: LocatorSpec) -> tuple[str, str]:
    """Translate a LocatorSpec into a Selenium (By, value) pair."""
    strategy = spec.strategy
    if strategy is SelectorStrategy.ID:
        return By.ID, spec.value
    if strategy is SelectorStrategy.NAME:
        return By.NAME, spec.value
    if strategy is SelectorStrategy.CLASS_NAME:
        return By.CLASS_NAME, spec.value
    if strategy is SelectorStrategy.CSS:
        return By.CSS_SELECTOR, spec.value
    if strategy is SelectorStrategy.XPATH:
        return By.XPATH, spec.value
    if strategy is SelectorStrategy.TEST_ID:
        return By.CSS_SELECTOR, f'[data-test="{spec.value}"]'
    if strategy is SelectorStrategy.TEXT:
        return By.XPATH, f".//*[text()[contains(., {xpath_literal(spec.value)})]]"

    # Role
    predicate = f"@role={xpath_literal(spec.value)}"
    implicit = IMPLICIT_ROLES.get(spec.value)
    if implicit:
        predicate = f"{predicate} or {implicit}"
    xpath = f".//*[{predicate}]"
    if spec.name is not None:
        name = xpath_literal(spec.name)
        xpath += (
            f"[contains(normalize-space(.), {name}) or @aria-label={name} "
            f"or @value={name} or @title={name}]"
        )
    return By.XPATH, xpath


def build_playwright_locator(page: Page, spec: LocatorSpec) -> PlaywrightLocator:
    """Translate a LocatorSpec into a Playwright Locator. No DOM access happens here."""
    root: Any = build_playwright_locator(page, spec.parent) if spec.parent else page
    strategy = spec.strategy
    value = spec.value

    if strategy is SelectorStrategy.ID:
        locator = root.locator(f"id={value}")
    elif strategy is SelectorStrategy.NAME:
        locator = root.locator(f'[name="{value}"]')
    elif strategy is SelectorStrategy.CLASS_NAME:
        locator = root.locator(f".{value}")
    elif strategy is SelectorStrategy.CSS:
        locator = root.locator(f"css={value}")
    elif strategy is SelectorStrategy.XPATH:
        locator = root.locator(f"xpath={value}")
    elif strategy is SelectorStrategy.TEST_ID:
        locator = root.locator(f'[data-test="{value}"]')
    elif strategy is SelectorStrategy.TEXT:
        locator = root.get_by_text(value)
    elif spec.name is not None:
        locator = root.get_by_role(value, name=spec.name)
    else:
        locator = root.get_by_role(value)

    if spec.has_text is not None:
        locator = locator.filter(has_text=spec.has_text)

    if spec.index is not None:
        if spec.index == 0:
            locator = locator.first
        elif spec.index == -1:
            locator = locator.last
        else:
            locator = locator.nth(spec.index)

    return locator


class Locator(ABC):
    """Backend-specific handle to the element(s) matching a LocatorSpec."""

    mode: ResolutionMode

    def __init__(self, spec: LocatorSpec):
        self.spec = spec

    @property
    def description(self) -> str:
        return self.spec.describe()

    @abstractmethod
    def resolve(self) -> Any:
        """Return the single element this locator addresses."""

    @abstractmethod
    def resolve_all(self) -> list[Any]:
        """Return every matching element."""

    @abstractmethod
    def is_stale(self) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description})"


class EagerLocator(Locator):
    """
    Selenium locator resolved once, at construction.

    A lookup that matched nothing may be re-run by an explicit wait; a lookup
    that matched is never refreshed, so its references can go stale.
    """

    mode = ResolutionMode.EAGER

    def __init__(self, driver: Union[WebDriver, WebElement], spec: LocatorSpec):
        super().__init__(spec)
        self._driver = driver
        self._elements: list[WebElement] = self._query()

    def _query(self) -> list[WebElement]:
        scope: Union[WebDriver, WebElement] = self._driver
        if self.spec.parent is not None:
            parents = EagerLocator(self._driver, self.spec.parent).resolve_all()
            if not parents:
                return []
            scope = parents[0]

        by, value = to_by(self.spec)
        with selenium_errors(self.description):
            elements = scope.find_elements(by, value)
            if self.spec.has_text is not None:
                elements = [e for e in elements if self.spec.has_text in e.text]

        if self.spec.index is not None:
            try:
                elements = [elements[self.spec.index]]
            except IndexError:
                elements = []
        return elements

    def _ensure_fresh(self) -> None:
        if self.is_stale():
            raise StaleElementError(
                f"Element reference for '{self.description}' is stale: "
                "the DOM changed after it was resolved",
                self.description,
            )

    def requery(self) -> list[WebElement]:
        """Run the lookup again and bind whatever it finds now."""
        self._elements = self._query()
        return list(self._elements)

    def resolve(self) -> WebElement:
        self._ensure_fresh()
        if not self._elements:
            raise ElementNotFoundError(
                f"No element matches '{self.description}'", self.description
            )
        return self._elements[0]

    def resolve_all(self) -> list[WebElement]:
        self._ensure_fresh()
        return list(self._elements)

    def is_stale(self) -> bool:
        for element in self._elements:
            try:
                # Same probe Selenium's staleness_of condition uses
                element.is_enabled()
            except StaleElementReferenceException:
                return True
        return False

    def count(self) -> int:
        self._ensure_fresh()
        return len(self._elements)


class LazyLocator(Locator):
    """Playwright locator re-resolved on every operation."""

    mode = ResolutionMode.LAZY

    def __init__(self, page: Page, spec: LocatorSpec, policy: WaitPolicy):
        super().__init__(spec)
        self.policy = policy
        self.handle: PlaywrightLocator = build_playwright_locator(page, spec)

    def resolve(self) -> Any:
        with playwright_errors(
            self.description,
            probe=self.handle,
            condition="attached",
            timeout=self.policy.timeout,
        ):
            return self.handle.element_handle(timeout=self.policy.timeout_ms)

    def resolve_all(self) -> list[Any]:
        with playwright_errors(self.description):
            return self.handle.element_handles()

    def is_stale(self) -> bool:
        return False

    def count(self) -> int:
        with playwright_errors(self.description):
            return self.handle.count()
