"""
Wait Strategies

Two ways of guaranteeing an element is ready before it is touched:

- ExplicitWait: the protocol-driver backend calls it before every sensitive
  action. Built on Selenium's WebDriverWait and expected_conditions.
- AutoWait: the direct-control backend hands its timeout to every Playwright
  action, which runs its own actionability checks. await_ready() reproduces
  that compound check for callers that want to wait without acting.

A timeout is terminal in both modes; nothing here retries.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .errors import ElementNotFoundError, StrictModeViolationError, WaitTimeoutError
from .locators import EagerLocator, LazyLocator, Locator
from .models import WaitCondition, WaitMode, WaitPolicy
from .translate import playwright_errors, selenium_errors

logger = logging.getLogger(__name__)

# Opacity at or below this counts as invisible
OPACITY_EPSILON = 0.01

ACTIONABILITY_PROBE = """
(el) => {
  let rect = el.getBoundingClientRect();
  if (rect.bottom < 0 || rect.right < 0 ||
      rect.top > window.innerHeight || rect.left > window.innerWidth) {
    el.scrollIntoView({block: 'center', inline: 'center'});
    rect = el.getBoundingClientRect();
  }
  const style = window.getComputedStyle(el);
  const visible = rect.width > 0 && rect.height > 0 &&
    style.visibility !== 'hidden' && style.display !== 'none' &&
    parseFloat(style.opacity) > %s;
  let unobscured = false;
  if (visible) {
    const hit = document.elementFromPoint(rect.left + rect.width / 2, rect.top + rect.height / 2);
    unobscured = !!hit && (hit === el || el.contains(hit));
  }
  const disabled = el.disabled === true || el.getAttribute('aria-disabled') === 'true';
  const editable = !disabled && !el.readOnly &&
    (el.isContentEditable || ['INPUT', 'TEXTAREA', 'SELECT'].includes(el.tagName));
  return {
    attached: el.isConnected,
    visible: visible,
    enabled: !disabled,
    editable: editable,
    unobscured: unobscured,
    box: [rect.x, rect.y, rect.width, rect.height],
  };
}
""" % OPACITY_EPSILON

# Readiness checks applied to a bound element; PRESENT needs only the lookup
EXPECTATIONS = {
    WaitCondition.CLICKABLE: EC.element_to_be_clickable,
    WaitCondition.VISIBLE: EC.visibility_of,
}


class WaitStrategy(ABC):
    """Base class for wait strategies."""

    mode: WaitMode
    conditions: frozenset[WaitCondition] = frozenset()

    def __init__(self, policy: WaitPolicy):
        self.policy = policy

    @property
    def timeout(self) -> float:
        return self.policy.timeout

    @property
    def poll_interval(self) -> float:
        return self.policy.poll_interval

    def _check_condition(self, condition: WaitCondition) -> WaitCondition:
        condition = WaitCondition(condition)
        if condition not in self.conditions:
            supported = ", ".join(sorted(c.value for c in self.conditions))
            raise ValueError(
                f"{type(self).__name__} does not support '{condition.value}'. "
                f"Supported: {supported}"
            )
        return condition

    @abstractmethod
    def await_ready(
        self,
        target: Locator,
        condition: WaitCondition,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Block until *target* satisfies *condition*.

        Args:
            target: Locator produced by the same backend
            condition: Readiness condition
            timeout: Seconds; defaults to the policy timeout

        Raises:
            WaitTimeoutError: If the condition does not hold in time
        """


class ExplicitWait(WaitStrategy):
    """Caller-invoked polling wait on Selenium's WebDriverWait.

    The lookup itself is polled: a locator that matched nothing is queried
    again on every tick until an element appears or the timeout expires.
    """

    mode = WaitMode.EXPLICIT_POLLING
    conditions = frozenset(
        {WaitCondition.CLICKABLE, WaitCondition.VISIBLE, WaitCondition.PRESENT}
    )

    def __init__(self, driver: WebDriver, policy: WaitPolicy):
        super().__init__(policy)
        self._driver = driver

    def await_ready(
        self,
        target: EagerLocator,
        condition: WaitCondition,
        timeout: Optional[float] = None,
    ) -> None:
        condition = self._check_condition(condition)
        if timeout is None:
            timeout = self.policy.timeout

        expectation = EXPECTATIONS.get(condition)

        def ready(driver: WebDriver) -> Any:
            # A held reference that went stale raises here instead of re-querying
            if not target.count() and not target.requery():
                return False
            element = target.resolve()
            if expectation is None:
                return element
            return expectation(element)(driver)

        wait = WebDriverWait(
            self._driver, timeout, poll_frequency=self.policy.poll_interval
        )
        with selenium_errors(target.description):
            try:
                wait.until(ready)
            except TimeoutException as e:
                if not target.count():
                    raise ElementNotFoundError(
                        f"No element matches '{target.description}' after {timeout}s",
                        target.description,
                    ) from e
                raise WaitTimeoutError(
                    f"'{target.description}' was not {condition.value} after {timeout}s",
                    target.description,
                    condition=condition.value,
                    timeout=timeout,
                ) from e
        logger.debug(f"{target.description} is {condition.value}")


class AutoWait(WaitStrategy):
    """Automatic actionability wait, as Playwright performs before each action."""

    mode = WaitMode.AUTO_ACTIONABILITY
    conditions = frozenset(
        {
            WaitCondition.PRESENT,
            WaitCondition.ATTACHED,
            WaitCondition.VISIBLE,
            WaitCondition.CLICKABLE,
            WaitCondition.EDITABLE,
        }
    )

    def __init__(
        self,
        policy: WaitPolicy,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(policy)
        self._sleep = sleep
        self._clock = clock

    def await_ready(
        self,
        target: LazyLocator,
        condition: WaitCondition,
        timeout: Optional[float] = None,
    ) -> None:
        condition = self._check_condition(condition)
        if timeout is None:
            timeout = self.policy.timeout

        if condition in (WaitCondition.PRESENT, WaitCondition.ATTACHED, WaitCondition.VISIBLE):
            state = "visible" if condition is WaitCondition.VISIBLE else "attached"
            with playwright_errors(
                target.description,
                probe=target.handle,
                condition=condition.value,
                timeout=timeout,
            ):
                target.handle.wait_for(state=state, timeout=timeout * 1000)
            return

        self._poll_actionable(target, condition, timeout)

    def _probe(self, target: LazyLocator, remaining: float) -> Optional[dict[str, Any]]:
        with playwright_errors(target.description):
            matches = target.handle.count()
        if matches == 0:
            return None
        if matches > 1:
            raise StrictModeViolationError(
                f"'{target.description}' matched {matches} elements", target.description
            )
        with playwright_errors(target.description, probe=target.handle, timeout=remaining):
            return target.handle.evaluate(
                ACTIONABILITY_PROBE, timeout=max(remaining, self.policy.poll_interval) * 1000
            )

    def _poll_actionable(
        self,
        target: LazyLocator,
        condition: WaitCondition,
        timeout: float,
    ) -> None:
        deadline = self._clock() + timeout
        previous_box = None
        state: Optional[dict[str, Any]] = None

        while True:
            state = self._probe(target, deadline - self._clock())
            if state is not None:
                ready = (
                    state["attached"]
                    and state["visible"]
                    and state["enabled"]
                    and state["unobscured"]
                    and state["box"] == previous_box
                    and (condition is not WaitCondition.EDITABLE or state["editable"])
                )
                if ready:
                    logger.debug(f"{target.description} is {condition.value}")
                    return
                previous_box = state["box"]
            else:
                previous_box = None

            if self._clock() >= deadline:
                break
            self._sleep(self.policy.poll_interval)

        if state is None:
            raise ElementNotFoundError(
                f"No element matches '{target.description}' after {timeout}s",
                target.description,
            )

        failing = [
            check
            for check in ("attached", "visible", "enabled", "unobscured")
            if not state[check]
        ]
        if condition is WaitCondition.EDITABLE and not state["editable"]:
            failing.append("editable")
        if not failing:
            failing.append("stable")
        raise WaitTimeoutError(
            f"'{target.description}' was not {condition.value} after {timeout}s "
            f"(failing: {', '.join(failing)})",
            target.description,
            condition=condition.value,
            timeout=timeout,
        )
