"""
Unit tests for the Selenium and Playwright backends.

Both automation libraries are replaced with doubles at the module boundary,
so these tests exercise the backend logic without launching a browser.
"""

from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.remote.webelement import WebElement

from dual_pom.backends import (
    DirectControlBackend,
    ProtocolDriverBackend,
    SharedBrowser,
    create_backend,
)
from dual_pom.config import AutomationConfig
from dual_pom.errors import (
    ActionNotPermittedError,
    ElementNotFoundError,
    StrictModeViolationError,
)
from dual_pom.models import BackendKind, LocatorSpec, ResolutionMode, WaitMode

pytestmark = pytest.mark.unit


class FakeInput:
    """Text field double that tracks its value like a browser input."""

    def __init__(self):
        self.value = ""
        self.element = MagicMock(spec=WebElement)
        self.element.is_displayed.return_value = True
        self.element.is_enabled.return_value = True
        self.element.clear.side_effect = self._clear
        self.element.send_keys.side_effect = self._type
        self.element.get_attribute.side_effect = lambda name: self.value if name == "value" else None

    def _clear(self):
        self.value = ""

    def _type(self, text):
        self.value += text


class TestCreateBackend:
    """Test backend selection."""

    def test_selects_by_kind(self):
        """Test the factory honours config.backend."""
        selenium = create_backend(AutomationConfig(backend=BackendKind.PROTOCOL_DRIVER))
        playwright = create_backend(AutomationConfig(backend=BackendKind.DIRECT_CONTROL))

        assert isinstance(selenium, ProtocolDriverBackend)
        assert isinstance(playwright, DirectControlBackend)
        assert selenium.resolution_mode == ResolutionMode.EAGER
        assert playwright.resolution_mode == ResolutionMode.LAZY

    def test_not_open_until_opened(self):
        """Test a fresh backend holds no resources."""
        backend = create_backend(AutomationConfig())
        assert backend.is_open is False
        assert backend.release_steps() == []
        with pytest.raises(RuntimeError):
            backend.wait


class TestProtocolDriverBackend:
    """Test the Selenium backend."""

    @pytest.fixture
    def driver(self, webdriver_module):
        return webdriver_module.Chrome.return_value

    @pytest.fixture
    def backend(self, webdriver_module, driver):
        backend = ProtocolDriverBackend(AutomationConfig())
        backend.open()
        return backend

    def test_open_builds_headless_driver(self, webdriver_module, backend, driver):
        """Test the driver is created headless with the configured window size."""
        options = webdriver_module.ChromeOptions.return_value
        options.add_argument.assert_called_once_with("--headless=new")
        webdriver_module.Chrome.assert_called_once_with(options=options)
        driver.set_window_size.assert_called_once_with(1920, 1080)
        assert backend.wait.mode == WaitMode.EXPLICIT_POLLING

    def test_headed_when_configured(self, webdriver_module):
        """Test no headless argument is added when headless is off."""
        ProtocolDriverBackend(AutomationConfig(headless=False, browser_type="firefox")).open()
        webdriver_module.FirefoxOptions.return_value.add_argument.assert_not_called()
        webdriver_module.Firefox.assert_called_once()

    def test_unsupported_browser(self, webdriver_module):
        """Test unknown browsers are rejected before any driver starts."""
        with pytest.raises(ValueError, match="opera"):
            ProtocolDriverBackend(AutomationConfig(browser_type="opera")).open()
        webdriver_module.Chrome.assert_not_called()

    def test_release_quits_driver_once(self, backend, driver):
        """Test the single release step quits the driver and clears it."""
        steps = backend.release_steps()
        assert [name for name, _ in steps] == ["driver"]

        steps[0][1]()

        driver.quit.assert_called_once()
        assert backend.is_open is False
        assert backend.release_steps() == []

    def test_fill_twice_leaves_value(self, backend, driver):
        """Test filling the same value twice leaves exactly that value."""
        field = FakeInput()
        driver.find_elements.return_value = [field.element]

        backend.fill(backend.locator(LocatorSpec.id("username")), "tomsmith")
        backend.fill(backend.locator(LocatorSpec.id("username")), "tomsmith")

        assert field.value == "tomsmith"
        assert backend.get_attribute(backend.locator(LocatorSpec.id("username")), "value") == "tomsmith"

    def test_click_waits_then_clicks(self, backend, driver):
        """Test click passes the clickable wait and clicks the element."""
        element = MagicMock(spec=WebElement)
        element.is_displayed.return_value = True
        element.is_enabled.return_value = True
        driver.find_elements.return_value = [element]

        backend.click(backend.locator(LocatorSpec.css("button[type='submit']")))

        element.click.assert_called_once()

    def test_click_missing_element(self, webdriver_module, driver):
        """Test clicking nothing raises ElementNotFoundError once the wait expires."""
        backend = ProtocolDriverBackend(
            AutomationConfig(explicit_timeout=0.2, explicit_poll_interval=0.05)
        )
        backend.open()
        driver.find_elements.return_value = []

        with pytest.raises(ElementNotFoundError, match="after 0.2s"):
            backend.click(backend.locator(LocatorSpec.id("missing")))

    def test_click_waits_for_late_element(self, webdriver_module, driver):
        """Test an element rendered after the first lookup is clicked once it appears."""
        backend = ProtocolDriverBackend(
            AutomationConfig(explicit_timeout=2, explicit_poll_interval=0.05)
        )
        backend.open()
        element = MagicMock(spec=WebElement)
        element.is_displayed.return_value = True
        element.is_enabled.return_value = True
        results = iter([[], [], []])
        driver.find_elements.side_effect = lambda *args: next(results, [element])

        backend.click(backend.locator(LocatorSpec.id("flash")))

        element.click.assert_called_once()

    def test_navigate_rejects_unknown_state(self, backend, driver):
        """Test unknown wait_until values are rejected before loading."""
        with pytest.raises(ValueError, match="idle"):
            backend.navigate("http://localhost/login", wait_until="idle")
        driver.get.assert_not_called()

    def test_navigate_accepts_known_states(self, backend, driver):
        """Test every load state Playwright accepts is accepted here too."""
        for state in ("load", "domcontentloaded", "networkidle", "commit"):
            backend.navigate("http://localhost/login", wait_until=state)
        assert driver.get.call_count == 4

    def test_is_visible_never_raises_for_missing_or_stale(self, backend, driver):
        """Test is_visible reports False for zero matches and for stale references."""
        driver.find_elements.return_value = []
        assert backend.is_visible(backend.locator(LocatorSpec.id("missing"))) is False

        element = MagicMock(spec=WebElement)
        driver.find_elements.return_value = [element]
        locator = backend.locator(LocatorSpec.id("flash"))
        element.is_enabled.side_effect = StaleElementReferenceException("stale")
        assert backend.is_visible(locator) is False

    def test_read_text(self, backend, driver):
        """Test text is read after the visibility wait."""
        element = MagicMock(spec=WebElement)
        element.is_displayed.return_value = True
        element.is_enabled.return_value = True
        element.text = "You logged into a secure area!\n×"
        driver.find_elements.return_value = [element]

        assert backend.read_text(backend.locator(LocatorSpec.id("flash"))).startswith("You logged")

    def test_set_content_uses_data_url(self, backend, driver):
        """Test inline HTML is loaded through a base64 data URL."""
        backend.set_content("<p id='x'>hi</p>")
        url = driver.get.call_args[0][0]
        assert url.startswith("data:text/html;base64,")

    def test_wait_for_load_rejects_unknown_state(self, backend):
        """Test unknown load states are rejected."""
        with pytest.raises(ValueError):
            backend.wait_for_load("idle")

    def test_screenshot(self, backend, driver, tmp_path):
        """Test screenshots are saved to the requested path."""
        path = tmp_path / "shots" / "login.png"
        assert backend.screenshot(path) == path
        driver.save_screenshot.assert_called_once_with(str(path))
        assert path.parent.is_dir()


class TestDirectControlBackend:
    """Test the Playwright backend."""

    @pytest.fixture
    def backend(self, playwright_objects):
        backend = DirectControlBackend(AutomationConfig(backend=BackendKind.DIRECT_CONTROL))
        backend.open()
        return backend

    def test_open_builds_hierarchy(self, playwright_objects, backend):
        """Test open launches a browser and creates an isolated context and page."""
        playwright_objects.playwright.chromium.launch.assert_called_once_with(
            headless=True, slow_mo=0
        )
        playwright_objects.browser.new_context.assert_called_once_with(
            viewport={"width": 1920, "height": 1080},
            locale="en-US",
        )
        playwright_objects.context.set_default_timeout.assert_called_once_with(30000)
        assert backend.page is playwright_objects.page
        assert backend.wait.mode == WaitMode.AUTO_ACTIONABILITY

    def test_release_steps_innermost_first(self, backend):
        """Test release order is page, context, browser, playwright."""
        assert [name for name, _ in backend.release_steps()] == [
            "page",
            "context",
            "browser",
            "playwright",
        ]

    def test_shared_browser_is_not_released(self, playwright_objects):
        """Test a session on a shared browser only releases its own context and page."""
        shared = SharedBrowser(AutomationConfig())
        backend = DirectControlBackend(AutomationConfig(), shared=shared)
        backend.open()

        assert backend.owns_browser is False
        assert [name for name, _ in backend.release_steps()] == ["page", "context"]
        assert shared.is_started is True

        shared.close()
        playwright_objects.browser.close.assert_called_once()
        playwright_objects.playwright.stop.assert_called_once()

    def test_shared_browser_close_continues_past_failures(self, playwright_objects):
        """Test a failing browser close still stops playwright."""
        playwright_objects.browser.close.side_effect = RuntimeError("browser crashed")
        shared = SharedBrowser(AutomationConfig()).start()

        shared.close()

        playwright_objects.playwright.stop.assert_called_once()
        assert shared.is_started is False

    def test_unsupported_browser(self, playwright_objects):
        """Test unknown browsers are rejected."""
        backend = DirectControlBackend(AutomationConfig(browser_type="opera"))
        with pytest.raises(ValueError, match="opera"):
            backend.open()
        # playwright itself was started and must still be released
        assert [name for name, _ in backend.release_steps()] == ["playwright"]

    def test_fill_is_single_call(self, backend, playwright_objects):
        """Test fill hands the whole value to Playwright with the auto-wait timeout."""
        handle = playwright_objects.page.locator.return_value

        backend.fill(backend.locator(LocatorSpec.id("username")), "tomsmith")
        backend.fill(backend.locator(LocatorSpec.id("username")), "tomsmith")

        assert handle.fill.call_count == 2
        handle.fill.assert_called_with("tomsmith", timeout=30000)

    def test_read_text_waits_for_attachment_only(self, backend, playwright_objects):
        """Test get_text uses inner_text, which does not require visibility."""
        handle = playwright_objects.page.locator.return_value
        handle.inner_text.return_value = "Your username is invalid!"

        assert backend.read_text(backend.locator(LocatorSpec.id("flash"))) == "Your username is invalid!"
        handle.wait_for.assert_not_called()

    def test_is_visible_false_for_missing(self, backend, playwright_objects):
        """Test is_visible reports False when nothing matches."""
        playwright_objects.page.locator.return_value.is_visible.return_value = False
        assert backend.is_visible(backend.locator(LocatorSpec.id("missing"))) is False

    def test_strict_mode_violation(self, backend, playwright_objects):
        """Test several matches for a click is a strict mode violation."""
        handle = playwright_objects.page.locator.return_value
        handle.click.side_effect = PlaywrightError(
            "strict mode violation: locator('css=button.promote-btn') resolved to 2 elements"
        )

        with pytest.raises(StrictModeViolationError):
            backend.click(backend.locator(LocatorSpec.css("button.promote-btn")))

    def test_disabled_click_not_permitted(self, backend, playwright_objects):
        """Test a click that times out on a disabled element is not permitted."""
        handle = playwright_objects.page.locator.return_value
        handle.click.side_effect = PlaywrightTimeoutError(
            "Timeout 30000ms exceeded.\n  - element is not enabled"
        )

        with pytest.raises(ActionNotPermittedError):
            backend.click(backend.locator(LocatorSpec.id("submit")))

    def test_navigate(self, backend, playwright_objects):
        """Test navigation passes the load state through."""
        backend.navigate("http://localhost/login", wait_until="domcontentloaded")
        playwright_objects.page.goto.assert_called_once_with(
            "http://localhost/login", wait_until="domcontentloaded", timeout=30000
        )

    def test_navigate_rejects_unknown_state(self, backend):
        """Test unknown wait_until values are rejected."""
        with pytest.raises(ValueError):
            backend.navigate("http://localhost/login", wait_until="idle")

    def test_screenshot_full_page(self, backend, playwright_objects, tmp_path):
        """Test screenshots capture the full page."""
        path = tmp_path / "secure.png"
        backend.screenshot(path)
        playwright_objects.page.screenshot.assert_called_once_with(path=str(path), full_page=True)
