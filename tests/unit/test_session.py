"""
Unit tests for the session lifecycle.

This module contains unit tests for:
- Session state transitions
- SessionManager open/close, including partial start failures
- Best-effort, innermost-first teardown
"""

from unittest.mock import MagicMock

import pytest

from dual_pom.backends import SharedBrowser
from dual_pom.config import AutomationConfig
from dual_pom.errors import SessionClosedError, SessionStartError
from dual_pom.models import BackendKind, SessionState
from dual_pom.session import Session, SessionManager

pytestmark = pytest.mark.unit


@pytest.fixture
def config():
    return AutomationConfig(backend=BackendKind.DIRECT_CONTROL)


@pytest.fixture
def manager(config):
    return SessionManager(config)


class TestSessionState:
    """Test session state transitions."""

    def test_open_session_is_ready(self, manager, playwright_objects):
        """Test a freshly opened session is ready and not yet in use."""
        session = manager.open()
        assert session.state == SessionState.READY
        assert session.is_open is True
        assert session.kind == BackendKind.DIRECT_CONTROL

    def test_first_operation_marks_in_use(self, manager, playwright_objects):
        """Test reaching for the backend moves the session to IN_USE."""
        session = manager.open()
        session.backend
        assert session.state == SessionState.IN_USE

    def test_closed_session_rejects_operations(self, manager, playwright_objects):
        """Test every operation after close raises SessionClosedError."""
        session = manager.open()
        manager.close(session)

        assert session.state == SessionState.CLOSED
        assert session.is_open is False
        with pytest.raises(SessionClosedError):
            session.backend

    def test_unopened_session_rejects_operations(self, config):
        """Test a session that was never opened cannot be used."""
        backend = MagicMock()
        backend.kind = BackendKind.PROTOCOL_DRIVER
        session = Session(backend)

        assert session.state == SessionState.UNINITIALIZED
        with pytest.raises(SessionClosedError):
            session.backend

    def test_kind_override(self, manager, webdriver_module):
        """Test open(kind) overrides the configured backend, aliases included."""
        session = manager.open("selenium")
        assert session.kind == BackendKind.PROTOCOL_DRIVER
        assert manager.config.backend == BackendKind.DIRECT_CONTROL


class TestTeardown:
    """Test best-effort teardown."""

    def test_releases_innermost_first_exactly_once(self, manager, playwright_objects):
        """Test page, context, browser and playwright each close once, in order."""
        calls = []
        playwright_objects.page.close.side_effect = lambda: calls.append("page")
        playwright_objects.context.close.side_effect = lambda: calls.append("context")
        playwright_objects.browser.close.side_effect = lambda: calls.append("browser")
        playwright_objects.playwright.stop.side_effect = lambda: calls.append("playwright")

        session = manager.open()
        report = manager.close(session)

        assert calls == ["page", "context", "browser", "playwright"]
        assert report.attempted == calls
        assert report.released == calls
        assert report.clean is True

    def test_failure_does_not_stop_later_steps(self, manager, playwright_objects):
        """Test every level is released even when an inner level raises."""
        calls = []

        def failing_context_close():
            calls.append("context")
            raise RuntimeError("context already gone")

        playwright_objects.page.close.side_effect = lambda: calls.append("page")
        playwright_objects.context.close.side_effect = failing_context_close
        playwright_objects.browser.close.side_effect = lambda: calls.append("browser")
        playwright_objects.playwright.stop.side_effect = lambda: calls.append("playwright")

        session = manager.open()
        report = manager.close(session)

        assert calls == ["page", "context", "browser", "playwright"]
        assert report.clean is False
        assert [f.step for f in report.failures] == ["context"]
        assert "context already gone" in report.failures[0].error
        assert report.released == ["page", "browser", "playwright"]
        assert session.state == SessionState.CLOSED

    def test_close_is_idempotent(self, manager, playwright_objects):
        """Test a second close releases nothing."""
        session = manager.open()
        manager.close(session)
        report = manager.close(session)

        assert report.attempted == []
        playwright_objects.page.close.assert_called_once()
        playwright_objects.playwright.stop.assert_called_once()

    def test_context_manager_closes_on_error(self, manager, playwright_objects):
        """Test the session context manager tears down when the body raises."""
        with pytest.raises(AssertionError):
            with manager.session() as session:
                raise AssertionError("test failed")

        assert session.state == SessionState.CLOSED
        playwright_objects.browser.close.assert_called_once()

    def test_protocol_driver_teardown(self, manager, webdriver_module):
        """Test the WebDriver session is quit exactly once."""
        driver = webdriver_module.Chrome.return_value
        session = manager.open(BackendKind.PROTOCOL_DRIVER)

        report = manager.close(session)

        assert report.attempted == ["driver"]
        driver.quit.assert_called_once()


class TestStartFailure:
    """Test resource acquisition failures."""

    def test_partial_resources_released(self, manager, playwright_objects):
        """Test a failure creating the context releases the browser and playwright."""
        playwright_objects.browser.new_context.side_effect = RuntimeError("no context")

        with pytest.raises(SessionStartError, match="no context") as exc_info:
            manager.open()

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        playwright_objects.browser.close.assert_called_once()
        playwright_objects.playwright.stop.assert_called_once()
        playwright_objects.page.close.assert_not_called()

    def test_driver_start_failure(self, manager, webdriver_module):
        """Test a driver that cannot start surfaces as SessionStartError."""
        webdriver_module.Chrome.side_effect = RuntimeError("chromedriver missing")

        with pytest.raises(SessionStartError, match="chromedriver missing"):
            manager.open(BackendKind.PROTOCOL_DRIVER)

    def test_shared_browser_survives_session(self, config, playwright_objects):
        """Test closing a session on a shared browser leaves the browser running."""
        shared = SharedBrowser(config)
        manager = SessionManager(config, shared_browser=shared)

        first = manager.open()
        manager.close(first)
        second = manager.open()
        manager.close(second)

        playwright_objects.browser.close.assert_not_called()
        assert playwright_objects.browser.new_context.call_count == 2
        playwright_objects.playwright.chromium.launch.assert_called_once()
