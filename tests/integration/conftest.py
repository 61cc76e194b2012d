"""
Fixtures for integration tests against real browsers.

The login flow runs against a local copy of the login pages and the selector
tests load the playground document inline, so nothing here needs network
access. Tests are skipped when the selected backend cannot start a browser.
"""

from dataclasses import replace
from pathlib import Path

import pytest

from dual_pom.config import AutomationConfig
from dual_pom.errors import SessionStartError
from dual_pom.pages import SelectorPlaygroundPage

from login_app import LoginApp

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def login_app():
    with LoginApp() as app:
        yield app


@pytest.fixture(scope="session")
def automation_config(login_app) -> AutomationConfig:
    """Environment configuration pointed at the local login app, with short waits."""
    return replace(
        AutomationConfig.from_env(),
        base_url=login_app.base_url,
        explicit_timeout=5.0,
        auto_timeout=10.0,
    )


@pytest.fixture
def automation_session(session_manager, backend_kind, step_console):
    """Session for the selected backend; skips when no browser is available."""
    try:
        session = session_manager.open(backend_kind)
    except SessionStartError as e:
        pytest.skip(f"{backend_kind.value} browser unavailable: {e}")

    config = session_manager.config
    step_console.print_session_start(
        backend_kind,
        config.browser_type,
        f"{config.viewport_width}x{config.viewport_height}",
    )
    try:
        yield session
    finally:
        step_console.print_session_end(session_manager.close(session))


@pytest.fixture(scope="session")
def playground_html() -> str:
    return (FIXTURES / "selector_playground.html").read_text(encoding="utf-8")


@pytest.fixture
def playground(automation_session, playground_html) -> SelectorPlaygroundPage:
    page = SelectorPlaygroundPage(automation_session)
    page.open_with(playground_html)
    return page
