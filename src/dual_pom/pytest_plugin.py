"""
pytest Plugin

Command line options and fixtures that give every test its own automation
session, opened for the backend chosen on the command line and torn down on
every exit path.

Options:
    --backend: protocol-driver, direct-control or both (aliases: selenium,
        playwright). Defaults to BACKEND_KIND from the environment.
    --show-steps: print session lifecycle and step blocks to the terminal
"""

import logging
from typing import Iterator

import pytest

from .backends import SharedBrowser
from .config import AutomationConfig, parse_backend_kind
from .console import StepConsole, create_console
from .models import BackendKind
from .pages import LoginPage, SecurePage
from .session import Session, SessionManager

logger = logging.getLogger(__name__)

BACKEND_CHOICES = (
    "protocol-driver",
    "direct-control",
    "both",
    "selenium",
    "playwright",
)


def pytest_addoption(parser):
    group = parser.getgroup("dual_pom", "dual-backend page objects")
    group.addoption(
        "--backend",
        action="store",
        default=None,
        choices=BACKEND_CHOICES,
        help="Automation backend to run browser tests against (default: BACKEND_KIND or protocol-driver)",
    )
    group.addoption(
        "--show-steps",
        action="store_true",
        default=False,
        help="Print session lifecycle and test steps",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no browser")
    config.addinivalue_line("markers", "integration: tests that drive a real local browser")
    config.addinivalue_line("markers", "e2e: tests against the remote site under test")


def selected_backends(option: str, default: BackendKind) -> list[BackendKind]:
    """Backends a test run covers for a --backend value (None: the configured default)."""
    if option is None:
        return [default]
    if option == "both":
        return [BackendKind.PROTOCOL_DRIVER, BackendKind.DIRECT_CONTROL]
    return [parse_backend_kind(option)]


def pytest_generate_tests(metafunc):
    if "backend_kind" not in metafunc.fixturenames:
        return
    kinds = selected_backends(
        metafunc.config.getoption("--backend"),
        AutomationConfig.from_env().backend,
    )
    metafunc.parametrize("backend_kind", kinds, ids=[k.value for k in kinds], scope="function")


@pytest.fixture(scope="session")
def automation_config() -> AutomationConfig:
    """Configuration read once per run from the environment."""
    return AutomationConfig.from_env()


@pytest.fixture(scope="session")
def step_console(pytestconfig) -> StepConsole:
    return create_console(enabled=pytestconfig.getoption("--show-steps"))


@pytest.fixture(scope="session")
def shared_browser(automation_config) -> Iterator[SharedBrowser]:
    """Playwright browser shared by every direct-control session, launched on first use."""
    shared = SharedBrowser(automation_config)
    yield shared
    shared.close()


@pytest.fixture
def session_manager(automation_config, shared_browser) -> SessionManager:
    return SessionManager(automation_config, shared_browser=shared_browser)


@pytest.fixture
def automation_session(session_manager, backend_kind, step_console) -> Iterator[Session]:
    """
    A session for the test's backend, closed after the test whatever its outcome.

    Teardown failures are reported as warnings and never fail the test.
    """
    config = session_manager.config
    step_console.print_session_start(
        backend_kind,
        config.browser_type,
        f"{config.viewport_width}x{config.viewport_height}",
    )
    session = session_manager.open(backend_kind)
    try:
        yield session
    finally:
        report = session_manager.close(session)
        step_console.print_session_end(report)


@pytest.fixture
def login_page(automation_session) -> LoginPage:
    return LoginPage(automation_session)


@pytest.fixture
def secure_page(automation_session) -> SecurePage:
    return SecurePage(automation_session)


@pytest.fixture
def step(step_console):
    """Callable that reports a passed step, e.g. step("Login successful")."""

    def report(message: str, passed: bool = True) -> None:
        logger.info(message)
        step_console.print_step(message, passed)

    return report

