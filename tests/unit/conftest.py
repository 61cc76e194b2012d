"""Shared doubles for the automation libraries."""

from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture
def webdriver_module():
    """Replace selenium.webdriver as seen by the protocol-driver backend."""
    with patch("dual_pom.backends.protocol_driver.webdriver") as module:
        yield module


@pytest.fixture
def playwright_objects():
    """Playwright doubles wired playwright -> browser -> context -> page."""
    with patch("dual_pom.backends.direct_control.sync_playwright") as factory:
        playwright = factory.return_value.start.return_value
        browser = playwright.chromium.launch.return_value
        context = browser.new_context.return_value
        page = context.new_page.return_value
        yield MagicMock(
            factory=factory,
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
        )
