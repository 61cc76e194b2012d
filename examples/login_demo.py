#!/usr/bin/env python
"""
Login Demo

Runs the same login and logout flow through both backends with identical
page object code.

Usage:
    python examples/login_demo.py
    python examples/login_demo.py playwright

Requirements:
    - Package installed: pip install -e .
    - Playwright browsers installed: playwright install chromium
    - Chrome available for Selenium Manager to pair with a driver
"""

import sys

from dual_pom import (
    AutomationConfig,
    AutomationError,
    LoginPage,
    SecurePage,
    SessionManager,
    configure_logging,
)
from dual_pom.console import create_console


def run(manager: SessionManager, kind: str) -> bool:
    """Log in and out once on the given backend. Returns True on success."""
    console = create_console()
    config = manager.config.with_backend(kind)
    console.print_session_start(
        config.backend, config.browser_type, f"{config.viewport_width}x{config.viewport_height}"
    )

    session = manager.open(kind)
    try:
        login_page = LoginPage(session)
        secure_page = SecurePage(session)
        login_page.open_page()
        login_page.login("tomsmith", "SuperSecretPassword!")
        secure_page.wait_for_page_load()
        console.print_step(secure_page.get_message().splitlines()[0])

        secure_page.logout()
        login_page.wait_for_load()
        console.print_step(login_page.get_message().splitlines()[0])
    except AutomationError as e:
        console.print_step(f"{type(e).__name__}: {e}", passed=False)
        return False
    finally:
        console.print_session_end(manager.close(session))
    return True


def main():
    configure_logging()
    manager = SessionManager(AutomationConfig.from_env())
    kinds = sys.argv[1:] or ["protocol-driver", "direct-control"]

    ok = all([run(manager, kind) for kind in kinds])
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
