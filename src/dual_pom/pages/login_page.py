"""Login page object."""

from __future__ import annotations

from ..models import LocatorSpec
from .base_page import BasePage


class LoginPage(BasePage):
    """Page object for the login form.

    login() fills both fields and submits without waiting for the resulting
    navigation; callers assert on the post-login state themselves.
    """

    path = "/login"

    LOCATORS = {
        "username": LocatorSpec.id("username"),
        "password": LocatorSpec.id("password"),
        "submit": LocatorSpec.css("button[type='submit']"),
        "flash": LocatorSpec.id("flash"),
    }

    def open_page(self, wait_until: str = "load") -> None:
        self.navigate(wait_until=wait_until)

    def enter_username(self, username: str) -> None:
        self.fill(self.locators["username"], username)

    def enter_password(self, password: str) -> None:
        self.fill(self.locators["password"], password)

    def submit(self) -> None:
        self.click(self.locators["submit"])

    def login(self, username: str, password: str) -> None:
        self.enter_username(username)
        self.enter_password(password)
        self.submit()

    def get_message(self) -> str:
        """Flash message text, trimmed."""
        return self.get_text(self.locators["flash"]).strip()
