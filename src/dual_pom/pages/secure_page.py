"""Secure area page object."""

from __future__ import annotations

from ..models import LocatorSpec
from .base_page import BasePage


class SecurePage(BasePage):
    """Page object for the area reached after a successful login."""

    path = "/secure"

    LOCATORS = {
        "logout": LocatorSpec.css(".icon-2x.icon-signout"),
        "flash": LocatorSpec.id("flash"),
    }

    def logout(self) -> None:
        self.click(self.locators["logout"])

    def get_message(self) -> str:
        return self.get_text(self.locators["flash"]).strip()

    def is_logout_button_visible(self) -> bool:
        return self.is_visible(self.locators["logout"])

    def get_current_url(self) -> str:
        return self.current_url

    def wait_for_page_load(self) -> None:
        self.wait_for_load("load")
