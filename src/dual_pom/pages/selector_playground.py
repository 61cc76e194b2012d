"""Selector playground page object.

Covers two zones of the playground document:
- a static zone addressed by ids, names, classes and data-test hooks
- a dynamic zone whose rows get generated ids, addressed by prefix,
  position and text matches
"""

from __future__ import annotations

from typing import Optional

from ..models import LocatorSpec
from .base_page import BasePage


class SelectorPlaygroundPage(BasePage):
    """Page object for the selector playground fixture."""

    LOCATORS = {
        # Static zone
        "username": LocatorSpec.id("static-username"),
        "password": LocatorSpec.name_attr("static-password"),
        "remember_me": LocatorSpec.css("label.login-toggle input"),
        "primary_cta": LocatorSpec.test_id("primary-cta"),
        "cta_result": LocatorSpec.id("cta-result"),
        # Dynamic zone
        "add_user": LocatorSpec.id("add-user"),
        "rows": LocatorSpec.css("[data-row-id^='user-']"),
        "user_handle": LocatorSpec.class_name("user-handle"),
        "promote_buttons": LocatorSpec.css("button.promote-btn"),
        "feed_log": LocatorSpec.id("feed-log"),
        "design_card": LocatorSpec.css("li.feed-card").containing("Design System Crash Course"),
        "content_pill": LocatorSpec.class_name("content-pill"),
        "last_row_xpath": LocatorSpec.xpath("(//div[@data-row-id])[last()]"),
    }

    def open_with(self, html: str) -> None:
        self.load_html(html)

    # ------------------------------------------------------------------
    # Static zone
    # ------------------------------------------------------------------

    def fill_credentials(self, username: str, password: str) -> None:
        self.fill(self.locators["username"], username)
        self.fill(self.locators["password"], password)

    def toggle_remember_me(self) -> None:
        self.click(self.locators["remember_me"])

    def click_primary_cta(self) -> None:
        self.click(self.locators["primary_cta"])

    def cta_result(self) -> str:
        return self.get_text(self.locators["cta_result"]).strip()

    # ------------------------------------------------------------------
    # Dynamic zone
    # ------------------------------------------------------------------

    def add_user(self, times: int = 1) -> None:
        for _ in range(times):
            self.click(self.locators["add_user"])

    def row_count(self) -> int:
        return self.count(self.locators["rows"])

    def row(self, index: int) -> LocatorSpec:
        """Spec for the dynamic row at *index* (negative counts from the newest)."""
        return self.locators["rows"].nth(index)

    def first_row(self) -> LocatorSpec:
        return self.locators["rows"].first()

    def newest_row(self) -> LocatorSpec:
        return self.locators["rows"].last()

    def row_id(self, index: int) -> Optional[str]:
        return self.get_attribute(self.row(index), "data-row-id")

    def newest_row_id(self) -> Optional[str]:
        return self.get_attribute(self.newest_row(), "data-row-id")

    def row_handle(self, index: int) -> str:
        return self.get_text(self.row(index).child(self.locators["user_handle"])).strip()

    def is_row_handle_visible(self, index: int) -> bool:
        return self.is_visible(self.row(index).child(self.locators["user_handle"]))

    def promote(self, index: int) -> None:
        self.click(self.locators["promote_buttons"].nth(index))

    def feed_log(self) -> str:
        return self.get_text(self.locators["feed_log"]).strip()

    def pinned_pill_text(self) -> str:
        pill = self.locators["design_card"].child(self.locators["content_pill"])
        return self.get_text(pill).strip().upper()

    def last_row_text_via_xpath(self) -> str:
        return self.get_text(self.locators["last_row_xpath"])
