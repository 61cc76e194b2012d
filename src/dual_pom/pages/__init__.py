"""Page Object Model classes that run unchanged against either backend."""

from .base_page import BasePage, Target
from .login_page import LoginPage
from .secure_page import SecurePage
from .selector_playground import SelectorPlaygroundPage

__all__ = ["BasePage", "LoginPage", "SecurePage", "SelectorPlaygroundPage", "Target"]
