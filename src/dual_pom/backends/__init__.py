"""
Automation Backends

Capability objects that implement the page object operations on top of a
concrete automation library:
- protocol-driver: Selenium WebDriver (eager locators, explicit waits)
- direct-control: Playwright (lazy locators, automatic actionability waits)
"""

from typing import Optional

from ..config import AutomationConfig
from ..models import BackendKind
from .base import Backend, ReleaseStep
from .direct_control import DirectControlBackend, SharedBrowser
from .protocol_driver import ProtocolDriverBackend


def create_backend(
    config: AutomationConfig,
    shared: Optional[SharedBrowser] = None,
) -> Backend:
    """
    Factory function to create the backend selected by config.backend.

    Args:
        config: Automation configuration
        shared: Shared browser for direct-control sessions (ignored otherwise)

    Returns:
        Backend instance (not yet opened)
    """
    if config.backend is BackendKind.DIRECT_CONTROL:
        return DirectControlBackend(config, shared=shared)
    return ProtocolDriverBackend(config)


__all__ = [
    "Backend",
    "ReleaseStep",
    "DirectControlBackend",
    "ProtocolDriverBackend",
    "SharedBrowser",
    "create_backend",
]
