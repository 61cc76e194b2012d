"""
Rich Step Console

Prints session lifecycle events and test steps as styled blocks, so a run
against either backend reads the same in the terminal. Configured via
environment variables for customizable appearance.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.text import Text
from rich.theme import Theme

from .models import BackendKind, TeardownReport

# Block types for console output
BlockType = Literal["session", "step", "failure"]

BACKEND_LABELS = {
    BackendKind.PROTOCOL_DRIVER: "Selenium WebDriver",
    BackendKind.DIRECT_CONTROL: "Playwright",
}


@dataclass
class ConsoleConfig:
    """
    Console configuration loaded from environment variables.

    Attributes:
        color_session: Color for SESSION blocks (setup/teardown)
        color_step: Color for STEP blocks (passed test steps)
        color_failure: Color for FAILURE blocks
        show_timestamps: Whether to display timestamps
    """

    color_session: str = "blue"
    color_step: str = "green"
    color_failure: str = "red"
    show_timestamps: bool = True

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Load configuration from environment variables."""
        return cls(
            color_session=os.getenv("COLOR_SESSION", "blue"),
            color_step=os.getenv("COLOR_STEP", "green"),
            color_failure=os.getenv("COLOR_FAILURE", "red"),
            show_timestamps=os.getenv("SHOW_TIMESTAMPS", "true").lower() == "true",
        )


def create_theme(config: ConsoleConfig) -> Theme:
    """Create a Rich theme from console configuration."""
    return Theme(
        {
            "session": Style(color=config.color_session, bold=True),
            "step": Style(color=config.color_step),
            "failure": Style(color=config.color_failure, bold=True),
            "timestamp": Style(dim=True),
        }
    )


class StepConsole:
    """
    Rich console wrapper for session and step output.

    Disabled consoles accept every call and print nothing.
    """

    def __init__(
        self,
        config: Optional[ConsoleConfig] = None,
        enabled: bool = True,
        console: Optional[Console] = None,
    ):
        self.config = config or ConsoleConfig.from_env()
        self.enabled = enabled
        self.console = console or Console(theme=create_theme(self.config))

    def _get_timestamp(self) -> str:
        if self.config.show_timestamps:
            return datetime.now().strftime("%H:%M:%S")
        return ""

    def _get_block_style(self, block_type: BlockType) -> tuple[str, str]:
        styles = {
            "session": (self.config.color_session, "SESSION"),
            "step": (self.config.color_step, "STEP"),
            "failure": (self.config.color_failure, "FAILURE"),
        }
        return styles[block_type]

    def print_block(
        self,
        content: Union[str, Text],
        block_type: BlockType,
        title: Optional[str] = None,
    ) -> None:
        if not self.enabled:
            return

        color, label = self._get_block_style(block_type)
        block_title = title or f"[{label}]"

        timestamp = self._get_timestamp()
        if timestamp:
            block_title = f"{timestamp} {block_title}"

        self.console.print(
            Panel(
                content,
                title=block_title,
                title_align="left",
                border_style=color,
                padding=(0, 1),
            )
        )

    def print_session_start(self, kind: BackendKind, browser_type: str, viewport: str) -> None:
        content = Text()
        content.append(f"Initializing {BACKEND_LABELS[kind]}\n", style="session")
        content.append(f"Browser: {browser_type}\n")
        content.append(f"Viewport: {viewport}")
        self.print_block(content, "session")

    def print_session_end(self, report: TeardownReport) -> None:
        content = Text()
        content.append(f"Cleaning up {BACKEND_LABELS[report.backend]}\n", style="session")
        for step in report.released:
            content.append(f"  {step} closed\n")
        for failure in report.failures:
            content.append(f"  {failure.step} failed: {failure.error}\n", style="failure")
        self.print_block(content, "failure" if report.failures else "session")

    def print_step(self, message: str, passed: bool = True) -> None:
        marker = "✓" if passed else "✗"
        self.print_block(f"{marker} {message}", "step" if passed else "failure")


def create_console(
    config: Optional[ConsoleConfig] = None,
    enabled: bool = True,
) -> StepConsole:
    """
    Create a new step console.

    Args:
        config: Console configuration. If None, loads from environment.
        enabled: Whether anything is printed
    """
    return StepConsole(config, enabled=enabled)
