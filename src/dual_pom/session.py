"""
Session Lifecycle

A Session wraps one backend instance for one test and tracks its state:

    UNINITIALIZED -> READY -> IN_USE -> CLOSING -> CLOSED

The SessionManager acquires the backend's resources, hands out sessions, and
tears them down innermost-first on every exit path. Teardown is best-effort:
each release step runs even if an earlier one failed, and failures are
logged and collected rather than raised so they never mask a test failure.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from .backends import Backend, SharedBrowser, create_backend
from .config import AutomationConfig, parse_backend_kind
from .errors import SessionClosedError, SessionStartError
from .models import BackendKind, SessionState, TeardownFailure, TeardownReport

logger = logging.getLogger(__name__)


class Session:
    """One backend instance owned by one test."""

    def __init__(self, backend: Backend):
        self._backend = backend
        self.state = SessionState.UNINITIALIZED

    @property
    def kind(self) -> BackendKind:
        return self._backend.kind

    @property
    def config(self) -> AutomationConfig:
        return self._backend.config

    @property
    def is_open(self) -> bool:
        return self.state in (SessionState.READY, SessionState.IN_USE)

    @property
    def backend(self) -> Backend:
        """
        The backend capability object, for issuing an operation.

        Raises:
            SessionClosedError: If the session is not open
        """
        if self.state in (SessionState.CLOSING, SessionState.CLOSED):
            raise SessionClosedError(f"{self.kind.value} session is {self.state.value}")
        if self.state is SessionState.UNINITIALIZED:
            raise SessionClosedError(f"{self.kind.value} session has not been opened")
        if self.state is SessionState.READY:
            self.state = SessionState.IN_USE
        return self._backend

    def __repr__(self) -> str:
        return f"Session(kind={self.kind.value}, state={self.state.value})"


class SessionManager:
    """
    Creates and tears down sessions.

    Usage:
        >>> manager = SessionManager(AutomationConfig())
        >>> with manager.session("direct-control") as session:
        ...     LoginPage(session).open_page()
    """

    def __init__(
        self,
        config: Optional[AutomationConfig] = None,
        shared_browser: Optional[SharedBrowser] = None,
    ):
        self.config = config or AutomationConfig.from_env()
        self.shared_browser = shared_browser

    def open(self, kind: Union[str, BackendKind, None] = None) -> Session:
        """
        Acquire backend resources and return a ready session.

        Args:
            kind: Backend kind; defaults to config.backend

        Raises:
            SessionStartError: If resources could not be acquired. Anything
                acquired before the failure is released first.
        """
        config = self.config if kind is None else self.config.with_backend(parse_backend_kind(kind))
        backend = create_backend(config, shared=self.shared_browser)
        session = Session(backend)

        logger.info(f"Initializing {config.backend.value} session")
        try:
            backend.open()
        except Exception as e:
            logger.error(f"Failed to start {config.backend.value} session: {e}")
            report = self._release(session)
            session.state = SessionState.CLOSED
            raise SessionStartError(
                f"Could not start {config.backend.value} session: {e}"
                + ("" if report.clean else f" (cleanup failures: {len(report.failures)})")
            ) from e

        session.state = SessionState.READY
        return session

    def close(self, session: Session) -> TeardownReport:
        """
        Tear down a session. Safe to call more than once; only the first call
        releases anything.
        """
        if session.state is SessionState.CLOSED:
            return TeardownReport(backend=session.kind)

        logger.info(f"Cleaning up {session.kind.value} session")
        session.state = SessionState.CLOSING
        try:
            report = self._release(session)
        finally:
            session.state = SessionState.CLOSED

        if not report.clean:
            logger.warning(
                f"{session.kind.value} teardown finished with {len(report.failures)} failure(s): "
                + ", ".join(f.step for f in report.failures)
            )
        return report

    def _release(self, session: Session) -> TeardownReport:
        report = TeardownReport(backend=session.kind)
        for step, release in session._backend.release_steps():
            report.attempted.append(step)
            try:
                release()
            except Exception as e:
                logger.warning(f"Failed to release {step}: {e}")
                report.failures.append(TeardownFailure(step=step, error=repr(e)))
            else:
                logger.debug(f"Released {step}")
                report.released.append(step)
        return report

    @contextmanager
    def session(self, kind: Union[str, BackendKind, None] = None) -> Iterator[Session]:
        """Open a session and guarantee it is closed when the block exits."""
        session = self.open(kind)
        try:
            yield session
        finally:
            self.close(session)
