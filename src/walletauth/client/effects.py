"""Side effects applied after a login flow has finished."""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel

from walletauth.core.config import Settings, get_settings

if TYPE_CHECKING:
    from walletauth.client.orchestrator import AuthOutcome

logger = logging.getLogger(__name__)


class NoticeSeverity(str, Enum):
    """Severity of a user-facing notice."""

    SUCCESS = "SUCCESS"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Notice(BaseModel):
    """User-facing message produced by a flow."""

    severity: NoticeSeverity
    message: str


@runtime_checkable
class Notifier(Protocol):
    """Fire-and-forget notification sink."""

    def notify(self, severity: NoticeSeverity, message: str) -> None: ...


@runtime_checkable
class Navigator(Protocol):
    """Fire-and-forget navigation trigger."""

    def navigate(self, route: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes notices to the log."""

    LOG_LEVELS = {
        NoticeSeverity.SUCCESS: logging.INFO,
        NoticeSeverity.INFO: logging.INFO,
        NoticeSeverity.WARNING: logging.WARNING,
        NoticeSeverity.ERROR: logging.ERROR,
    }

    def notify(self, severity: NoticeSeverity, message: str) -> None:
        logger.log(self.LOG_LEVELS[severity], f"[{severity.value}] {message}")


class AuthEffects:
    """Applies the notices and navigation implied by a finished flow."""

    def __init__(
        self,
        notifier: Notifier | None = None,
        navigator: Navigator | None = None,
        settings: Settings | None = None,
    ):
        self.notifier = notifier or LoggingNotifier()
        self.navigator = navigator
        self.settings = settings or get_settings()

    def apply(self, outcome: "AuthOutcome") -> None:
        """Deliver notices, then navigate when a session was produced.

        Failures of the side channels are logged and never raised.
        """
        for notice in outcome.notices:
            try:
                self.notifier.notify(notice.severity, notice.message)
            except Exception as e:
                logger.warning(f"Notifier failed: {e}")

        if outcome.session is None or self.navigator is None:
            return

        try:
            self.navigator.navigate(self.settings.authenticated_route)
        except Exception as e:
            logger.warning(f"Navigation failed: {e}")
