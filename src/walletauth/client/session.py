"""Session reconciliation and the process-wide session store."""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable

from walletauth.client.models import (
    FederatedAssertion,
    IdentityAssertion,
    SessionRecord,
    WalletAssertion,
)
from walletauth.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionRecord | None], Awaitable[None] | None]


class SessionStore:
    """Single-writer store holding the current session record.

    Publishing replaces the whole record; readers never observe a partially
    written session.
    """

    def __init__(self, initial: SessionRecord | None = None):
        self._current = initial
        self._listeners: list[SessionListener] = []
        self._lock = asyncio.Lock()

    @property
    def current(self) -> SessionRecord | None:
        """Get the latest published record."""
        return self._current

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener called after every change.

        Args:
            listener: Sync or async callable receiving the new record

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def publish(self, record: SessionRecord) -> None:
        """Replace the current record and notify listeners.

        Listeners run after the lock is released and may publish again.
        """
        async with self._lock:
            self._current = record
        await self._notify(record)

    async def clear(self) -> None:
        """Drop the current record."""
        async with self._lock:
            self._current = None
        await self._notify(None)

    async def _notify(self, record: SessionRecord | None) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(record)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Session listener failed: {e}")


class SessionReconciler:
    """Merges identity assertions into one session record.

    Rules:
    - federated alone: federated name, avatar and token, no wallet
    - verified wallet alone: wallet defaults, wallet address, server token
    - federated then verified wallet: federated fields plus wallet address
    - unverified wallet: never merged
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def merge(
        self,
        existing: SessionRecord | None,
        assertion: IdentityAssertion,
    ) -> SessionRecord:
        """Build the session record resulting from an assertion.

        Args:
            existing: Session produced by an earlier step of the same flow
            assertion: Newly completed identity assertion

        Returns:
            New session record

        Raises:
            ValueError: If a wallet assertion is not verified
        """
        if isinstance(assertion, FederatedAssertion):
            return SessionRecord(
                display_name=assertion.display_name or self.settings.default_display_name,
                avatar_url=assertion.avatar_url or self.settings.default_avatar_url,
                bearer_token=assertion.access_token,
            )

        if isinstance(assertion, WalletAssertion):
            if not assertion.verified:
                raise ValueError("Cannot merge an unverified wallet assertion")

            if existing is None:
                return SessionRecord(
                    display_name=self.settings.wallet_display_name,
                    avatar_url=self.settings.wallet_avatar_url,
                    wallet_address=assertion.address,
                    bearer_token=assertion.token,
                )

            return existing.model_copy(update={"wallet_address": assertion.address})

        raise TypeError(f"Unsupported assertion: {type(assertion).__name__}")

    async def merge_and_publish(
        self,
        store: SessionStore,
        existing: SessionRecord | None,
        assertion: IdentityAssertion,
    ) -> SessionRecord:
        """Merge an assertion and publish the result."""
        record = self.merge(existing, assertion)
        await store.publish(record)
        return record
