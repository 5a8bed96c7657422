"""Login flow orchestration.

Two flows are supported:
- wallet-only: connect, request challenge, sign, verify, publish
- federated + wallet: federated sign-in first, then best-effort wallet linking

Flows return an AuthOutcome value; notifications and navigation are applied
afterwards by AuthEffects.
"""

import asyncio
import logging
from enum import Enum

import httpx
from pydantic import BaseModel, Field

from walletauth.client.auth_service import AuthServiceClient
from walletauth.client.effects import AuthEffects, Notice, NoticeSeverity
from walletauth.client.errors import (
    AuthFlowError,
    ChallengeRequestFailed,
    LoginInProgress,
    SigningError,
    SigningRejected,
    UserRejected,
    VerificationDenied,
    VerificationRequestFailed,
    WalletError,
    WalletUnavailable,
)
from walletauth.client.federated import (
    FederatedErrorCode,
    FederatedIdentityProvider,
    FederatedSignInError,
    federated_sign_in,
)
from walletauth.client.models import SessionRecord, WalletAssertion
from walletauth.client.session import SessionReconciler, SessionStore
from walletauth.client.wallet import MessageSigner, WalletConnector, WalletProvider
from walletauth.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    """States of a login flow."""

    IDLE = "IDLE"
    FEDERATED_STEP = "FEDERATED_STEP"
    CONNECTING_WALLET = "CONNECTING_WALLET"
    AWAITING_CHALLENGE = "AWAITING_CHALLENGE"
    AWAITING_SIGNATURE = "AWAITING_SIGNATURE"
    AWAITING_VERIFICATION = "AWAITING_VERIFICATION"
    COMPLETED = "COMPLETED"


class FlowKind(str, Enum):
    """Login flow variants."""

    WALLET = "WALLET"
    FEDERATED_WITH_WALLET = "FEDERATED_WITH_WALLET"


class AuthOutcome(BaseModel):
    """Result of one login attempt."""

    flow: FlowKind
    session: SessionRecord | None = None
    wallet_linked: bool = False
    error: str | None = None  # Kind of the fatal failure, if any
    wallet_error: str | None = None  # Kind of a swallowed wallet failure
    notices: list[Notice] = Field(default_factory=list)
    transitions: list[AuthState] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.session is not None


# Wallet-only flow failure notices
WALLET_FAILURE_NOTICES: dict[type[AuthFlowError], Notice] = {
    WalletUnavailable: Notice(
        severity=NoticeSeverity.WARNING,
        message="No wallet found. Please install a browser wallet to sign in.",
    ),
    UserRejected: Notice(
        severity=NoticeSeverity.ERROR,
        message="Failed to connect wallet. Please try again.",
    ),
    WalletError: Notice(
        severity=NoticeSeverity.ERROR,
        message="Failed to connect wallet. Please try again.",
    ),
    ChallengeRequestFailed: Notice(
        severity=NoticeSeverity.ERROR,
        message="Failed to authenticate with wallet. Please try again.",
    ),
    SigningRejected: Notice(
        severity=NoticeSeverity.ERROR,
        message="Signature request was declined.",
    ),
    SigningError: Notice(
        severity=NoticeSeverity.ERROR,
        message="Failed to sign message. Please try again.",
    ),
    VerificationRequestFailed: Notice(
        severity=NoticeSeverity.ERROR,
        message="Verification failed. Please try again.",
    ),
    VerificationDenied: Notice(
        severity=NoticeSeverity.ERROR,
        message="Authentication failed!",
    ),
}


def wallet_failure_notice(error: AuthFlowError) -> Notice:
    """Notice shown when a wallet-only login fails."""
    return WALLET_FAILURE_NOTICES.get(
        type(error),
        Notice(severity=NoticeSeverity.ERROR, message="Wallet login failed. Please try again."),
    )


def federated_failure_notice(error: FederatedSignInError) -> Notice:
    """Notice shown when the federated sign-in fails."""
    if error.code == FederatedErrorCode.USER_CANCELLED:
        return Notice(severity=NoticeSeverity.INFO, message="Sign-in was cancelled")
    if error.code == FederatedErrorCode.NETWORK_FAILURE:
        return Notice(
            severity=NoticeSeverity.ERROR,
            message="Network error. Please check your connection.",
        )
    return Notice(
        severity=NoticeSeverity.ERROR,
        message=f"Authentication failed: {error.message or error.code.value}",
    )


class AuthOrchestrator:
    """Sequences the login steps and publishes the resulting session.

    At most one flow runs at a time per orchestrator.
    """

    def __init__(
        self,
        connector: WalletConnector,
        auth_service: AuthServiceClient,
        signer: MessageSigner,
        store: SessionStore,
        reconciler: SessionReconciler | None = None,
        federated: FederatedIdentityProvider | None = None,
        domain: str | None = None,
        origin: str | None = None,
        settings: Settings | None = None,
    ):
        """Initialize orchestrator.

        Args:
            connector: Wallet connector
            auth_service: Client of the challenge/verify endpoints
            signer: Message signer
            store: Session store receiving published records
            reconciler: Session reconciler
            federated: Federated identity provider (combined flow only)
            domain: Caller's domain bound into challenges
            origin: Caller's origin bound into challenges
            settings: Settings used for defaults
        """
        settings = settings or get_settings()
        self.connector = connector
        self.auth_service = auth_service
        self.signer = signer
        self.store = store
        self.reconciler = reconciler or SessionReconciler(settings)
        self.federated = federated
        self.domain = domain or settings.client_domain
        self.origin = origin or settings.client_url
        self._state = AuthState.IDLE
        self._lock = asyncio.Lock()
        self._transitions: list[AuthState] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    async def aclose(self) -> None:
        """Release the authentication service client's connections."""
        await self.auth_service.aclose()

    async def __aenter__(self) -> "AuthOrchestrator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _enter(self, state: AuthState) -> None:
        logger.debug(f"Login state {self._state.value} -> {state.value}")
        self._state = state
        self._transitions.append(state)

    async def _acquire(self) -> None:
        if self._lock.locked():
            raise LoginInProgress("A login flow is already running")
        await self._lock.acquire()
        self._transitions = [AuthState.IDLE]

    def _release(self) -> None:
        self._state = AuthState.IDLE
        self._lock.release()

    async def _wallet_steps(self) -> WalletAssertion:
        """Run connect, challenge, sign and verify.

        Returns:
            Verified wallet assertion

        Raises:
            AuthFlowError: The first failing step's error
        """
        self._enter(AuthState.CONNECTING_WALLET)
        address = await self.connector.connect()

        self._enter(AuthState.AWAITING_CHALLENGE)
        message = await self.auth_service.request_challenge(
            address, self.domain, self.origin
        )

        self._enter(AuthState.AWAITING_SIGNATURE)
        signature = await self.signer.sign(address, message)

        self._enter(AuthState.AWAITING_VERIFICATION)
        result = await self.auth_service.verify(address, message, signature)
        if not result.success:
            raise VerificationDenied(result.error or "Signature was not accepted")

        return WalletAssertion(address=address, verified=True, token=result.token)

    async def login_with_wallet(self) -> AuthOutcome:
        """Wallet-only login.

        Returns:
            Outcome with the published session, or the failure kind
        """
        await self._acquire()
        try:
            try:
                assertion = await self._wallet_steps()
            except AuthFlowError as e:
                logger.warning(f"Wallet login failed: {e.kind}: {e}")
                self._enter(AuthState.COMPLETED)
                return AuthOutcome(
                    flow=FlowKind.WALLET,
                    error=e.kind,
                    notices=[wallet_failure_notice(e)],
                    transitions=list(self._transitions),
                )

            session = await self.reconciler.merge_and_publish(
                self.store, None, assertion
            )
            self._enter(AuthState.COMPLETED)
            logger.info(f"Wallet login completed for {assertion.address}")
            return AuthOutcome(
                flow=FlowKind.WALLET,
                session=session,
                wallet_linked=True,
                notices=[
                    Notice(
                        severity=NoticeSeverity.SUCCESS,
                        message="Successfully authenticated with wallet!",
                    )
                ],
                transitions=list(self._transitions),
            )
        finally:
            self._release()

    async def login_with_federated_and_wallet(self) -> AuthOutcome:
        """Federated sign-in followed by best-effort wallet linking.

        The federated session is published as soon as the federated step
        succeeds; wallet failures leave it in place.

        Returns:
            Outcome with the published session, or the federated failure kind
        """
        if self.federated is None:
            raise ValueError("No federated identity provider configured")

        await self._acquire()
        try:
            self._enter(AuthState.FEDERATED_STEP)
            try:
                federated = await federated_sign_in(self.federated)
            except FederatedSignInError as e:
                logger.warning(f"Federated sign-in failed: {e.code.value}: {e}")
                self._enter(AuthState.COMPLETED)
                return AuthOutcome(
                    flow=FlowKind.FEDERATED_WITH_WALLET,
                    error=FederatedSignInError.__name__,
                    notices=[federated_failure_notice(e)],
                    transitions=list(self._transitions),
                )

            session = await self.reconciler.merge_and_publish(
                self.store, None, federated
            )

            if not self.connector.is_available:
                self._enter(AuthState.COMPLETED)
                return AuthOutcome(
                    flow=FlowKind.FEDERATED_WITH_WALLET,
                    session=session,
                    wallet_error=WalletUnavailable.kind,
                    notices=[
                        Notice(
                            severity=NoticeSeverity.WARNING,
                            message="No wallet found. Continuing without wallet connection.",
                        )
                    ],
                    transitions=list(self._transitions),
                )

            try:
                assertion = await self._wallet_steps()
            except AuthFlowError as e:
                logger.warning(f"Wallet linking skipped: {e.kind}: {e}")
                self._enter(AuthState.COMPLETED)
                return AuthOutcome(
                    flow=FlowKind.FEDERATED_WITH_WALLET,
                    session=session,
                    wallet_error=e.kind,
                    notices=[
                        Notice(
                            severity=NoticeSeverity.WARNING,
                            message="Failed to connect wallet. Continuing without wallet connection.",
                        )
                    ],
                    transitions=list(self._transitions),
                )

            session = await self.reconciler.merge_and_publish(
                self.store, session, assertion
            )
            self._enter(AuthState.COMPLETED)
            logger.info(f"Federated login linked to wallet {assertion.address}")
            return AuthOutcome(
                flow=FlowKind.FEDERATED_WITH_WALLET,
                session=session,
                wallet_linked=True,
                notices=[
                    Notice(
                        severity=NoticeSeverity.SUCCESS,
                        message="Successfully authenticated and linked your wallet!",
                    )
                ],
                transitions=list(self._transitions),
            )
        finally:
            self._release()

    async def run(self, flow: FlowKind) -> AuthOutcome:
        """Run a login flow by kind."""
        if flow == FlowKind.WALLET:
            return await self.login_with_wallet()
        return await self.login_with_federated_and_wallet()


async def run_login(
    orchestrator: AuthOrchestrator,
    effects: AuthEffects,
    flow: FlowKind = FlowKind.WALLET,
) -> AuthOutcome:
    """Run a login flow and apply its side effects."""
    outcome = await orchestrator.run(flow)
    effects.apply(outcome)
    return outcome


def build_orchestrator(
    provider: WalletProvider | None,
    store: SessionStore,
    federated: FederatedIdentityProvider | None = None,
    http_client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> AuthOrchestrator:
    """Wire an orchestrator from settings.

    Args:
        provider: Injected wallet provider, None when absent
        store: Session store
        federated: Federated identity provider
        http_client: HTTP client for the authentication service
        settings: Settings (defaults to the cached settings)

    Returns:
        Ready-to-use orchestrator
    """
    settings = settings or get_settings()
    return AuthOrchestrator(
        connector=WalletConnector(provider),
        auth_service=AuthServiceClient(http_client=http_client, settings=settings),
        signer=MessageSigner(provider),
        store=store,
        reconciler=SessionReconciler(settings),
        federated=federated,
        settings=settings,
    )
