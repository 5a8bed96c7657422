"""Client-side wallet and federated login flow."""

from walletauth.client.auth_service import AuthServiceClient
from walletauth.client.effects import (
    AuthEffects,
    LoggingNotifier,
    Navigator,
    Notice,
    NoticeSeverity,
    Notifier,
)
from walletauth.client.errors import (
    AuthFlowError,
    ChallengeRequestFailed,
    LoginInProgress,
    ProviderRpcError,
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
)
from walletauth.client.models import (
    FederatedAssertion,
    IdentityAssertion,
    SessionRecord,
    VerificationResult,
    WalletAssertion,
    is_valid_address,
    normalize_address,
)
from walletauth.client.orchestrator import (
    AuthOrchestrator,
    AuthOutcome,
    AuthState,
    FlowKind,
    build_orchestrator,
    run_login,
)
from walletauth.client.session import SessionReconciler, SessionStore
from walletauth.client.wallet import (
    LocalAccountWallet,
    MessageSigner,
    WalletConnector,
    WalletProvider,
)

__all__ = [
    # Models
    "FederatedAssertion",
    "IdentityAssertion",
    "SessionRecord",
    "VerificationResult",
    "WalletAssertion",
    "is_valid_address",
    "normalize_address",
    # Errors
    "AuthFlowError",
    "ChallengeRequestFailed",
    "LoginInProgress",
    "ProviderRpcError",
    "SigningError",
    "SigningRejected",
    "UserRejected",
    "VerificationDenied",
    "VerificationRequestFailed",
    "WalletError",
    "WalletUnavailable",
    # Wallet
    "LocalAccountWallet",
    "MessageSigner",
    "WalletConnector",
    "WalletProvider",
    # Authentication service
    "AuthServiceClient",
    # Federated
    "FederatedErrorCode",
    "FederatedIdentityProvider",
    "FederatedSignInError",
    # Session
    "SessionReconciler",
    "SessionStore",
    # Orchestration
    "AuthOrchestrator",
    "AuthOutcome",
    "AuthState",
    "FlowKind",
    "build_orchestrator",
    "run_login",
    # Effects
    "AuthEffects",
    "LoggingNotifier",
    "Navigator",
    "Notice",
    "NoticeSeverity",
    "Notifier",
]
