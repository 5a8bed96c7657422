"""Error taxonomy for the wallet login flow."""

from typing import Any

# EIP-1193 "user rejected request"
USER_REJECTED_CODE = 4001


class ProviderRpcError(Exception):
    """Error raised by a wallet provider, carrying its RPC error code."""

    def __init__(self, code: int, message: str = ""):
        super().__init__(message or f"Provider error {code}")
        self.code = code
        self.message = message

    @property
    def is_user_rejection(self) -> bool:
        return self.code == USER_REJECTED_CODE


class AuthFlowError(Exception):
    """Base class for every failure of a login sub-step."""

    kind = "AuthFlowError"

    def __init__(self, message: str = "", cause: BaseException | None = None):
        super().__init__(message or self.kind)
        self.cause = cause


class WalletUnavailable(AuthFlowError):
    """No wallet provider is present in the environment."""

    kind = "WalletUnavailable"


class UserRejected(AuthFlowError):
    """The user denied the account-access request."""

    kind = "UserRejected"


class WalletError(AuthFlowError):
    """Any other provider-level failure while connecting."""

    kind = "WalletError"


class ChallengeRequestFailed(AuthFlowError):
    """The challenge request failed in transport or with a non-2xx status.

    ``payload`` holds the server's error body when there was one, otherwise
    the transport error.
    """

    kind = "ChallengeRequestFailed"

    def __init__(
        self,
        message: str = "",
        payload: Any = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.payload = payload
        self.status_code = status_code


class SigningRejected(AuthFlowError):
    """The user declined the signature prompt."""

    kind = "SigningRejected"


class SigningError(AuthFlowError):
    """The wallet failed to produce a signature."""

    kind = "SigningError"


class VerificationRequestFailed(AuthFlowError):
    """The verify request failed in transport or returned an unusable body."""

    kind = "VerificationRequestFailed"

    def __init__(
        self,
        message: str = "",
        payload: Any = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.payload = payload
        self.status_code = status_code


class VerificationDenied(AuthFlowError):
    """The authentication service returned an explicit negative verdict."""

    kind = "VerificationDenied"


class LoginInProgress(Exception):
    """Raised when a login is started while another one is still running."""
