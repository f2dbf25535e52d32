"""
Flow outcomes.

Every invocation of the flow service produces exactly one of these values, and the
value alone determines the HTTP response.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar

from .tokens import TokenResponse, UserIdentity

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while completing authorization. Please try again."


@dataclass(frozen=True)
class FlowOutcome:
    """Base class for flow outcomes."""

    status_code: ClassVar[int] = 500
    error: ClassVar[str | None] = None


@dataclass(frozen=True)
class RedirectToAuthorize(FlowOutcome):
    status_code: ClassVar[int] = 302

    authorize_url: str


@dataclass(frozen=True)
class ConfigurationError(FlowOutcome):
    status_code: ClassVar[int] = 500
    error: ClassVar[str] = "server_misconfigured"

    missing: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "CLIENT_ID, CLIENT_SECRET and REDIRECT_URI must be set in environment variables."


@dataclass(frozen=True)
class ExchangeFailed(FlowOutcome):
    status_code: ClassVar[int] = 500
    error: ClassVar[str] = "token_exchange_failed"

    authorize_url: str
    reason: str
    upstream_status: int | None = None
    details: Any = None


@dataclass(frozen=True)
class ScopesMissing(FlowOutcome):
    status_code: ClassVar[int] = 400
    error: ClassVar[str] = "missing_scopes"

    required: list[str]
    granted: list[str]
    missing: list[str]
    authorize_url: str

    @property
    def message(self) -> str:
        return "The token does not include required scopes."


@dataclass(frozen=True)
class Success(FlowOutcome):
    status_code: ClassVar[int] = 200

    token: TokenResponse
    user: UserIdentity | None = None


@dataclass(frozen=True)
class UnexpectedError(FlowOutcome):
    status_code: ClassVar[int] = 500
    error: ClassVar[str] = "unexpected_error"

    authorize_url: str | None = None
    message: str = GENERIC_ERROR_MESSAGE
