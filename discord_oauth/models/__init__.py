"""
Models for the OAuth callback service.
"""

from .outcomes import (
    ConfigurationError,
    ExchangeFailed,
    FlowOutcome,
    RedirectToAuthorize,
    ScopesMissing,
    Success,
    UnexpectedError,
)
from .tokens import (
    ErrorKind,
    ExchangeResult,
    RemoteError,
    TokenResponse,
    UserIdentity,
)

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "ExchangeFailed",
    "ExchangeResult",
    "FlowOutcome",
    "RedirectToAuthorize",
    "RemoteError",
    "ScopesMissing",
    "Success",
    "TokenResponse",
    "UnexpectedError",
    "UserIdentity",
]
