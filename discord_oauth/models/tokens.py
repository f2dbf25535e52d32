"""
Pydantic models for the token exchange and identity lookup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenResponse(BaseModel):
    """Token endpoint response. Secrets are never persisted or logged."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., description="Access token")
    token_type: str = Field("Bearer", description="Token type")
    expires_in: int | None = Field(None, description="Expiration time (seconds)")
    refresh_token: str | None = Field(None, description="Refresh token")
    scope: str = Field("", description="Granted scopes, space-delimited")

    @field_validator("scope", mode="before")
    @classmethod
    def validate_scope(cls, v):
        """Treat a null scope as no scopes granted."""
        return "" if v is None else v


class UserIdentity(BaseModel):
    """Profile returned by the current-user endpoint"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="User snowflake ID")
    username: str = Field(..., description="Username")
    email: str | None = Field(None, description="Email (requires the email scope)")
    global_name: str | None = Field(None, description="Display name")
    avatar: str | None = Field(None, description="Avatar hash")


class ErrorKind(str, Enum):
    """Failure kinds of a remote call"""

    REMOTE = "remote"  # provider answered with a non-success status
    TRANSPORT = "transport"  # no usable reply: timeout, DNS, connection reset, undecodable body


@dataclass(frozen=True)
class RemoteError:
    """A failed remote call captured as a value."""

    kind: ErrorKind
    message: str
    status_code: int | None = None
    body: Any = None


@dataclass(frozen=True)
class ExchangeResult:
    """Result of the code exchange: exactly one of `token` or `error` is set."""

    token: TokenResponse | None = None
    error: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.token is not None
