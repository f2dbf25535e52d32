import logging
import urllib.parse
from typing import Any

import httpx
from pydantic import ValidationError

from ..core.config import OAuthSettings
from ..models.tokens import (
    ErrorKind,
    ExchangeResult,
    RemoteError,
    TokenResponse,
    UserIdentity,
)
from ..utils.security_mask import mask_sensitive_id, redact

logger = logging.getLogger(__name__)


class DiscordOAuthClient:
    """Discord OAuth2 client: authorize URL, code exchange and current-user lookup.

    Remote failures are returned as values. Non-2xx replies are expected outcomes
    and never raise; only programming errors escape this class.
    """

    def __init__(
            self,
            settings: OAuthSettings,
            transport: httpx.AsyncBaseTransport | None = None
    ):
        """Initialize the client.

        Args:
            settings: Immutable service settings (credentials, endpoints, timeout)
            transport: Optional httpx transport, used to stub the provider in tests
        """
        self.settings = settings
        self._transport = transport

        api_endpoint = settings.discord_api_endpoint.rstrip("/")
        self.token_url = f"{api_endpoint}/oauth2/token"
        self.userinfo_url = f"{api_endpoint}/users/@me"
        self.auth_url = settings.discord_authorize_url

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds,
            transport=self._transport,
        )

    def build_authorize_url(self) -> str:
        """Build the consent-screen URL asking for the required scopes.

        Scopes are joined with a single space and form-encoded, so the provider
        receives them as `+`-separated values. Output depends on configuration only.
        """
        params = {
            "client_id": self.settings.client_id,
            "redirect_uri": self.settings.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.settings.required_scope_list),
        }
        return f"{self.auth_url}?{urllib.parse.urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> ExchangeResult:
        """Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the provider redirect
            redirect_uri: Must match the one used in the authorization request

        Returns:
            ExchangeResult holding either the token response or a RemoteError
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        auth = httpx.BasicAuth(self.settings.client_id, self.settings.client_secret)

        logger.info(
            f"OAuth2 code exchange request - "
            f"URL: {self.token_url}, "
            f"Redirect URI: {redirect_uri}, "
            f"Client ID: {mask_sensitive_id(self.settings.client_id)}, "
            f"Code length: {len(code)}"
        )

        try:
            async with self._http_client() as client:
                response = await client.post(self.token_url, data=data, headers=headers, auth=auth)
        except httpx.RequestError as e:
            logger.error(f"Token exchange request failure: {type(e).__name__}")
            return ExchangeResult(
                error=RemoteError(kind=ErrorKind.TRANSPORT, message=f"Could not reach token endpoint: {type(e).__name__}")
            )

        body = _parse_body(response)
        if not response.is_success:
            logger.error("Discord token error: %s %s", response.status_code, redact(body))
            return ExchangeResult(
                error=RemoteError(
                    kind=ErrorKind.REMOTE,
                    message="Token endpoint returned an error",
                    status_code=response.status_code,
                    body=body,
                )
            )

        try:
            token = TokenResponse.model_validate(body)
        except ValidationError:
            logger.error(f"Token endpoint returned an unexpected payload (status {response.status_code})")
            return ExchangeResult(
                error=RemoteError(
                    kind=ErrorKind.REMOTE,
                    message="invalid token response",
                    status_code=response.status_code,
                    body=redact(body),
                )
            )

        logger.debug(f"Token exchange successful, granted scopes: {token.scope!r}")
        return ExchangeResult(token=token)

    async def fetch_identity(self, access_token: str) -> UserIdentity | None:
        """Fetch the current user. Best-effort: any failure yields None."""
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            async with self._http_client() as client:
                response = await client.get(self.userinfo_url, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching /users/@me: {type(e).__name__}")
            return None

        if not response.is_success:
            logger.warning("Could not fetch /users/@me: %s %s", response.status_code, redact(_parse_body(response)))
            return None

        try:
            user = UserIdentity.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unexpected /users/@me payload: {type(e).__name__}")
            return None

        logger.debug(f"Resolved identity for user id={user.id}, username={user.username}")
        return user


def _parse_body(response: httpx.Response) -> Any:
    """Decode a JSON body, falling back to text."""
    try:
        return response.json()
    except ValueError:
        return response.text
