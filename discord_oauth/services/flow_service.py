"""
OAuth authorization-code flow service.

Drives one callback request through its phases:
no-code -> exchanging -> scope-checking -> user-lookup -> success,
and maps every phase result to exactly one FlowOutcome.
"""

import logging

from ..core.config import OAuthSettings
from ..models.outcomes import (
    ConfigurationError,
    ExchangeFailed,
    FlowOutcome,
    RedirectToAuthorize,
    ScopesMissing,
    Success,
    UnexpectedError,
)
from ..providers.discord import DiscordOAuthClient
from ..utils.scopes import missing_scopes, parse_scopes

logger = logging.getLogger(__name__)


class OAuthFlowService:
    """Authorization-code flow orchestrator.

    Holds no per-request state; a single instance can serve concurrent requests.
    """

    def __init__(self, settings: OAuthSettings, client: DiscordOAuthClient | None = None):
        self.settings = settings
        self.client = client or DiscordOAuthClient(settings)

    async def handle(self, code: str | None) -> FlowOutcome:
        """Run the flow for one callback request.

        Args:
            code: Authorization code from the redirect query string, or None

        Returns:
            The outcome that fully determines the response
        """
        try:
            if not code:
                return self._start_authorization()
            return await self._complete_authorization(code)
        except Exception as e:
            logger.error(f"Unexpected error during OAuth callback: {type(e).__name__}", exc_info=True)
            return UnexpectedError(authorize_url=self._safe_authorize_url())

    def _start_authorization(self) -> FlowOutcome:
        missing = self.settings.missing_credentials()
        if missing:
            logger.error(f"OAuth flow misconfigured, missing: {', '.join(missing)}")
            return ConfigurationError(missing=missing)

        authorize_url = self.client.build_authorize_url()
        logger.info(f"Redirecting to authorize URL with scopes: {self.settings.required_scope_list}")
        return RedirectToAuthorize(authorize_url=authorize_url)

    async def _complete_authorization(self, code: str) -> FlowOutcome:
        result = await self.client.exchange_code(code, self.settings.redirect_uri)
        if not result.ok:
            error = result.error
            logger.warning(f"Token exchange failed: reason={error.kind.value}, status={error.status_code}")
            return ExchangeFailed(
                authorize_url=self.client.build_authorize_url(),
                reason=error.kind.value,
                upstream_status=error.status_code,
                details=error.body if error.body is not None else error.message,
            )

        token = result.token
        granted = parse_scopes(token.scope)
        required = self.settings.required_scope_list
        missing = missing_scopes(required, granted)
        if missing:
            logger.warning(f"Token is missing required scopes: {missing}")
            return ScopesMissing(
                required=required,
                granted=granted,
                missing=missing,
                authorize_url=self.client.build_authorize_url(),
            )

        user = await self.client.fetch_identity(token.access_token)
        if user:
            logger.info(f"OAuth2 authorization successful for user id={user.id}, username={user.username}")
        else:
            logger.info("OAuth2 authorization successful, user identity unavailable")
        return Success(token=token, user=user)

    def _safe_authorize_url(self) -> str | None:
        try:
            return self.client.build_authorize_url()
        except Exception as e:
            logger.warning(f"Could not build retry URL: {type(e).__name__}")
            return None
