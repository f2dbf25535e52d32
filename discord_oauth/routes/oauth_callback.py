"""
OAuth callback endpoint.

Turns the flow outcome into either a JSON response or a minimal HTML page,
depending on the configured response mode.
"""

import html
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

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
from ..services.flow_service import OAuthFlowService
from ..utils.security_mask import mask_headers

logger = logging.getLogger(__name__)


def get_flow_service(request: Request) -> OAuthFlowService:
    return request.app.state.flow_service


def get_app_settings(request: Request) -> OAuthSettings:
    return request.app.state.settings


def create_router(settings: OAuthSettings) -> APIRouter:
    """Build the callback router mounted at the configured callback path."""
    router = APIRouter()

    @router.get(settings.callback_path)
    async def oauth_callback(
        request: Request,
        code: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
        flow_service: OAuthFlowService = Depends(get_flow_service),
        app_settings: OAuthSettings = Depends(get_app_settings),
    ) -> Response:
        """Handle the provider redirect (or start the flow when no code is present)."""
        logger.debug(f"OAuth callback request headers: {mask_headers(dict(request.headers))}")
        if error:
            logger.warning(f"OAuth2 error from provider: {error} {error_description or ''}".rstrip())

        outcome = await flow_service.handle(code)

        if app_settings.response_mode == "html":
            return render_html(outcome, app_settings)
        return render_json(outcome)

    return router


def render_json(outcome: FlowOutcome) -> Response:
    """Map an outcome to the machine-readable response contract."""
    if isinstance(outcome, RedirectToAuthorize):
        return RedirectResponse(url=outcome.authorize_url, status_code=302)

    if isinstance(outcome, Success):
        content = {
            "ok": True,
            "token": outcome.token.model_dump(),
            "user": outcome.user.model_dump() if outcome.user else None,
        }
    elif isinstance(outcome, ConfigurationError):
        content = {"error": outcome.error, "message": outcome.message}
    elif isinstance(outcome, ExchangeFailed):
        content = {
            "error": outcome.error,
            "status": outcome.upstream_status,
            "details": outcome.details,
            "reason": outcome.reason,
            "authorize_url": outcome.authorize_url,
        }
    elif isinstance(outcome, ScopesMissing):
        content = {
            "error": outcome.error,
            "message": outcome.message,
            "required": outcome.required,
            "granted": outcome.granted,
            "missing": outcome.missing,
            "authorize_url": outcome.authorize_url,
        }
    elif isinstance(outcome, UnexpectedError):
        content = {"error": outcome.error, "message": outcome.message}
        if outcome.authorize_url:
            content["authorize_url"] = outcome.authorize_url
    else:
        raise TypeError(f"Unhandled flow outcome: {type(outcome).__name__}")

    return JSONResponse(status_code=outcome.status_code, content=content)


def render_html(outcome: FlowOutcome, settings: OAuthSettings) -> Response:
    """Map an outcome to a redirect or a minimal HTML page."""
    if isinstance(outcome, RedirectToAuthorize):
        return RedirectResponse(url=outcome.authorize_url, status_code=302)
    if isinstance(outcome, Success):
        return RedirectResponse(url=settings.success_redirect_url, status_code=302)

    if isinstance(outcome, ConfigurationError):
        title, message, retry_url = "Server misconfigured", outcome.message, None
    elif isinstance(outcome, ExchangeFailed):
        status = f" (status {outcome.upstream_status})" if outcome.upstream_status else ""
        title = "Authorization failed"
        message = f"Discord rejected the authorization code{status}."
        retry_url = outcome.authorize_url
    elif isinstance(outcome, ScopesMissing):
        title = "Missing permissions"
        message = f"{outcome.message} Missing: {', '.join(outcome.missing)}."
        retry_url = outcome.authorize_url
    elif isinstance(outcome, UnexpectedError):
        title, message, retry_url = "Something went wrong", outcome.message, outcome.authorize_url
    else:
        raise TypeError(f"Unhandled flow outcome: {type(outcome).__name__}")

    return HTMLResponse(content=_error_page(title, message, retry_url), status_code=outcome.status_code)


def _error_page(title: str, message: str, retry_url: str | None) -> str:
    retry_link = ""
    if retry_url:
        retry_link = f'<p><a href="{html.escape(retry_url, quote=True)}">Try again</a></p>'
    return f"""<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>{html.escape(title)}</title></head>
<body><h1>{html.escape(title)}</h1>
<p>{html.escape(message)}</p>
{retry_link}
</body></html>
"""
