"""
Discord OAuth2 callback server.

Exchanges authorization codes for tokens, checks the granted scopes and reports the
outcome as JSON or as a minimal HTML page.
"""

import argparse
import logging

import uvicorn
from fastapi import FastAPI

from .core.config import OAuthSettings, get_settings
from .providers.discord import DiscordOAuthClient
from .routes.oauth_callback import create_router
from .services.flow_service import OAuthFlowService

logger = logging.getLogger(__name__)


def create_app(
        settings: OAuthSettings | None = None,
        flow_service: OAuthFlowService | None = None
) -> FastAPI:
    """Create the FastAPI application.

    Logging is left untouched. `main()` calls `settings.configure_logging()`, which
    installs the redaction filter; when serving this app through an external
    uvicorn command, call it yourself before startup.

    Args:
        settings: Settings to use; loaded from the environment when omitted
        flow_service: Flow service to use; built from `settings` when omitted
    """
    settings = settings or get_settings()
    flow_service = flow_service or OAuthFlowService(settings, DiscordOAuthClient(settings))

    app = FastAPI(
        title="Discord OAuth Callback",
        description="Authorization-code exchange and scope verification for Discord applications",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.flow_service = flow_service

    app.include_router(create_router(settings), tags=["oauth"])
    logger.info(f"OAuth callback mounted at '{settings.callback_path}' (response mode: {settings.response_mode})")

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "discord-oauth-callback"}

    return app


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Discord OAuth Callback Server")

    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host for the server to listen on (default: 0.0.0.0)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8888,
        help="Port for the server to listen on (default: 8888)",
    )

    return parser.parse_args()


def main():
    """Run the server"""
    args = parse_arguments()
    settings = get_settings()
    settings.configure_logging()

    missing = settings.missing_credentials()
    if missing:
        logger.warning(f"Missing configuration: {', '.join(missing)}; callback will report server_misconfigured")

    logger.info(f"Starting OAuth callback server on {args.host}:{args.port}")
    uvicorn.run(create_app(settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
