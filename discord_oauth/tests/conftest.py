"""
Pytest configuration and shared fixtures for the OAuth callback tests.
"""

import json
from collections.abc import Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from discord_oauth.core.config import OAuthSettings
from discord_oauth.providers.discord import DiscordOAuthClient
from discord_oauth.server import create_app
from discord_oauth.services.flow_service import OAuthFlowService

API_ENDPOINT = "https://discord.test/api/v10"
AUTHORIZE_URL = "https://discord.test/oauth2/authorize"
TOKEN_URL = f"{API_ENDPOINT}/oauth2/token"
USERINFO_URL = f"{API_ENDPOINT}/users/@me"

TOKEN_PAYLOAD = {
    "access_token": "provider-access-token-0123456789abcdef",
    "refresh_token": "provider-refresh-token-0123456789abcdef",
    "scope": "identify applications.commands gdm.join",
    "expires_in": 604800,
    "token_type": "Bearer",
}

USER_PAYLOAD = {
    "id": "80351110224678912",
    "username": "nelly",
    "email": "nelly@example.com",
    "global_name": "Nelly",
}


def make_settings(**overrides) -> OAuthSettings:
    """Build settings without reading .env, so tests are isolated from the host."""
    values = dict(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="https://app.example.com/api/oauth",
        required_scopes="identify applications.commands gdm.join",
        discord_api_endpoint=API_ENDPOINT,
        discord_authorize_url=AUTHORIZE_URL,
        http_timeout_seconds=5.0,
    )
    values.update(overrides)
    return OAuthSettings(_env_file=None, **values)


class FakeDiscord:
    """Programmable stand-in for the provider, served through httpx.MockTransport."""

    def __init__(self):
        self.token_status = 200
        self.token_body: object = dict(TOKEN_PAYLOAD)
        self.user_status = 200
        self.user_body: object = dict(USER_PAYLOAD)
        self.token_headers: dict[str, str] = {}
        self.user_headers: dict[str, str] = {}
        self.token_error: Exception | None = None
        self.user_error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def requests_to(self, url: str) -> list[httpx.Request]:
        path = httpx.URL(url).path
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == httpx.URL(TOKEN_URL).path:
            if self.token_error:
                raise self.token_error
            return _response(self.token_status, self.token_body, self.token_headers)
        if request.url.path == httpx.URL(USERINFO_URL).path:
            if self.user_error:
                raise self.user_error
            return _response(self.user_status, self.user_body, self.user_headers)
        return httpx.Response(404, json={"message": "404: Not Found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def _response(status: int, body: object, headers: dict | None = None) -> httpx.Response:
    if isinstance(body, str):
        return httpx.Response(status, text=body, headers=headers)
    return httpx.Response(
        status,
        content=json.dumps(body).encode(),
        headers={"content-type": "application/json", **(headers or {})},
    )


@pytest.fixture
def fake_discord() -> FakeDiscord:
    return FakeDiscord()


@pytest.fixture
def settings() -> OAuthSettings:
    return make_settings()


@pytest.fixture
def oauth_client(settings, fake_discord) -> DiscordOAuthClient:
    return DiscordOAuthClient(settings, transport=fake_discord.transport)


@pytest.fixture
def flow_service(settings, oauth_client) -> OAuthFlowService:
    return OAuthFlowService(settings, oauth_client)


@pytest.fixture
def client_factory(fake_discord) -> Callable[..., TestClient]:
    """Create a test client for an app built from the given settings overrides."""

    def _factory(**overrides) -> TestClient:
        app_settings = make_settings(**overrides)
        service = OAuthFlowService(app_settings, DiscordOAuthClient(app_settings, transport=fake_discord.transport))
        return TestClient(create_app(app_settings, service))

    return _factory


@pytest.fixture
def test_client(client_factory) -> Generator[TestClient, None, None]:
    with client_factory() as client:
        yield client


# Test markers
pytest.mark.oauth = pytest.mark.oauth
pytest.mark.integration = pytest.mark.integration
pytest.mark.unit = pytest.mark.unit
