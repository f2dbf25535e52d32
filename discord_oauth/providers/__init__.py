"""Identity provider client for the OAuth callback service."""

from .discord import DiscordOAuthClient

__all__ = [
    "DiscordOAuthClient",
]
