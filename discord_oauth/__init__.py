"""Discord OAuth2 authorization-code callback service."""
