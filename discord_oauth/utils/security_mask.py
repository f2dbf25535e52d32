import logging
from typing import Any

MASKED = "***MASKED***"

# Keys whose values must never reach a log sink
SENSITIVE_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "id_token",
        "client_secret",
        "code",
        "email",
        "authorization",
        "cookie",
        "password",
    }
)


def mask_sensitive_id(value: str) -> str:
    """Mask sensitive IDs showing only first and last 4 characters."""
    if not value or len(value) <= 8:
        return MASKED
    return f"{value[:4]}...{value[-4:]}"


def mask_token(token: str) -> str:
    """Mask token showing only last 4 characters."""
    if not token:
        return "***EMPTY***"
    if len(token) > 20:
        return f"...{token[-4:]}"
    return MASKED


def mask_headers(headers: dict) -> dict:
    """Mask sensitive headers for logging compliance."""
    masked = {}
    for key, value in headers.items():
        key_lower = key.lower()
        if key_lower in ["authorization", "cookie"]:
            if "bearer" in str(value).lower():
                parts = str(value).split(" ", 1)
                if len(parts) == 2:
                    masked[key] = f"Bearer {mask_token(parts[1])}"
                else:
                    masked[key] = mask_token(value)
            else:
                masked[key] = MASKED
        else:
            masked[key] = value
    return masked


def redact(value: Any) -> Any:
    """Return a redacted copy of a loggable structure.

    Dicts are walked recursively and the values of sensitive keys are replaced;
    lists and tuples are rebuilt element by element. The input is never mutated.
    Pydantic models are redacted through their dict form.
    """
    if hasattr(value, "model_dump"):
        value = value.model_dump()

    if isinstance(value, dict):
        redacted = {}
        for key, item in value.items():
            if isinstance(key, str) and key.lower() in SENSITIVE_KEYS:
                if key.lower() in ("access_token", "refresh_token", "id_token") and isinstance(item, str):
                    redacted[key] = mask_token(item)
                else:
                    redacted[key] = MASKED if item is not None else None
            else:
                redacted[key] = redact(item)
        return redacted
    if isinstance(value, list):
        return [redact(item) for item in value]
    if isinstance(value, tuple):
        return tuple(redact(item) for item in value)
    return value


class SensitiveDataFilter(logging.Filter):
    """Apply `redact` to structured log arguments before any handler emits them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, dict):
            record.args = redact(record.args)
        elif isinstance(record.args, tuple):
            record.args = tuple(redact(arg) for arg in record.args)
        if isinstance(record.msg, (dict, list)):
            record.msg = redact(record.msg)
        return True
