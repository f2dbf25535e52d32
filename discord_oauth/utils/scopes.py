import logging

logger = logging.getLogger(__name__)


def parse_scopes(scope_string: str | None) -> list[str]:
    """Split a whitespace-delimited scope string.

    Args:
        scope_string: Scope string as sent by the provider or set in configuration

    Returns:
        Deduplicated list of scope strings (order-preserving).
    """
    if not scope_string:
        return []

    seen: set[str] = set()
    unique_scopes: list[str] = []
    for scope in scope_string.split():
        if scope not in seen:
            seen.add(scope)
            unique_scopes.append(scope)
    return unique_scopes


def missing_scopes(required: list[str], granted: list[str]) -> list[str]:
    """Return required scopes absent from the granted set, in required order.

    Comparison is case-sensitive exact match. An empty `required` list always
    yields an empty result.
    """
    granted_set = set(granted)
    missing = [scope for scope in required if scope not in granted_set]
    if missing:
        logger.debug(f"Missing scopes: {missing} (granted: {sorted(granted_set)})")
    return missing
