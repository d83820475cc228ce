"""Small request validation helpers shared by routers."""

from src.em_common.errors import InvalidRequestError


def require_id(value: str, field: str) -> str:
    """Reject blank identifiers before any ledger round trip."""
    value = value.strip()
    if not value:
        raise InvalidRequestError(f"{field} is required")
    return value
