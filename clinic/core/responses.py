"""
Success envelope helpers shared by every router.
"""
from typing import Any, Optional


def success_response(message: str, data: Any = None, total: Optional[int] = None) -> dict:
    """
    Build a ``{"success": true, ...}`` envelope.

    Args:
        message: Human readable message
        data: Payload (omitted when None)
        total: Item count for list endpoints

    Returns:
        dict: Envelope ready to be returned from a route
    """
    body = {"success": True, "message": message}
    if total is not None:
        body["total"] = total
    if data is not None:
        body["data"] = data
    return body
