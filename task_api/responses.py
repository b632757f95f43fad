from typing import Any, Optional

from fastapi.encoders import jsonable_encoder


def envelope(
    success: bool,
    message: Optional[str] = None,
    data: Any = None,
    error: Optional[str] = None,
    count: Optional[int] = None,
) -> dict:
    """Build the ``{success, message?, data?, error?, count?}`` body every route returns.

    Keys whose value is ``None`` are left out; an empty ``data`` payload
    (``{}`` or ``[]``) is kept.
    """
    body = {"success": success}
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if error is not None:
        body["error"] = error
    return body
