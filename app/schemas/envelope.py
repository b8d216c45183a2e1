"""Uniform response envelope returned by every endpoint."""

from typing import Any

from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from starlette.status import HTTP_200_OK


class Envelope(BaseModel):
    """``{success, message?, data?, error?}``"""

    success: bool
    message: str | None = None
    data: dict[str, Any] | None = None
    error: str | None = None


def _dump(value: object) -> object:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump(item) for key, item in value.items()}
    return value


def success_response(
    data: dict[str, Any] | BaseModel | None = None,
    message: str | None = None,
    status_code: int = HTTP_200_OK,
) -> ORJSONResponse:
    """
    Wrap `data` in a ``success: true`` envelope.

    Args:
        data: Payload placed under ``data``; pydantic models are dumped
            with camelCase aliases.
        message: Optional human-readable message.
        status_code: HTTP status to send.

    Returns:
        ORJSONResponse with the envelope body.
    """
    content: dict[str, Any] = {"success": True}
    if message is not None:
        content["message"] = message
    if data is not None:
        content["data"] = _dump(data)
    return ORJSONResponse(
        content=content,
        status_code=status_code,
    )
