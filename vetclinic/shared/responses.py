"""Response envelope helpers shared by every API router"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, message: Optional[str] = None, **extra: Any) -> dict:
    """Build ``{"success": true, "data": ..., "message"?: ..., **extra}``"""
    body: dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        body["message"] = message
    for key, value in extra.items():
        if value is not None:
            body[key] = jsonable_encoder(value)
    return body


def created(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return JSONResponse(status_code=201, content=success(data, message))


def failure(status_code: int, error: str, details: Optional[list] = None) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    if details:
        body["errors"] = details
    return JSONResponse(status_code=status_code, content=body)
