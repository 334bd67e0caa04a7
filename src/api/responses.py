"""JSON envelope helpers shared by routes and exception handlers."""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.models import Envelope


def success_response(
    message: str,
    data: Any = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    body = Envelope(success=True, message=message, data=jsonable_encoder(data, by_alias=True))
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude={"error"}))


def error_response(
    message: str,
    error: Any = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = Envelope(success=False, message=message, error=jsonable_encoder(error))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude={"data"}),
        headers=headers,
    )
