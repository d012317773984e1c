"""
Response envelope

Every endpoint answers through ``json_response`` (message/data/meta) or
``raw_response`` (caller-built body). Errors raised anywhere in a handler are
turned into the same envelope by the exception handlers registered in
``install_exception_handlers``.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

SUCCESS = 200
BAD_REQUEST = 400
UNAUTHORIZED = 401
NOT_FOUND = 404
INTERNAL_SERVER_ERROR = 500

ERR_SOMETHING_WENT_WRONG = "Something went wrong."

_UNSET: Any = object()


def json_response(
    status_code: int,
    message: str,
    data: Any = _UNSET,
    meta: Any = _UNSET,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = {"message": message}
    if data is not _UNSET:
        body["data"] = data
    if meta is not _UNSET:
        body["meta"] = meta
    if status_code >= INTERNAL_SERVER_ERROR:
        logger.error(message)
        body = {"message": ERR_SOMETHING_WENT_WRONG}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def raw_response(status_code: int, body: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body or {}))


def first_violation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    err = errors[0]
    # Drop the "body"/"query" prefix FastAPI puts in front of the field path
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    return f"{field}: {err.get('msg')}" if field else str(err.get("msg"))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = first_violation(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return raw_response(BAD_REQUEST, {"message": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return json_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return json_response(INTERNAL_SERVER_ERROR, repr(exc))


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
