"""
Error envelope - every failure leaves the API as:

    {"success": false, "error": "<message>", "details": <optional>}

Routes keep raising HTTPException; the handlers below only reshape the
response. Validation errors become 400, duplicate keys 409, and anything
unexpected 500 with its message but never a traceback.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Friendly names for unique-indexed fields
DUPLICATE_MESSAGES = {
    "email": "User with this email already exists",
    "user": "Profile already exists. Use PUT to update.",
    "job_id": "You have already applied to this job",
    "name": "A record with this name already exists",
    "code": "A record with this code already exists",
}


def error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def duplicate_key_message(exc: DuplicateKeyError) -> str:
    """Pick a message from the index key that was violated."""
    key_pattern = (exc.details or {}).get("keyPattern") or {}
    for field in key_pattern:
        if field in DUPLICATE_MESSAGES:
            return DUPLICATE_MESSAGES[field]
    text = str(exc)
    for field, message in DUPLICATE_MESSAGES.items():
        if f"{field}_" in text:
            return message
    return "Duplicate record"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    headers = getattr(exc, "headers", None)
    if isinstance(detail, dict):
        return error_response(exc.status_code, detail.get("error", "Request failed"), detail.get("details"), headers)
    return error_response(exc.status_code, str(detail), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]
    return error_response(400, message, details)


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    return error_response(409, duplicate_key_message(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, str(exc) or "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
