"""Turn storefront, Protean and FastAPI errors into JSON error responses.

Every error body is ``{"error": <message>, "kind": <kind>}`` plus any
error-specific extras.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.domain import logger
from storefront.errors import ConcurrencyConflictError, InvalidRequestError, NotFoundError, StorefrontError


def error_response(error: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, kind=exc.kind, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, kind=exc.kind, error=exc.message)
    return error_response(exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    missing = any(error.get("type") == "missing" for error in errors)
    message = "Missing required parameters" if missing else "Invalid request parameters"
    details = [{"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")} for error in errors]
    return error_response(InvalidRequestError(message, details=details))


async def handle_protean_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"_entity": [str(exc.messages)]}
    return error_response(InvalidRequestError("Invalid request parameters", details=messages))


async def handle_object_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(NotFoundError("Not found"))


async def handle_version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    """An aggregate changed between this request's read and its commit."""
    logger.info("request_conflicted", path=request.url.path, error=str(exc))
    return error_response(ConcurrencyConflictError("Resource was modified by another request"))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_crashed", path=request.url.path)
    return error_response(StorefrontError(str(exc) or "Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, handle_storefront_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ValidationError, handle_protean_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_object_not_found)
    app.add_exception_handler(ExpectedVersionError, handle_version_conflict)
    app.add_exception_handler(Exception, handle_unexpected_error)
