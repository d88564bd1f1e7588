"""Map engine errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from commerce.errors import ConcurrencyConflict, InsufficientStock


def _messages_of(exc) -> dict:
    # Bare Protean lookup and operation errors carry no messages dict
    return getattr(exc, "messages", None) or {"_entity": [str(exc)]}


def _error_response(status_code: int, code: str, messages, **details) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": code, "messages": messages, **details},
    )


async def insufficient_stock_handler(request: Request, exc: InsufficientStock) -> JSONResponse:
    return _error_response(
        409,
        "insufficient_stock",
        exc.messages,
        product_id=exc.product_id,
        available=exc.available,
        requested=exc.requested,
    )


async def concurrency_conflict_handler(request: Request, exc: ConcurrencyConflict) -> JSONResponse:
    return _error_response(409, "concurrency_conflict", _messages_of(exc), product_id=exc.product_id)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error_response(404, "not_found", _messages_of(exc))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, "invalid_input", exc.messages)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        messages.setdefault(field, []).append(error["msg"])
    return _error_response(400, "invalid_input", messages)


async def invalid_operation_handler(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error_response(409, "invalid_operation", _messages_of(exc))


def register_error_handlers(app: FastAPI) -> None:
    # Starlette resolves handlers by walking the exception's MRO, so the
    # specific kinds win over their Protean base classes.
    app.add_exception_handler(InsufficientStock, insufficient_stock_handler)
    app.add_exception_handler(ConcurrencyConflict, concurrency_conflict_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(InvalidOperationError, invalid_operation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
