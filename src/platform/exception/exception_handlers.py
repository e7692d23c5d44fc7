"""
HTTP error mapping

Every CustomBaseError becomes `{"detail": message, **payload}` with its own
status code; SeatConflictError adds `conflicting_seats` and `session_id` so
the passenger can re-select on the same checkout.

Seat conflicts, lapsed holds and bad codes are normal traffic, so 4xx
responses are logged as one line without a traceback. Only 5xx carry one.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger

ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _log_client_error(request: Request, status_code: int, message: str) -> None:
    line = f'↩️ [HTTP] {request.method} {request.url.path} -> {status_code}: {message}'
    if status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        Logger.base.warning(line)
    else:
        Logger.base.info(line)


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc), 500)
    if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        Logger.base.error(
            f'💥 [HTTP] {request.method} {request.url.path} -> {error.status_code}: {error.message}'
        )
    else:
        _log_client_error(request, error.status_code, error.message)
    return JSONResponse(
        status_code=error.status_code, content={'detail': error.message, **error.payload}
    )


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_client_error(request, status.HTTP_400_BAD_REQUEST, str(exc))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'detail': str(exc)})


def _jsonable(error: Any) -> Any:
    # ctx may hold the raw exception raised inside a validator
    if isinstance(error, dict) and 'ctx' in error:
        return {**error, 'ctx': {k: str(v) for k, v in error['ctx'].items()}}
    return error


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    _log_client_error(request, status.HTTP_400_BAD_REQUEST, f'{len(errors)} invalid field(s)')
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': [_jsonable(e) for e in errors]},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.opt(exception=exc).error(
        f'💥 [HTTP] {request.method} {request.url.path} failed unexpectedly'
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    ValueError: value_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
