from fastapi import Request
from fastapi.responses import JSONResponse

from app.exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ParseError,
    UnauthorizedError,
    ValidationError,
)


def _render(status_code: int, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _render(500, exc)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _render(404, exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _render(422, exc)


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return _render(409, exc)


async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _render(401, exc)


async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    return _render(403, exc)


async def parse_error_handler(request: Request, exc: ParseError) -> JSONResponse:
    return _render(400, exc)


def register_exception_handlers(app):
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)
    app.add_exception_handler(ForbiddenError, forbidden_handler)
    app.add_exception_handler(ParseError, parse_error_handler)
    app.add_exception_handler(AppError, app_error_handler)
