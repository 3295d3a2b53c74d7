"""FastAPI app for fleet dashboard service."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .errors import code_for_status, error_response
from .observability import configure_logging
from .routes import router

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.service_name, version=settings.service_version)
app.include_router(router)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return error_response(
        status_code=exc.status_code,
        code=code_for_status(exc.status_code),
        message=str(exc.detail),
        trace_id=request.headers.get("x-trace-id"),
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", [])),
            "issue": err.get("msg", "invalid value"),
        }
        for err in exc.errors()
    ]
    return error_response(
        status_code=422,
        code="UNPROCESSABLE_ENTITY",
        message="Validation failed.",
        trace_id=request.headers.get("x-trace-id"),
        details=details,
    )
