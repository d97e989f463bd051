"""FastAPI application entrypoint. No business logic; only wiring, middleware and error envelopes."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import router as api_router
from app.core.config import settings
from app.core.errors import ApiError
from app.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="MB Bank API",
    version="0.1.0",
    docs_url="/api-docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "UNKNOWN"


def _log_error(
    request: Request,
    status_code: int,
    kind: str,
    message: str,
    exc: Exception | None = None,
) -> None:
    """Operational errors at info; unexpected ones (exc given) at error with traceback."""
    line = "%s %s - %s %s: %s (IP: %s)"
    args = (request.method, request.url.path, status_code, kind, message, _client_ip(request))
    if exc is not None:
        logger.error(line, *args, exc_info=exc)
    else:
        logger.info(line, *args)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    _log_error(
        request,
        exc.status_code,
        exc.kind,
        exc.message,
        exc=None if exc.is_operational else exc,
    )
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    _log_error(request, exc.status_code, "HTTPException", message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    _log_error(request, 400, "InvalidArgument", message)
    return _envelope(400, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_error(request, 500, type(exc).__name__, str(exc), exc=exc)
    return _envelope(500, "Internal server error")


app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, object]:
    """Root route; lists the API areas and how to create the first admin."""
    prefix = settings.API_PREFIX
    return {
        "message": "MB Bank API",
        "endpoints": {
            "documentation": "/api-docs",
            "accounts": f"{prefix}/accounts",
            "mbbank": f"{prefix}/mbbank",
            "users": f"{prefix}/users",
            "admin": f"{prefix}/admin",
        },
        "admin_setup": {
            "url": f"{prefix}/admin/setup",
            "method": "POST",
            "description": "Create the first admin account (only while no admin exists)",
        },
    }
