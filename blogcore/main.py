import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogcore.config import settings
from blogcore.database import engine
from blogcore.exceptions import ServiceError, Unauthorized
from blogcore.logging_config import setup_logging
from blogcore.middleware import TimingMiddleware
from blogcore.routers import auth, posts, users
from blogcore.schemas import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info("%s %s starting (env=%s)", settings.APP_NAME, settings.VERSION, settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Blog API",
    description="Users, authentication and posts with role-based authorization",
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if settings.ENABLE_DOCS else None,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        status_code=status_code,
        message=message,
        code=code,
        timestamp=datetime.now(timezone.utc),
        path=f"{request.method} {request.url.path}",
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a service-layer error as ``ErrorResponse`` with its HTTP status."""
    path = f"{request.method} {request.url.path}"
    if exc.status_code >= 500:
        logger.error("%s: %s", path, exc.message, exc_info=exc)
    else:
        logger.warning("%s: %s", path, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return _error_response(request, exc.status_code, exc.code, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed path, query or body input in the same envelope."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning("%s %s: %s", request.method, request.url.path, message)
    return _error_response(request, 422, "UNPROCESSABLE_ENTITY", message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback and hide the details from the client."""
    logger.error(
        "%s %s: unhandled %s", request.method, request.url.path, type(exc).__name__, exc_info=exc
    )
    return _error_response(request, 500, "INTERNAL_SERVER_ERROR", "Internal server error")


# Routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(posts.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": settings.VERSION}
