import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import current_affairs, notifications, pyqs, recruitments, study_plans, test_sessions, tutor
from app.core.config import settings
from app.core.logging import setup_logging
from app.exceptions import BaseAppError
from app.services.session_registry import get_session_registry

# logging setup
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AcePrep Odisha Backend API",
    description="Test series, previous year questions and study plans for Odisha competitive exams",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(test_sessions.router, prefix="/api/v1")
app.include_router(pyqs.router, prefix="/api/v1")
app.include_router(study_plans.router, prefix="/api/v1")
app.include_router(current_affairs.router, prefix="/api/v1")
app.include_router(recruitments.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")
app.include_router(tutor.router, prefix="/api/v1")


def create_cors_response(
    status_code: int,
    content: dict,
    request: Request,
) -> JSONResponse:
    """JSONResponse carrying CORS headers"""
    response = JSONResponse(
        status_code=status_code,
        content=content,
    )
    # exception handlers bypass the CORS middleware headers
    origin = request.headers.get("origin")
    if origin and origin in settings.allowed_origins_list:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "*"
    return response


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the non-serializable ctx values"""
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request validation error handler"""
    logger.warning(f"Request validation error: {exc.errors()}, path={request.url.path}")
    return create_cors_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(exc)},
        request=request,
    )


@app.exception_handler(BaseAppError)
async def app_exception_handler(request: Request, exc: BaseAppError):
    """Application error handler"""
    logger.warning(
        f"Application error: {exc.__class__.__name__} - {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
        }
    )
    return create_cors_response(
        status_code=exc.status_code,
        content={"detail": exc.message},
        request=request,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global handler, logs every unhandled exception"""
    logger.error(
        f"Unhandled exception: {exc.__class__.__name__}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
            "query_params": dict(request.query_params),
        }
    )

    # hide details in production
    if settings.environment == "production":
        return create_cors_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
            request=request,
        )
    return create_cors_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": str(exc),
            "type": exc.__class__.__name__,
        },
        request=request,
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Stop all session timers"""
    get_session_registry().clear()


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "AcePrep Odisha Backend API", "version": "0.1.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "gemini": "configured" if settings.gemini_api_key else "disabled",
        "test_sessions": len(get_session_registry()),
    }
