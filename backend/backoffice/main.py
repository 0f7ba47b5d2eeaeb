"""
Main FastAPI application entry point for the contractor back office.
"""

from datetime import datetime, timezone
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from backoffice.core.config import settings
from backoffice.core.exceptions import BackOfficeError, InternalError
from backoffice.core.i18n import get_locale, translate
from backoffice.core.logging_config import setup_logging
from backoffice.api import auth, contractors, documents
from backoffice.api.routes import webhooks

# Initialize logging
setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Contractor Back Office API",
    description="Contractors, users and contract documents rendered by an n8n workflow",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
logger.info(f"Environment: {settings.ENVIRONMENT}")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==== Error handling: every failure is {"error": message} ====
@app.exception_handler(BackOfficeError)
async def backoffice_error_handler(request: Request, exc: BackOfficeError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": translate(exc.message, get_locale(request))},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": translate(str(exc.detail), get_locale(request))},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": translate("invalid_request", get_locale(request))},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return await backoffice_error_handler(request, InternalError("internal_error"))


# Include routers
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(contractors.router, prefix=f"{settings.API_PREFIX}/contractors", tags=["contractors"])
app.include_router(webhooks.router, prefix=f"{settings.API_PREFIX}/documents/webhook", tags=["webhooks"])
app.include_router(documents.router, prefix=f"{settings.API_PREFIX}/documents", tags=["documents"])


@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


# Front end bundle; must stay after the API routes
if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backoffice.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
