"""
VCard Backend - FastAPI Application
Main entry point for the virtual card prototype backend.
Serves one JSON record per username from a file or remote table store.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from app.api.deps.record_deps import get_record_service
from app.api.dto.user_dto import HealthCheckResponseDTO
from app.api.services.record_service import RecordService, build_record_service
from app.core.config import settings
from app.core.exceptions import VCardException, vcard_exception_handler
from app.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Selects the storage backend once for the process lifetime.
    """
    # Startup
    setup_logging()
    app.state.record_service = build_record_service(settings)
    logger.info(f"Record service ready (backend={app.state.record_service.backend_name})")
    yield
    # Shutdown
    await app.state.record_service.close()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Virtual card prototype backend - per-user record store with file or remote table persistence",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    logger.info(f"CORS configured with origins: {settings.ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.ENVIRONMENT == "production":
        logger.info(
            f"TrustedHost middleware enabled with hosts: {settings.ALLOWED_HOSTS}"
        )
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=settings.ALLOWED_HOSTS,
        )
    else:
        logger.info("TrustedHost middleware disabled (development mode)")

    app.add_exception_handler(VCardException, vcard_exception_handler)

    from app.api.routers import ledger_router, user_router

    app.include_router(user_router.router, tags=["User Records"])
    app.include_router(ledger_router.router, tags=["Ledger"])

    @app.get("/")
    async def root():
        """Root endpoint for health check."""
        return {
            "message": f"{settings.APP_NAME} API",
            "version": settings.APP_VERSION,
            "status": "healthy",
        }

    @app.get("/health", response_model=HealthCheckResponseDTO)
    async def health_check(records: RecordService = Depends(get_record_service)):
        """Health check endpoint reporting the storage backend in use."""
        return HealthCheckResponseDTO(
            status="healthy",
            environment=settings.ENVIRONMENT,
            backend=records.backend_name,
        )

    return app


# Create the FastAPI app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
