"""Main application entry point"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.errors import FinanceError
from app.database import init_db
from app.api.v1 import api_router
from app.logging_setup import configure_logging, get_logger
from app.services import Services, build_services

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    configure_logging()
    logger.info("Starting up...")
    await init_db()
    logger.info("Database initialized")
    yield
    # Shutdown
    logger.info("Shutting down...")


async def finance_error_handler(request: Request, exc: FinanceError) -> JSONResponse:
    """Translate service errors into HTTP responses"""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


def create_app(services: Services | None = None) -> FastAPI:
    """Create the FastAPI application around a service container."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal Finance Tracking Application",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.services = services or build_services()
    app.add_exception_handler(FinanceError, finance_error_handler)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok"}

    return app


app = create_app()
