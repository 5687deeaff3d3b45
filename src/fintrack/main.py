"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.middleware.error_handler import error_handler_middleware, setup_error_handlers
from .api.routes import extractions_router, health_router
from .config import get_settings
from .core.pipeline import ExtractionPipeline
from .extractors import OcrApiClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    if settings.debug:
        logging.getLogger("fintrack").setLevel(logging.DEBUG)

    app = FastAPI(
        title="Fintrack Extraction API",
        description=(
            "Turns uploaded bills, invoices and card statements into normalized "
            "expense and card-bill records using a remote OCR service."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(error_handler_middleware)

    # Setup error handlers
    setup_error_handlers(app)

    # Include routers
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(extractions_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Fintrack Extraction API",
            "version": __version__,
            "docs": "/docs",
        }

    @app.on_event("startup")
    async def startup_event():
        logger.info("Fintrack API starting up...")
        logger.info(f"Debug mode: {settings.debug}")
        if not settings.ocr_api_configured:
            logger.warning(f"OCR API base URL is not configured: {settings.ocr_api_base_url!r}")
        else:
            logger.info(f"OCR API: {settings.ocr_extract_url}")
        app.state.pipeline = ExtractionPipeline(client=OcrApiClient(settings), settings=settings)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Fintrack API shutting down...")
        pipeline = getattr(app.state, "pipeline", None)
        if pipeline is not None:
            await pipeline.client.aclose()

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "fintrack.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
