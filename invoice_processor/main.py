"""
Invoice Processor - Backend API
List, import and export invoices over HTTP
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_processor.api import customers, invoices, products, transfer
from invoice_processor.api.deps import get_services
from invoice_processor.bootstrap import Services, build_services
from invoice_processor.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application

    Services are created in the lifespan (one adapter for the process) and
    closed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services = build_services(settings)
        services.setup_schema()
        app.state.services = services
        logger.info(f"{settings.API_TITLE} started ({settings.DATABASE_BACKEND.value} backend)")
        try:
            yield
        finally:
            services.close()
            logger.info("Database connection closed")

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        debug=settings.API_DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    app.include_router(invoices.router, prefix="/api/invoices", tags=["Invoices"])
    app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    app.include_router(transfer.router, prefix="/api", tags=["Import/Export"])

    @app.get("/")
    async def root():
        """Endpoint raíz - Verificación de estado de la API"""
        return {
            "message": settings.API_TITLE,
            "status": "online",
            "version": settings.API_VERSION,
            "description": settings.API_DESCRIPTION
        }

    @app.get("/health")
    async def health(services: Services = Depends(get_services)):
        """Health check endpoint para monitoreo - tests database connectivity"""
        start_time = time.time()

        db_status = "unknown"
        db_error = None

        try:
            services.adapter.count("invoices")
            db_status = "connected"
        except Exception as e:
            db_status = "disconnected"
            db_error = str(e)

        db_latency_ms = round((time.time() - start_time) * 1000, 2)

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": "invoice-processor",
            "version": settings.API_VERSION,
            "database": {
                "backend": settings.DATABASE_BACKEND.value,
                "status": db_status,
                "latency_ms": db_latency_ms,
                "error": db_error
            }
        }

    return app


load_dotenv()
app = create_app()
