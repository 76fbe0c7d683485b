"""
Main HTTP server for the inventory ledger API.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import LedgerConfig, get_config
from ..inventory import InventoryError, ItemNotFound, LedgerService, ReentrantCall
from ..inventory.service import build_service
from .inventory_api import router as inventory_router

logger = logging.getLogger(__name__)


def error_status(error: InventoryError) -> int:
    """HTTP status code for a ledger error."""
    if isinstance(error, ItemNotFound):
        return 404
    if isinstance(error, ReentrantCall):
        return 409
    return 422


def create_app(
    service: Optional[LedgerService] = None,
    config: Optional[LedgerConfig] = None,
) -> FastAPI:
    """
    Build the FastAPI application.
    
    Args:
        service: Ledger service to serve (defaults to build_service(config))
        config: Configuration (defaults to get_config())
        
    Returns:
        Configured FastAPI app
    """
    config = config or get_config()

    app = FastAPI(
        title="Inventory Ledger API",
        description="Per-owner inventory ledger",
        version=__version__,
    )
    app.state.service = service or build_service(config)
    app.state.caller_header = config.caller_header

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
        return JSONResponse(
            status_code=error_status(exc),
            content={"error": exc.code, "detail": str(exc)},
        )

    app.include_router(inventory_router)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Inventory Ledger API",
            "version": __version__,
            "endpoints": {
                "inventory": "/inventory",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def main():
    """Main entry point for HTTP server."""
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("=" * 60)
    logger.info("Inventory Ledger - API Server")
    logger.info("=" * 60)
    logger.info(f"Host: {config.api_host}")
    logger.info(f"Port: {config.api_port}")
    logger.info(f"Database: {config.db_path or 'in-memory'}")
    logger.info("=" * 60)
    logger.info(f"API Documentation: http://{config.api_host}:{config.api_port}/docs")
    logger.info("=" * 60)

    uvicorn.run(create_app(config=config), host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
