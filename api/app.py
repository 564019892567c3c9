"""
Module 07 - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, pool
from api.errors import APIError, api_error_handler, generic_error_handler, pool_error_handler
from core.config.runtime import RuntimeConfig
from core.schemas.errors import PoolException


# Configure logging: respects SHIELDED_POOL_LOG_LEVEL
_config = RuntimeConfig.from_env()

logging.basicConfig(
    level=_config.logging.resolved_level(),
    format=_config.logging.format,
)


def create_app(config: RuntimeConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or _config

    app = FastAPI(
        title="Shielded Pool API",
        description="""
HTTP API for a fixed-denomination shielded pool.

## Endpoints

- **POST /pool/deposit** - Insert a commitment as the next Merkle leaf
- **POST /pool/withdraw** - Withdraw with a Groth16 proof of membership
- **GET /pool/root** - Current Merkle root
- **GET /pool/roots** - Retained root history
- **GET /pool/nullifiers/{hash}** - Whether a nullifier hash is spent
- **GET /pool/path/{index}** - Merkle path for a leaf
- **GET /health** - Health check

Field elements are 0x-prefixed 32-byte big-endian hex strings.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(PoolException, pool_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(pool.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=_config.api.host, port=_config.api.port)
