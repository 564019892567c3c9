"""API route handlers."""

from api.routes import health, pool

__all__ = ["health", "pool"]
