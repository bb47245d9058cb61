# app/routers/__init__.py

from app.routers import health
from app.routers import imports

__all__ = ["health", "imports"]
