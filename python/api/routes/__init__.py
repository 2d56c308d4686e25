"""
API Routes Package

Contains all route modules for the statement import API.
"""

from .imports import router as imports_router

__all__ = [
    "imports_router",
]
