"""
FastAPI Backend for Statement Import

Provides REST API endpoints for detecting and importing bank statements.
"""

from .main import app

__all__ = ["app"]
