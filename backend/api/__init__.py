"""
VeilMail Auth API package.

Provides the FastAPI application for the auth service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
