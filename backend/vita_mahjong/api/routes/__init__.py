"""API routes package.

This package contains all API route handlers for the application.
"""
from . import analyze
from . import games
from . import generate

__all__ = [
    "analyze",
    "games",
    "generate",
]
