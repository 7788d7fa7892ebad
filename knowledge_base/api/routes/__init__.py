"""
API Routes Module

This module contains all API route handlers organized by domain.
"""

from . import auth
from . import history
from . import files

__all__ = [
    "auth",
    "history",
    "files",
]
