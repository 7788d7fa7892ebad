"""
API Module

This module contains API dependencies and route handlers.
"""

from .dependencies import get_data_store

__all__ = [
    "get_data_store",
]
