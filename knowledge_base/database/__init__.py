"""
Database Module

This module contains database repositories and operations.
"""

from .data_store import DataStore

__all__ = [
    "DataStore",
]
