"""
Core Module

This module contains core infrastructure components like config, database, security, etc.
"""

from .config import settings, Settings
from .database import Base, build_engine, get_engine, dispose_engine, create_tables
from .security import hash_password, verify_password
from .errors import (
    DataStoreError,
    ConfigurationError,
    ConstraintViolation,
    TransportError,
    register_exception_handlers,
)
from .logging import setup_logging

__all__ = [
    # Config
    "settings",
    "Settings",

    # Database
    "Base",
    "build_engine",
    "get_engine",
    "dispose_engine",
    "create_tables",

    # Security
    "hash_password",
    "verify_password",

    # Errors
    "DataStoreError",
    "ConfigurationError",
    "ConstraintViolation",
    "TransportError",
    "register_exception_handlers",

    # Logging
    "setup_logging",
]
