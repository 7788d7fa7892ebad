"""
Models Module

This module contains all SQLAlchemy database models.
"""

from .user import User
from .chat import Chat
from .chunk import Chunk

__all__ = [
    "User",
    "Chat",
    "Chunk",
]
