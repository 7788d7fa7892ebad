"""
Schemas Module

This module contains all Pydantic schemas for request/response validation.
"""

# User schemas
from .user import UserCreate, UserLogin, UserProfile

# Chat schemas
from .chat import Message, ChatSave, ChatRead

# Chunk schemas
from .chunk import (
    ChunkCreate,
    ChunkRead,
    ChunkInsertRequest,
    ChunkInsertResponse,
    ChunkDeleteResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserProfile",

    # Chat
    "Message",
    "ChatSave",
    "ChatRead",

    # Chunk
    "ChunkCreate",
    "ChunkRead",
    "ChunkInsertRequest",
    "ChunkInsertResponse",
    "ChunkDeleteResponse",
]
