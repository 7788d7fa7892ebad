"""
Chat Schemas

Pydantic models for chat history requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Union
from datetime import datetime


class Message(BaseModel):
    """Single entry of a chat's message history"""
    role: Literal["system", "user", "assistant", "tool", "data"]
    content: Union[str, List[Dict[str, Any]]] = Field(..., description="Text or a list of content parts")

    class Config:
        extra = "allow"  # Keep ids, tool invocations and other client fields


class ChatSave(BaseModel):
    """Request schema for creating or updating a chat"""
    author: str = Field(..., min_length=1, description="Email of the chat owner")
    messages: List[Message]

    class Config:
        json_schema_extra = {
            "example": {
                "author": "a@example.com",
                "messages": [{"role": "user", "content": "hi"}],
            }
        }


class ChatRead(BaseModel):
    """Response schema for a stored chat; messages are returned as stored"""
    id: str
    author: str
    messages: List[Dict[str, Any]]
    created_at: datetime

    class Config:
        from_attributes = True
