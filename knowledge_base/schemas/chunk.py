"""
Chunk Schemas

Pydantic models for indexed document chunks.
"""

from pydantic import BaseModel, Field
from typing import List


class ChunkCreate(BaseModel):
    """A chunk of file content and its embedding"""
    id: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    content: str
    embedding: List[float]


class ChunkRead(ChunkCreate):
    class Config:
        from_attributes = True


class ChunkInsertRequest(BaseModel):
    chunks: List[ChunkCreate]


class ChunkInsertResponse(BaseModel):
    inserted: int


class ChunkDeleteResponse(BaseModel):
    file_path: str
    deleted: int
