"""
File Routes

API endpoints for indexed file chunks.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List

from knowledge_base.api.dependencies import get_data_store
from knowledge_base.database.data_store import DataStore
from knowledge_base.schemas.chunk import (
    ChunkDeleteResponse,
    ChunkInsertRequest,
    ChunkInsertResponse,
    ChunkRead,
)

router = APIRouter()


@router.post("/chunks", response_model=ChunkInsertResponse, status_code=status.HTTP_201_CREATED)
def insert_chunks(request: ChunkInsertRequest, store: DataStore = Depends(get_data_store)):
    return ChunkInsertResponse(inserted=store.insert_chunks(request.chunks))


@router.get("/chunks", response_model=List[ChunkRead])
def get_chunks(
    file_path: List[str] = Query(..., description="File path, may be repeated"),
    store: DataStore = Depends(get_data_store)
):
    return store.get_chunks_by_file_paths(file_path)


@router.delete("/chunks", response_model=ChunkDeleteResponse)
def delete_chunks(
    file_path: str = Query(..., min_length=1),
    store: DataStore = Depends(get_data_store)
):
    """Remove all chunks of a file; deleting an unknown path is not an error"""
    deleted = store.delete_chunks_by_file_path(file_path)
    return ChunkDeleteResponse(file_path=file_path, deleted=deleted)
