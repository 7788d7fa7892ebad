"""
History Routes

API endpoints for stored chat conversations.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List

from knowledge_base.api.dependencies import get_data_store
from knowledge_base.database.data_store import DataStore
from knowledge_base.schemas.chat import ChatRead, ChatSave

router = APIRouter()


@router.get("", response_model=List[ChatRead])
def list_chats(
    email: str = Query(..., min_length=1, description="Author email"),
    store: DataStore = Depends(get_data_store)
):
    """Get a user's chats, most recent first"""
    return store.get_chats_by_user(email)


@router.get("/{chat_id}", response_model=ChatRead)
def get_chat(chat_id: str, store: DataStore = Depends(get_data_store)):
    chat = store.get_chat_by_id(chat_id)
    if chat is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat not found"
        )
    return chat


@router.put("/{chat_id}", response_model=ChatRead)
def save_chat(
    chat_id: str,
    request: ChatSave,
    store: DataStore = Depends(get_data_store)
):
    """
    Create a chat or replace its messages

    The author only applies when the chat is created; an existing chat keeps
    its original author and creation time.
    """
    return store.create_message(chat_id, request.messages, request.author)
