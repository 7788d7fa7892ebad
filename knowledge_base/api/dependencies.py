from fastapi import Request

from knowledge_base.database.data_store import DataStore

def get_data_store(request: Request) -> DataStore:
    """Return the DataStore created by the application lifespan"""
    return request.app.state.data_store
