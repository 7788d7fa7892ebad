from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from knowledge_base.api.dependencies import get_data_store
from knowledge_base.core.security import verify_password
from knowledge_base.database.data_store import DataStore
from knowledge_base.schemas.user import UserCreate, UserLogin, UserProfile

router = APIRouter()

@router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, store: DataStore = Depends(get_data_store)):
    """Create an account; a duplicate email is answered with 409"""
    return store.create_user(user_in.email, user_in.password)

@router.post("/login", response_model=UserProfile)
def login(credentials: UserLogin, store: DataStore = Depends(get_data_store)):
    """Check email and password against the stored hash"""
    users = store.get_user(credentials.email)

    if not users or not verify_password(credentials.password, users[0].password):
        logger.info(f"Failed login for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    return users[0]
