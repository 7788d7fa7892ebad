from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    # App settings
    app_name: str = "Knowledge Base Chat"
    debug: bool = False
    log_level: str = "INFO"

    # Database - no default, the connection string must come from the environment
    postgres_url: Optional[str] = Field(None, alias="POSTGRES_URL")

    # Database connection settings
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_recycle: int = 3600
    database_connect_timeout: int = 10
    database_sslmode: str = "require"  # require, verify-ca, verify-full

    # Password hashing
    bcrypt_rounds: int = 10

    # Use INSERT ... ON CONFLICT for chat writes where the dialect supports it
    atomic_chat_upsert: bool = True

    class Config:
        env_file = ".env"
        populate_by_name = True  # Allow both field name and alias to work
        case_sensitive = False  # Case-insensitive for environment variables
        extra = "ignore"

settings = Settings()
