# main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
from loguru import logger

from knowledge_base.core.config import settings
from knowledge_base.core.database import create_tables, dispose_engine
from knowledge_base.core.errors import register_exception_handlers
from knowledge_base.core.logging import setup_logging
from knowledge_base.database.data_store import DataStore
from knowledge_base.api.routes import auth, history, files

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings)
    logger.info("--- APP STARTUP SEQUENCE INITIATED ---")

    # Raises ConfigurationError when POSTGRES_URL is missing
    data_store = DataStore.from_settings(settings)

    logger.debug("Creating database tables via Base.metadata.create_all...")
    try:
        create_tables(data_store.engine)
    except Exception as e:
        logger.error(f"Failed to create database tables during startup: {e}")
        dispose_engine()
        raise

    app.state.data_store = data_store
    logger.info("--- APP STARTUP SEQUENCE COMPLETED ---")
    yield

    # Shutdown
    logger.info("--- APP SHUTDOWN SEQUENCE INITIATED ---")
    dispose_engine()
    logger.info("--- APP SHUTDOWN SEQUENCE COMPLETED ---")

app = FastAPI(
    title=settings.app_name,
    description="Users, chat history and document chunks for the knowledge base chat",
    version="1.0.0",
    lifespan=lifespan
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(history.router, prefix="/api/history", tags=["History"])
app.include_router(files.router, prefix="/api/files", tags=["Files"])

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
