"""
Main FastAPI application entry point.
Initializes the app, middleware, and routes.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from vocabpro.config import settings
from vocabpro.core.dependencies import get_catalog, get_store

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Load the state and catalog on startup; write pending state on shutdown.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    store = app.dependency_overrides.get(get_store, get_store)()
    store.load()
    app.dependency_overrides.get(get_catalog, get_catalog)()

    logger.info("Application started successfully")
    yield

    logger.info("Shutting down application...")
    store.close()
    logger.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Spaced-repetition vocabulary practice: scheduling, progress and goals",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint"""
    return JSONResponse(content={
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "environment": settings.ENVIRONMENT
    })


@app.get("/health")
async def health_check():
    """
    Detailed health check endpoint.
    Reports storage mode and catalog size.
    """
    store = app.dependency_overrides.get(get_store, get_store)()
    catalog = app.dependency_overrides.get(get_catalog, get_catalog)()
    info = store.get_storage_info()

    return JSONResponse(content={
        "status": "healthy" if not info.memory_only else "degraded",
        "services": {
            "api": "up",
            "storage": "memory-only" if info.memory_only else "up",
            "catalog": catalog.counts(),
        }
    })


# Include routers
from vocabpro.api.v1.endpoints import bookmarks, data, goals, progress, quiz

app.include_router(quiz.router, prefix=f"{settings.API_V1_PREFIX}/quiz", tags=["quiz"])
app.include_router(quiz.flashcards_router, prefix=f"{settings.API_V1_PREFIX}/flashcards", tags=["flashcards"])
app.include_router(progress.router, prefix=f"{settings.API_V1_PREFIX}/progress", tags=["progress"])
app.include_router(goals.router, prefix=f"{settings.API_V1_PREFIX}/goals", tags=["goals"])
app.include_router(bookmarks.router, prefix=f"{settings.API_V1_PREFIX}/bookmarks", tags=["bookmarks"])
app.include_router(data.router, prefix=f"{settings.API_V1_PREFIX}/data", tags=["data"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "vocabpro.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
