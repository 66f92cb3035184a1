"""
FastAPI main application.
Entry point for the LifeDesk API.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from lifedesk.core.config import get_settings
from lifedesk.db.session import init_db
from lifedesk.api import routes_voice
from lifedesk.core.logging import setup_logging

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    logger.info("Starting LifeDesk API...")
    init_db()
    logger.info("Database initialized.")
    yield
    logger.info("Shutting down LifeDesk API...")


app = FastAPI(
    title="LifeDesk API",
    description="Voice and text commands for schedule, money, workouts, food, sleep and goals",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes_voice.router, prefix="/api", tags=["voice"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "message": "LifeDesk API is running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Detailed health check."""
    settings = get_settings()
    return {
        "status": "healthy",
        "llm_provider": settings.llm_provider,
        "llm_model": settings.llm_model,
        "food_lookup_enabled": settings.food_lookup_enabled,
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "lifedesk.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
