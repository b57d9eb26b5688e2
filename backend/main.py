"""
Wine Cellar API

FastAPI backend for cataloguing wines, enriching them with AI-generated
metadata and pairing dishes with bottles from the cellar.

Usage:
    uvicorn main:app --reload
"""

# Load environment variables from .env file FIRST
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Config

# Configure logging from environment
logging.basicConfig(
    level=getattr(logging, Config.log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
logger.info(f"Starting with LOG_LEVEL={Config.log_level()}, USE_MOCKS={Config.use_mocks()}")

from app.routes import wines_router, sommelier_router, session_router
from app.services.cellar import get_cellar_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    service = get_cellar_service()
    # Startup: hydrate the key cache when a session token is preconfigured
    if service.session.access_token:
        await service.api_keys.load()
    logger.info("Service ready to handle requests")
    yield
    # Shutdown: let background key persistence finish
    await service.aclose()


app = FastAPI(
    title="Wine Cellar API",
    description="Catalogue wines, enrich them with AI and pair them with dishes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for the web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Local Vite dev
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(session_router, tags=["session"])
app.include_router(wines_router, tags=["wines"])
app.include_router(sommelier_router, tags=["sommelier"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Wine Cellar API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
