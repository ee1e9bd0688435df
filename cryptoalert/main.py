"""
Crypto Alert Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cryptoalert.core.config import settings
from cryptoalert.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Default timeframe: {settings.default_timeframe.value}")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Crypto Alert System API

    ## Architecture
    - **Indicator Engine**: RSI, MACD, EMA, Bollinger, ATR, ADX (pure Python/NumPy)
    - **Level Detection**: Support/resistance clusters and Fibonacci retracements
    - **Pattern Recognition**: Candlestick patterns on the latest candles
    - **Alert Engine**: Buy, sell and monitoring alerts with confidence bands

    ## Core Principles
    - Alerts inform, the trader decides
    - Same candles in, same indicators out
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Crypto Alert Backend API",
        "docs": "/docs",
        "health": "/health",
    }
