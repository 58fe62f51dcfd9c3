"""Product scraper -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from product_scraper.api.v1.router import api_v1_router
from product_scraper.config import settings
from product_scraper.scrapers.factory import build_strategy_factory

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting product scraper...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Configuration faults (bad profile table, missing Gemini key) stop startup here
    app.state.strategy_factory = build_strategy_factory(settings)

    yield

    logger.info("Product scraper stopped")


app = FastAPI(
    title="Product Scraper API",
    description="Headless-browser product page scraper",
    version="0.1.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer malformed bodies with the scrape envelope instead of FastAPI's 422."""
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid request body."},
    )


# Register API v1 router; also served at the root for existing POST /scrape callers
app.include_router(api_v1_router, prefix="/api/v1")
app.include_router(api_v1_router)


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness probe."""
    return "Scraping service running."


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
