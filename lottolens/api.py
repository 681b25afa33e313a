from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from lottolens import __version__
from lottolens.api_analysis_endpoints import StoreHolder, analysis_router
from lottolens.config import get_settings
from lottolens.loader import load_from_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...")

    # Queries arriving before the load completes get 503 from the endpoints
    store = load_from_settings(app.state.settings)
    app.state.store_holder.store = store
    if store is None:
        logger.warning("Starting without draw data; analysis requests will be rejected")

    yield
    logger.info("Application shutdown...")


def create_app(settings=None) -> FastAPI:
    """Build the FastAPI application with its own settings and empty store holder"""
    logger.info("Initializing FastAPI application...")
    app = FastAPI(
        title="LottoLens Digit Pattern API",
        description="Finds historical digit occurrences and ranks follow-on numbers.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or get_settings()
    app.state.store_holder = StoreHolder()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(analysis_router)
    return app


app = create_app()
