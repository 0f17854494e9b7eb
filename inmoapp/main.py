import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load env from project .env (skipped under pytest)
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from inmoapp.core.config import settings, validate_config, cors_origins
from inmoapp.core.database import create_all_tables
from inmoapp.core.errors import install_error_handlers
from inmoapp.core.logging import LOGGER_NAME, configure_logging
from inmoapp.core.middleware.context import RequestContextMiddleware
from inmoapp.api import health, properties, subscription

configure_logging(settings.ENV)
validate_config(strict=settings.CONFIG_STRICT)

logger = logging.getLogger(LOGGER_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting InmoApp backend", extra={"env": settings.ENV})
    if settings.ENV.lower() == "development" and settings.DATABASE_URL:
        # Dev convenience; deployed schemas are managed outside the app
        create_all_tables()
    try:
        yield
    finally:
        logger.info("Stopping InmoApp backend")


app = FastAPI(title="InmoApp - Backend", lifespan=lifespan)

app.add_middleware(RequestContextMiddleware)
install_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(subscription.router, prefix="/api")
app.include_router(properties.router, prefix="/api")
app.include_router(health.router)
