import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import get_settings
from .deps import get_event_store, get_holidays, get_shop_config
from .routers import availability, reservations
from .utils.request_id import request_id_middleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Configuration problems abort startup instead of surfacing per request.
    settings = get_settings()
    configure_logging(settings.log_level)
    config = get_shop_config()
    get_holidays()
    get_event_store()
    logger.info("Booking service ready for %s (calendar backend: %s)", config.name, settings.calendar_backend)
    yield


app = FastAPI(title="Restaurant Booking API", lifespan=lifespan)
app.middleware("http")(request_id_middleware)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(availability.router)
app.include_router(reservations.router)
