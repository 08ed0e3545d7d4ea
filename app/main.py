import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from tortoise.contrib.fastapi import RegisterTortoise

from app import settings
from app.errors import register_exception_handlers
from app.routers.booking import router as booking_router
from app.routers.catalog import attractions_router, hotels_router, restaurants_router
from app.routers.favorites import router as favorites_router

ROUTERS = (
    booking_router,
    hotels_router,
    restaurants_router,
    attractions_router,
    favorites_router,
)

TORTOISE_MODULES = {"models": ["app.models"]}


def setup_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with RegisterTortoise(
        app,
        db_url=settings.db_url,
        modules=TORTOISE_MODULES,
        generate_schemas=True,
    ):
        logger.info("Database ready at {}", settings.db_url.split("@")[-1])
        yield


def include_routers(app: FastAPI) -> None:
    for router in ROUTERS:
        app.include_router(router)


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Travel Bookings", lifespan=lifespan)
    include_routers(app)
    register_exception_handlers(app)
    return app


app = create_app()
