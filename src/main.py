"""FastAPI application entrypoint."""

import asyncio
import logging
import random
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.health import router as health_router
from src.api.inventory import router as inventory_router
from src.api.notifications import router as notifications_router
from src.api.outdoor import router as outdoor_router
from src.api.pet import router as pet_router
from src.api.saves import router as saves_router
from src.api.synthesis import router as synthesis_router
from src.config import settings
from src.core.catalog import load_default_catalogs
from src.core.logging import setup_logging
from src.core.scheduler import AsyncioScheduler
from src.db.database import SessionLocal, engine as db_engine
from src.db.models import Base
from src.services.game_service import PetGameService
from src.services.save_service import SaveRepository, SaveService

setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)
logger = logging.getLogger(__name__)


async def _decay_loop(game: PetGameService, interval: float) -> None:
    """주기 감소 틱"""
    while True:
        await asyncio.sleep(interval)
        game.tick_decay()


async def _autosave_loop(saves: SaveService, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        saves.auto_save()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)

    logger.info("Loading catalogs...")
    catalogs = load_default_catalogs()

    # 게임 상태 초기화
    rng = random.Random(settings.RANDOM_SEED)
    game_service = PetGameService(
        catalogs=catalogs,
        scheduler=AsyncioScheduler(),
        rng=rng,
    )
    save_service = SaveService(
        game_service,
        SaveRepository(SessionLocal),
        slot_count=settings.SAVE_SLOT_COUNT,
    )
    if save_service.load_last_save():
        logger.info("Auto save restored.")
    else:
        logger.info("Started a new game.")

    app.state.game_service = game_service
    app.state.save_service = save_service

    tasks = [
        asyncio.create_task(
            _decay_loop(game_service, settings.DECAY_INTERVAL_SECONDS)
        ),
        asyncio.create_task(
            _autosave_loop(save_service, settings.AUTOSAVE_INTERVAL_SECONDS)
        ),
    ]

    yield

    # 종료 시 정리
    logger.info("Shutting down...")
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    save_service.auto_save()
    game_service.reset()


app = FastAPI(title="Crystal Pet", lifespan=lifespan)

app.include_router(health_router)
app.include_router(pet_router)
app.include_router(inventory_router)
app.include_router(outdoor_router)
app.include_router(synthesis_router)
app.include_router(saves_router)
app.include_router(notifications_router)
