"""Shared test fixtures."""

import random

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.api.health import router as health_router
from src.api.inventory import router as inventory_router
from src.api.notifications import router as notifications_router
from src.api.outdoor import router as outdoor_router
from src.api.pet import router as pet_router
from src.api.saves import router as saves_router
from src.api.synthesis import router as synthesis_router
from src.core.catalog import CatalogRegistry, load_default_catalogs
from src.core.scheduler import ManualScheduler
from src.db.database import get_db
from src.db.models import Base
from src.services.game_service import PetGameService
from src.services.save_service import SaveRepository, SaveService


@pytest.fixture(scope="session")
def catalogs() -> CatalogRegistry:
    """src/data 카탈로그 (읽기 전용이라 세션 공유)"""
    return load_default_catalogs()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler(start=1_000_000.0)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def game(catalogs, scheduler, rng) -> PetGameService:
    """스타터 펫 + 시작 아이템이 지급된 새 게임"""
    service = PetGameService(catalogs=catalogs, scheduler=scheduler, rng=rng)
    service.new_game()
    return service


@pytest.fixture()
def session_factory():
    """In-memory SQLite session factory shared across connections."""
    db_engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(db_engine)
    factory = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    yield factory
    db_engine.dispose()


@pytest.fixture()
def db_session(session_factory) -> Session:
    """Raw database session for direct DB assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def save_service(game, session_factory) -> SaveService:
    return SaveService(game, SaveRepository(session_factory), slot_count=3)


@pytest.fixture()
def client(game, save_service, session_factory) -> TestClient:
    """FastAPI TestClient wired to in-memory services and SQLite."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(pet_router)
    app.include_router(inventory_router)
    app.include_router(outdoor_router)
    app.include_router(synthesis_router)
    app.include_router(saves_router)
    app.include_router(notifications_router)
    app.state.game_service = game
    app.state.save_service = save_service

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)
