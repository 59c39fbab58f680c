"""GET /health 테스트"""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.db.database import get_db


def test_health_ok_with_loaded_game(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "database": "connected",
        "game": "loaded",
    }


def test_health_reports_game_not_loaded(client: TestClient, game) -> None:
    """펫이 없으면 game=not_loaded"""
    game.reset()
    assert client.get("/health").json()["game"] == "not_loaded"


def test_health_database_down(client: TestClient) -> None:
    """세이브 DB 쿼리가 실패해도 200 + disconnected"""
    broken = MagicMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
    client.app.dependency_overrides[get_db] = lambda: broken

    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "error"
    assert data["database"] == "disconnected"
