"""펫/인벤토리/알림 API 통합 테스트"""

from fastapi.testclient import TestClient


class TestPetApi:
    def test_get_pet(self, client: TestClient) -> None:
        response = client.get("/pet")
        assert response.status_code == 200
        data = response.json()
        assert data["pet_type"] == "cat"
        assert data["is_at_home"] is True

    def test_no_active_pet(self, client: TestClient, game) -> None:
        game.reset()
        response = client.get("/pet")
        assert response.status_code == 404

    def test_feed(self, client: TestClient, game) -> None:
        game.active_pet.hunger = 50
        response = client.post("/pet/feed", json={"item_id": 1})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["hunger_gain"] == 20
        assert game.ledger.count(1) == 2

    def test_feed_rejected_message(self, client: TestClient, game) -> None:
        game.active_pet.hunger = 50
        body = client.post("/pet/feed", json={"item_id": 8}).json()
        assert body["success"] is False
        assert body["message"] == "That item cannot be eaten"
        assert body["data"] == {}

    def test_feed_validation_error(self, client: TestClient) -> None:
        response = client.post("/pet/feed", json={})
        assert response.status_code == 422

    def test_collection(self, client: TestClient, game) -> None:
        game.collection.add_pet("bird")
        data = client.get("/pet/collection").json()
        assert len(data["owned_pets"]) == 2
        assert data["progress"]["owned"] == 2

    def test_set_active(self, client: TestClient, game) -> None:
        bird_id = game.collection.add_pet("bird")
        body = client.post("/pet/active", json={"instance_id": bird_id}).json()
        assert body["success"] is True
        assert body["data"]["active_pet_id"] == bird_id

        body = client.post("/pet/active", json={"instance_id": "nope"}).json()
        assert body["success"] is False
        assert body["message"] == "Pet not found"


class TestInventoryApi:
    def test_get_inventory(self, client: TestClient) -> None:
        data = client.get("/inventory").json()
        assert data["money"] == 100
        assert data["fragments"] == {"cat": 5, "bird": 3}
        assert data["active_buffs"] == []

    def test_use_item(self, client: TestClient) -> None:
        body = client.post("/inventory/use", json={"item_id": 8}).json()
        assert body["success"] is True
        assert body["data"]["active_buffs"][0]["type"] == "hunt_reward_boost"

        body = client.post("/inventory/use", json={"item_id": 8}).json()
        assert body["success"] is False


class TestNotificationsApi:
    def test_list_and_drain(self, client: TestClient, game) -> None:
        game.notifications.warning("first")
        game.notifications.info("second")

        listed = client.get("/notifications").json()
        assert [n["message"] for n in listed] == ["first", "second"]
        assert listed[0]["level"] == "warning"

        drained = client.post("/notifications/drain").json()
        assert len(drained) == 2
        assert client.get("/notifications").json() == []
