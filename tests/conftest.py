import pytest
from fastapi.testclient import TestClient

from generator_service.config import Settings
from generator_service.main import create_app

ORDERS_PROMPT = "I want POST /orders and GET /orders/{id}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_path=str(tmp_path / "data.db"),
        keys_file=str(tmp_path / "keys.json"),
        public_dir=str(tmp_path / "public"),
        admin_key=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def generated(client):
    r = client.post("/generate", json={"prompt": ORDERS_PROMPT})
    assert r.status_code == 200
    return r.json()


@pytest.fixture
def api_key(generated):
    return generated["apiKey"]
