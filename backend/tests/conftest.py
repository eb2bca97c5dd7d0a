import pytest
from fastapi.testclient import TestClient

from bikehub.config import Settings
from bikehub.main import create_app
from bikehub.repository import build_repository


@pytest.fixture
def settings(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>Bike Hub</h1>")
    return Settings(
        listing_store="memory",
        database_url=f"sqlite:///{tmp_path / 'bikes.db'}",
        upload_dir=str(tmp_path / "uploads"),
        public_dir=str(public),
        mpesa_consumer_key="key",
        mpesa_consumer_secret="secret",
        mpesa_short_code="174379",
        mpesa_passkey="passkey",
        mpesa_callback_url="https://example.com/api/callback",
    )


@pytest.fixture(params=["memory", "sql"])
def store_settings(request, settings):
    return settings.model_copy(update={"listing_store": request.param})


@pytest.fixture
def repo(store_settings):
    return build_repository(store_settings)


@pytest.fixture
def app(store_settings):
    return create_app(store_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def memory_client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def bike_data():
    return {"name": "Trek 100", "price": 500, "desc": "road bike", "image": "image-1-2.jpg"}
