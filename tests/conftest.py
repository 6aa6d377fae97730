import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.settings import Settings


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "t.sqlite",
        jwt_secret="test-secret",
    )


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture()
def signup(client):
    def _signup(email="ana@example.com", name="Ana", password="s3cret", **extra):
        resp = client.post(
            "/api/auth/signup",
            json={"name": name, "email": email, "password": password, **extra},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]

    return _signup
