import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_root=tmp_path / "volume",
        public_dir=tmp_path / "public",
        max_upload_bytes=1024,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def posts_dir(settings):
    return settings.storage_root / "posts"
