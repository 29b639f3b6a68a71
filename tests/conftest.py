import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from weightlog.app import create_app
from weightlog.auth.passwords import hash_password
from weightlog.auth.users import save_user
from weightlog.config import load_settings

USER = "alice"
SECRET = "correct horse battery staple"


@pytest.fixture(scope="session")
def alice_hash() -> str:
    return hash_password(SECRET)


@pytest.fixture()
def users_file(tmp_path: Path, alice_hash: str) -> Path:
    path = tmp_path / "data" / "users.yml"
    save_user(path, USER, alice_hash)
    return path


@pytest.fixture()
def settings(tmp_path: Path, users_file: Path):
    return load_settings(
        {
            "WEIGHTLOG_DATA_DIR": str(tmp_path / "data"),
            "WEIGHTLOG_USERS_PATH": str(users_file),
            "WEIGHTLOG_SECRET_KEY": "test-secret",
            "WEIGHTLOG_WORKERS": "2",
        }
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def logged_in(client):
    r = client.post("/login", data={"user": USER, "secret": SECRET})
    assert r.status_code == 200
    return client
