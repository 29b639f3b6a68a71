from pathlib import Path

import pytest

from weightlog.config import load_settings


def test_defaults(tmp_path):
    s = load_settings({"WEIGHTLOG_DATA_DIR": str(tmp_path)})
    assert s.db_path == str(tmp_path.resolve() / "state.db")
    assert s.users_path == tmp_path.resolve() / "users.yml"
    assert s.secret_key is None
    assert s.cookie_name == "token"
    assert s.average_window == 7
    assert s.cookie_secure is False
    assert s.port == 8989


def test_overrides(tmp_path):
    s = load_settings(
        {
            "WEIGHTLOG_DB_PATH": ":memory:",
            "WEIGHTLOG_USERS_PATH": str(tmp_path / "u.yml"),
            "WEIGHTLOG_SECRET_KEY": "abc",
            "WEIGHTLOG_SESSION_MAX_AGE": "60",
            "WEIGHTLOG_COOKIE_SECURE": "yes",
            "WEIGHTLOG_ACCOUNT_USER": " alice ",
            "WEIGHTLOG_ACCOUNT_PASSWORD_HASH": "$argon2id$...",
            "WEIGHTLOG_LOG_LEVEL": "debug",
        }
    )
    assert s.db_path == ":memory:"
    assert s.users_path == Path(tmp_path / "u.yml").resolve()
    assert s.secret_key == "abc"
    assert s.session_max_age == 60
    assert s.cookie_secure is True
    assert s.account_user == "alice"
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"WEIGHTLOG_WORKERS": "0"},
        {"WEIGHTLOG_AVERAGE_WINDOW": "0"},
        {"WEIGHTLOG_PORT": "http"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_settings(env)
