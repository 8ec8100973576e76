"""Tests for layered config resolution."""

import base64

import pytest

from core.config import AppSettings, ClientOptions, resolve_config, write_user_env_vars
from core.errors import ConfigError


def _decode(authorization: str) -> str:
    scheme, token = authorization.split(" ", 1)
    assert scheme == "Basic"
    return base64.b64decode(token).decode("utf-8")


def test_missing_credentials_fail_fast(tmp_path):
    with pytest.raises(ConfigError):
        resolve_config(ClientOptions(image_dir=tmp_path / "out"), settings=AppSettings())


def test_missing_password_fails(tmp_path):
    options = ClientOptions(username="alice", image_dir=tmp_path / "out")
    with pytest.raises(ConfigError):
        resolve_config(options, settings=AppSettings())


def test_options_credentials_and_defaults(tmp_path):
    image_dir = tmp_path / "shots"
    config = resolve_config(
        ClientOptions(username="alice", password="pw", image_dir=image_dir),
        settings=AppSettings(),
    )

    assert _decode(config.authorization) == "alice:pw"
    assert config.target_url == "http://weather.yahoo.com"
    assert config.base_url == "https://www.geoscreenshot.com"
    assert config.api_limit == 3
    assert image_dir.is_dir()


def test_environment_wins_over_options(monkeypatch, tmp_path):
    monkeypatch.setenv("GS_USERNAME", "env-user")
    monkeypatch.setenv("GS_PASSWORD", "env-pw")
    monkeypatch.setenv("GS_API_BASE", "https://staging.example/")

    config = resolve_config(
        ClientOptions(username="alice", password="pw", url="https://target.example", image_dir=tmp_path),
        settings=AppSettings(),
    )

    assert _decode(config.authorization) == "env-user:env-pw"
    assert config.base_url == "https://staging.example"
    assert config.target_url == "https://target.example"


def test_config_is_frozen(tmp_path):
    config = resolve_config(
        ClientOptions(username="a", password="b", image_dir=tmp_path),
        settings=AppSettings(),
    )
    with pytest.raises(Exception):
        config.target_url = "http://other.example"  # type: ignore[misc]


def test_authorization_not_in_repr(tmp_path):
    config = resolve_config(
        ClientOptions(username="a", password="b", image_dir=tmp_path),
        settings=AppSettings(),
    )
    assert config.authorization not in repr(config)


def test_write_user_env_vars_merges(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    first = write_user_env_vars({"GS_USERNAME": "alice", "GS_PASSWORD": "pw"})
    second = write_user_env_vars({"GS_PASSWORD": "new-pw"})

    assert first == second == tmp_path / "geoscreenshot" / ".env"
    lines = second.read_text(encoding="utf-8").splitlines()
    assert "GS_USERNAME=alice" in lines
    assert "GS_PASSWORD=new-pw" in lines
    assert "GS_PASSWORD=pw" not in lines


@pytest.mark.parametrize(
    "key, value",
    [
        ("GS_API_LIMIT", "9"),
        ("GS_API_LIMIT", "three"),
        ("GS_API_BASE", "http:/"),
        ("GS_HTTP_TIMEOUT_SECONDS", "0"),
    ],
)
def test_invalid_settings_raise_config_error(monkeypatch, tmp_path, key, value):
    monkeypatch.setenv("GS_USERNAME", "alice")
    monkeypatch.setenv("GS_PASSWORD", "pw")
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError, match=key):
        resolve_config(ClientOptions(image_dir=tmp_path))


def test_write_user_env_vars_rejects_unknown_keys(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
        write_user_env_vars({"OPENAI_API_KEY": "x"})
    assert not (tmp_path / "geoscreenshot" / ".env").exists()


def test_user_env_file_is_private(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    env_path = write_user_env_vars({"GS_USERNAME": "alice", "GS_PASSWORD": None})

    assert env_path.stat().st_mode & 0o777 == 0o600
    assert "GS_PASSWORD" not in env_path.read_text(encoding="utf-8")
