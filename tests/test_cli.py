"""Tests for the Typer CLI."""

import httpx
from typer.testing import CliRunner

import core.services.capture_pipeline as pipeline
from adapters.http_client import build_async_client
from cli.main import app
from conftest import json_body

runner = CliRunner()


def _fake_api(monkeypatch, locations, *, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if status != 200:
            return httpx.Response(status, json={"error": "Service unavailable"})
        if request.url.path.endswith("/locations"):
            return httpx.Response(200, json=[loc.model_dump() for loc in locations])
        body = json_body(request)
        return httpx.Response(200, json={"id": f"cap-{body['location']}", "image": "AAAA"})

    def fake_builder(config, **kwargs):
        return build_async_client(config, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(pipeline, "build_async_client", fake_builder)
    monkeypatch.setenv("GS_USERNAME", "user")
    monkeypatch.setenv("GS_PASSWORD", "secret")


def test_locations_command_filters_country(monkeypatch, tmp_path, locations):
    _fake_api(monkeypatch, locations)

    result = runner.invoke(app, ["--no-banner", "--image-dir", str(tmp_path), "locations", "--country", "lv"])

    assert result.exit_code == 0, result.output
    assert "lv-rix-riga" in result.output
    assert "us-ny-nwy" not in result.output


def test_multi_command_writes_captures(monkeypatch, tmp_path, locations):
    _fake_api(monkeypatch, locations)

    result = runner.invoke(app, ["--no-banner", "--image-dir", str(tmp_path), "multi", "https://t.example", "-c", "de"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "cap-de-be-ber.png").is_file()
    assert (tmp_path / "cap-de-be-ber.json").is_file()
    assert "Captured 1 locations" in result.output


def test_missing_credentials_exit_code(tmp_path):
    result = runner.invoke(app, ["--no-banner", "--image-dir", str(tmp_path), "single", "https://t.example"])

    assert result.exit_code == 1
    assert "GS_USERNAME" in result.output


def test_invalid_setting_exits_cleanly(monkeypatch, tmp_path, locations):
    _fake_api(monkeypatch, locations)
    monkeypatch.setenv("GS_API_LIMIT", "9")

    result = runner.invoke(app, ["--no-banner", "--image-dir", str(tmp_path), "single", "https://t.example"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "GS_API_LIMIT" in result.output


def test_doctor_run_ok(monkeypatch, tmp_path, locations):
    _fake_api(monkeypatch, locations)
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "FAIL" not in result.output
    assert "5 locations available" in result.output
    assert (tmp_path / "out").is_dir()


def test_doctor_run_fails_without_credentials(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "Credentials" in result.output
    assert "FAIL" in result.output
    assert "doctor setup" in result.output


def test_doctor_run_fails_on_connectivity(monkeypatch, tmp_path, locations):
    _fake_api(monkeypatch, locations, status=503)
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "Service unavailable" in result.output


def test_doctor_run_reports_invalid_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GS_HTTP_TIMEOUT_SECONDS", "0")

    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "Settings" in result.output
    assert "FAIL" in result.output


def test_doctor_setup_writes_user_env(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    result = runner.invoke(app, ["doctor", "setup"], input="alice\ns3cret\n\n")

    assert result.exit_code == 0, result.output
    env_file = tmp_path / "geoscreenshot" / ".env"
    lines = env_file.read_text(encoding="utf-8").splitlines()
    assert "GS_USERNAME=alice" in lines
    assert "GS_PASSWORD=s3cret" in lines
    assert "GS_API_BASE=https://www.geoscreenshot.com" in lines
