from __future__ import annotations

from pathlib import Path

from nicoapi.core.config import AppSettings, _parse_env_lines, get_user_config_dir, write_user_env_vars


def test_defaults():
    settings = AppSettings(_env_file=None)

    assert settings.request_interval_ms == 1000
    assert settings.http_timeout_seconds == 30.0
    assert settings.frontend_id == "23"
    assert settings.request_with == "nv-garage"
    assert settings.timezone == "Asia/Tokyo"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("NICOAPI_REQUEST_INTERVAL_MS", "250")
    monkeypatch.setenv("NICOAPI_COOKIES_PATH", str(tmp_path / "cookies.json"))

    settings = AppSettings(_env_file=None)

    assert settings.request_interval_ms == 250
    assert settings.cookies_path == tmp_path / "cookies.json"


def test_env_file_is_read(tmp_path):
    env = tmp_path / ".env"
    env.write_text("NICOAPI_USER_ID=4242\nNICOAPI_LOG_LEVEL=DEBUG\n", encoding="utf-8")

    settings = AppSettings(_env_file=env)

    assert settings.user_id == "4242"
    assert settings.log_level == "DEBUG"


def test_parse_env_lines_skips_noise():
    text = '# comment\n\nNO_EQUALS\nA=1\nB = "two"\n=orphan\n'

    assert _parse_env_lines(text) == {"A": "1", "B": "two"}


def test_write_user_env_vars_merges(tmp_path):
    env = tmp_path / "conf" / ".env"
    env.parent.mkdir()
    env.write_text("NICOAPI_USER_ID=1\nOTHER=keep\n", encoding="utf-8")

    written = write_user_env_vars({"NICOAPI_USER_ID": "2", "NICOAPI_COOKIES_PATH": "/c.json", "SKIP": None}, env)

    assert written == env
    assert _parse_env_lines(env.read_text(encoding="utf-8")) == {
        "NICOAPI_COOKIES_PATH": "/c.json",
        "NICOAPI_USER_ID": "2",
        "OTHER": "keep",
    }


def test_user_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_user_config_dir() == Path(tmp_path) / "nicoapi"
