"""Tests for configuration loading."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from filestream import config as config_module
from filestream.config import AppConfig, get_config, load_config, reset_config


@pytest.fixture(autouse=True)
def _clear_cache():
    reset_config()
    yield
    reset_config()


def test_defaults_when_files_missing(tmp_path):
    cfg = load_config(settings_path=tmp_path / "filestream.settings.yaml")

    assert cfg.server.port == 3000
    assert cfg.messaging.provider == "telegram"
    assert cfg.storage.chat is None
    assert cfg.secrets.telegram.bot_token is None
    assert cfg.base_url == "http://localhost:3000"


def test_settings_and_secrets_are_merged(tmp_path):
    settings_file = tmp_path / "filestream.settings.yaml"
    settings_file.write_text(
        "server:\n"
        "  port: 8080\n"
        "  public_url: https://files.example.com/\n"
        "storage:\n"
        "  chat: -1001234567890\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    (tmp_path / "filestream.secrets.yaml").write_text(
        "telegram:\n"
        "  api_id: 12345\n"
        "  api_hash: abcdef\n"
        "  bot_token: '123:XYZ'\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)

    assert cfg.server.port == 8080
    assert cfg.storage.chat == -1001234567890
    assert cfg.logging.level == "debug"
    assert cfg.secrets.telegram.api_id == 12345
    assert cfg.secrets.telegram.bot_token == "123:XYZ"
    assert cfg.base_url == "https://files.example.com"


def test_storage_chat_may_be_a_username(tmp_path):
    settings_file = tmp_path / "filestream.settings.yaml"
    settings_file.write_text("storage:\n  chat: '@my_storage'\n", encoding="utf-8")

    assert load_config(settings_path=settings_file).storage.chat == "@my_storage"


def test_relative_session_file_resolves_next_to_settings(tmp_path):
    settings_file = tmp_path / "filestream.settings.yaml"
    settings_file.write_text("messaging:\n  session_file: state/bot.session\n", encoding="utf-8")

    cfg = load_config(settings_path=settings_file)

    assert Path(cfg.messaging.session_file) == tmp_path / "state" / "bot.session"


def test_absolute_session_file_unchanged(tmp_path):
    session = tmp_path / "elsewhere" / "session.txt"
    settings_file = tmp_path / "filestream.settings.yaml"
    settings_file.write_text(f"messaging:\n  session_file: {session}\n", encoding="utf-8")

    assert Path(load_config(settings_path=settings_file).messaging.session_file) == session


def test_unknown_provider_rejected(tmp_path):
    settings_file = tmp_path / "filestream.settings.yaml"
    settings_file.write_text("messaging:\n  provider: carrier-pigeon\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(settings_path=settings_file)


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        AppConfig(logging={"level": "chatty"})


def test_get_config_is_cached(tmp_path, monkeypatch):
    settings_file = tmp_path / "filestream.settings.yaml"
    settings_file.write_text("server:\n  port: 9000\n", encoding="utf-8")
    monkeypatch.setattr(config_module, "SETTINGS_FILE", settings_file)

    first = get_config()
    settings_file.write_text("server:\n  port: 9001\n", encoding="utf-8")

    assert get_config() is first
    assert first.server.port == 9000

    reset_config()
    assert get_config().server.port == 9001
