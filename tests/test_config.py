from pathlib import Path

from promptcraftr.utils import core
from promptcraftr.utils.storage import JsonFileStore

ENV_KEYS = (
    "PROMPTCRAFTR_DATA_DIR",
    "PROMPTCRAFTR_SESSION",
    "PROMPTCRAFTR_SERVER_NAME",
    "PROMPTCRAFTR_SERVER_PORT",
    "PROMPTCRAFTR_DEBUG",
)


def _clear_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch):
    _clear_env(monkeypatch)
    config = core.load_app_config()
    assert config.data_dir == Path("~/.promptcraftr").expanduser()
    assert config.session == "default"
    assert config.server_name == "0.0.0.0"
    assert config.server_port == 7860
    assert config.debug is False


def test_environment_overrides(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    monkeypatch.setenv("PROMPTCRAFTR_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PROMPTCRAFTR_SESSION", "work")
    monkeypatch.setenv("PROMPTCRAFTR_SERVER_PORT", "8080")
    monkeypatch.setenv("PROMPTCRAFTR_DEBUG", "Yes")
    config = core.load_app_config()
    assert config.data_dir == tmp_path
    assert config.server_port == 8080
    assert config.debug is True
    assert core.session_store_path(config) == tmp_path / "work.json"


def test_invalid_port_falls_back(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("PROMPTCRAFTR_SERVER_PORT", "http")
    assert core.load_app_config().server_port == 7860


def test_open_session_store(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    monkeypatch.setenv("PROMPTCRAFTR_DATA_DIR", str(tmp_path))
    store = core.open_session_store()
    assert isinstance(store, JsonFileStore)
    assert store.path == tmp_path / "default.json"


def test_debug_output_only_when_enabled(monkeypatch, capsys):
    _clear_env(monkeypatch)
    core._debug("hidden")
    assert "hidden" not in capsys.readouterr().out
