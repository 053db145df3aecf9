import os
from pathlib import Path
from types import SimpleNamespace

from dotenv import load_dotenv
from rich.console import Console

from promptcraftr.utils.storage import JsonFileStore

load_dotenv()

console = Console()

TRUTHY = ("1", "true", "yes", "on", "debug")


def is_debug() -> bool:
    return str(os.getenv("PROMPTCRAFTR_DEBUG", "")).lower() in TRUTHY


def _debug(msg: str):
    if is_debug():
        try:
            console.print(f"[magenta][debug][/magenta] {msg}")
        except Exception:
            pass


def load_app_config() -> SimpleNamespace:
    """
    Load application settings from the environment (and ``.env``).

    Returns:
        SimpleNamespace: data_dir (Path), session (str), server_name (str),
        server_port (int) and debug (bool).
    """
    default_config = {
        "data_dir": "~/.promptcraftr",
        "session": "default",
        "server_name": "0.0.0.0",
        "server_port": "7860",
    }

    for key in default_config:
        value = os.getenv(f"PROMPTCRAFTR_{key.upper()}")
        if value:
            default_config[key] = value

    try:
        port = int(default_config["server_port"])
    except ValueError:
        console.print(
            f"[yellow]Invalid PROMPTCRAFTR_SERVER_PORT '{default_config['server_port']}', using 7860.[/yellow]"
        )
        port = 7860

    return SimpleNamespace(
        data_dir=Path(default_config["data_dir"]).expanduser(),
        session=default_config["session"],
        server_name=default_config["server_name"],
        server_port=port,
        debug=is_debug(),
    )


def session_store_path(config: SimpleNamespace) -> Path:
    """Return the store file for the configured session."""
    return Path(config.data_dir) / f"{config.session}.json"


def open_session_store(config: SimpleNamespace | None = None) -> JsonFileStore:
    config = config or load_app_config()
    path = session_store_path(config)
    _debug(f"session store: {path}")
    return JsonFileStore(path)
