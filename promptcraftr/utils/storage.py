import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional


MESSAGES_KEY = "pea_messages_v1"
DRAFT_KEY = "pea_draft_v1"
STEP_KEY = "pea_step_v1"


class MemoryStore:
    """Dict-backed key-value store. Nothing survives the process."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def clear(self) -> None:
        self.data.clear()


class JsonFileStore:
    """
    Key-value store persisted as one JSON object file.

    Values are opaque strings (already-serialized blobs). The whole file is
    rewritten on every ``set``: the new contents go to a temporary file in
    the same directory, which then replaces the old file, so a failed write
    leaves the previous contents in place.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        try:
            if not self.path.exists():
                return {}
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
        except Exception:
            return {}

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(data, file, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)
