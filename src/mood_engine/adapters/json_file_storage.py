"""Durable key/value storage backed by a single JSON file."""

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

from mood_engine.services.store import StateStorage

logger = logging.getLogger(__name__)


@dataclass
class JsonFileStorage(StateStorage):
    """Stores string values in one JSON object on disk.

    The file is re-read on every access so that other processes using the
    same path observe each other's writes.
    """

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the value stored under a key."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        """Delete a key if present."""
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8").strip()
        if not text:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            backup = self.path.with_suffix(f".corrupt-{int(time.time())}.json")
            backup.write_text(text, encoding="utf-8")
            logger.warning(
                "Storage file %s is corrupt; backed up to %s", self.path, backup
            )
            self._save({})
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
        with open(tmp, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, self.path)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)
