"""Shared configuration store — durable key-value namespaces shared across processes.

Each namespace (an app-group id) is one flat JSON object at
``{root}/{group_id}/defaults.json``. Writes replace the file atomically, so
readers always see a whole snapshot; concurrent writers resolve as
last-write-wins. There is no locking.

Readers never raise. A namespace that cannot be reached (a different sandbox
container, a missing directory, a corrupt file) reads as absent.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULTS_FILENAME = "defaults.json"
CUSTOM_PROMPT_KEY = "customPrompt"
ACCESS_TEST_KEY = "test_key"


class SharedStoreUnavailable(RuntimeError):
    """The namespace could not be written."""


def double_value(data: dict[str, Any], key: str) -> float:
    """Numeric field of a snapshot; missing or non-numeric values read as 0.0."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


class SharedStore:
    def __init__(self, root: str | Path, group_id: str) -> None:
        self.root = Path(root).expanduser()
        self.group_id = group_id

    @property
    def directory(self) -> Path:
        return self.root / self.group_id

    @property
    def path(self) -> Path:
        return self.directory / DEFAULTS_FILENAME

    def __repr__(self) -> str:
        return f"SharedStore(group_id={self.group_id!r}, path={str(self.path)!r})"

    # ── Reads ────────────────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any] | None:
        """Return the whole namespace, ``{}`` if never written, None if unreachable."""
        if not self.directory.is_dir():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Cannot read shared store {self.path}: {e}")
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupt shared store {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Shared store {self.path} is not a JSON object")
            return None
        return data

    def get_string(self, key: str) -> str | None:
        data = self.snapshot()
        if data is None:
            return None
        value = data.get(key)
        return value if isinstance(value, str) else None

    # ── Writes ───────────────────────────────────────────────────────────

    def update(self, values: dict[str, Any]) -> None:
        """Merge ``values`` into the namespace in one atomic replace."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SharedStoreUnavailable(f"Could not access shared storage: {e}") from e

        data = self.snapshot() or {}
        data.update(values)
        self._write(data)

    def set(self, key: str, value: Any) -> None:
        self.update({key: value})

    def remove(self, key: str) -> None:
        data = self.snapshot()
        if not data or key not in data:
            return
        data.pop(key)
        self._write(data)

    def _write(self, data: dict[str, Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".defaults-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise SharedStoreUnavailable(f"Could not write shared storage: {e}") from e

    def verify_access(self) -> bool:
        """Write a probe value and read it back."""
        probe = f"test_{os.getpid()}_{id(self)}"
        try:
            self.set(ACCESS_TEST_KEY, probe)
        except SharedStoreUnavailable as e:
            logger.error(f"Shared store {self.group_id} not writable: {e}")
            return False
        ok = self.get_string(ACCESS_TEST_KEY) == probe
        if ok:
            logger.info(f"Shared store {self.group_id} working correctly")
        else:
            logger.error(f"Shared store {self.group_id} verification failed")
        return ok


class SharedConfigReader:
    """Point reads of the custom instruction. No caching: every call hits the store."""

    def __init__(self, store: SharedStore) -> None:
        self.store = store

    def read_custom_instruction(self) -> str | None:
        value = self.store.get_string(CUSTOM_PROMPT_KEY)
        if value is None or not value.strip():
            return None
        return value


class CustomPromptManager:
    """Authoring-side writer for the custom instruction."""

    def __init__(self, store: SharedStore) -> None:
        self.store = store

    def save_custom_prompt(self, prompt: str) -> None:
        self.store.set(CUSTOM_PROMPT_KEY, prompt)
        logger.info(f"Saved custom prompt ({len(prompt)} chars) to {self.store.group_id}")

    def get_custom_prompt(self) -> str | None:
        return self.store.get_string(CUSTOM_PROMPT_KEY)
