"""
Persisted cart quantities with a schema version marker.

Two keys are used in the backing store: the version marker (integer as
string) and a JSON object mapping product id to a positive quantity.
A version mismatch wipes the saved quantities; nothing is migrated.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Mapping, Protocol

from shared.config.logging import get_logger
from shared.utils.exceptions import StorageError

logger = get_logger(__name__)


STORAGE_KEY = "presupuesto-state"
VERSION_KEY = "presupuesto-state-version"
STATE_VERSION = 2


class KeyValueStore(Protocol):
    """String key-value store. Implementations raise ``StorageError``."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store."""

    def __init__(self, items: Mapping[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStore:
    """Store kept as a single JSON object in a file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path}")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def _parse_quantities(raw: str) -> dict[str, int]:
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        return {}

    quantities = {}
    for product_id, qty in parsed.items():
        if isinstance(qty, bool) or not isinstance(qty, (int, float)):
            continue
        if not math.isfinite(qty) or qty <= 0:
            continue
        quantities[str(product_id)] = math.floor(qty)
    return {k: v for k, v in quantities.items() if v > 0}


class CartStorage:
    """
    Load and save cart quantities.

    Failures are logged and swallowed: the cart keeps working in memory.
    """

    def __init__(self, store: KeyValueStore, version: int = STATE_VERSION):
        self.store = store
        self.version = version

    def _ensure_version(self) -> None:
        stored = self.store.get_item(VERSION_KEY)
        if stored == str(self.version):
            return
        logger.info("Cart state version changed, discarding saved quantities",
                    stored_version=stored, version=self.version)
        self.store.remove_item(STORAGE_KEY)
        self.store.set_item(VERSION_KEY, str(self.version))

    def load(self) -> dict[str, int]:
        """Saved positive quantities by product id. ``{}`` on any failure."""
        try:
            self._ensure_version()
            raw = self.store.get_item(STORAGE_KEY)
            if not raw:
                return {}
            return _parse_quantities(raw)
        except (StorageError, ValueError) as e:
            logger.warning("No se pudo leer el presupuesto almacenado", error=str(e))
            return {}

    def save(self, quantities: Mapping[str, int]) -> None:
        snapshot = {product_id: qty for product_id, qty in quantities.items() if qty > 0}
        try:
            self._ensure_version()
            self.store.set_item(STORAGE_KEY, json.dumps(snapshot))
        except StorageError as e:
            logger.warning("No se pudo guardar el presupuesto", error=str(e))
