from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, TypeVar

import structlog
from pydantic import TypeAdapter

logger = structlog.get_logger(__name__)

T = TypeVar("T")

CART_KEY = "cart"
ORDERS_KEY = "orders"


class StoreReadError(Exception):
    pass


class KeyValueStore(ABC):
    """Durable byte storage addressed by key."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]: ...

    @abstractmethod
    def set(self, key: str, data: bytes) -> None: ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self.data: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, data: bytes) -> None:
        self.data[key] = bytes(data)


class FileKeyValueStore(KeyValueStore):
    """
    One JSON file per key under `root`.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so a reader never sees a half-written value.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not key or ".." in key or "/" in key or "\\" in key:
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile("wb", dir=self.root, prefix=f".{key}.", delete=False) as tmp:
            try:
                tmp.write(data)
                tmp.close()
                os.replace(tmp.name, path)
            except Exception:
                tmp.close()
                os.remove(tmp.name)
                raise


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


class Store:
    """
    Typed collections over a KeyValueStore.

    Every save overwrites the whole value under its key. Unreadable or
    corrupt values load as the caller's default.
    """

    def __init__(self, backend: Optional[KeyValueStore] = None) -> None:
        self.backend = backend if backend is not None else MemoryKeyValueStore()
        self.logs: List[str] = []

    def log(self, message: str, **fields: Any) -> None:
        self.logs.append(message)
        logger.info(message, **fields)

    def load(self, key: str, tp: Any, default: T) -> T:
        try:
            raw = self._read(key)
            if raw is None:
                return default
            return self._decode(key, raw, tp)
        except StoreReadError as e:
            logger.warning("store read failed, using default", key=key, error=str(e))
            return default

    def save(self, key: str, tp: Any, value: Any) -> None:
        data = _adapter(tp).dump_json(value)
        try:
            self.backend.set(key, data)
        except Exception as e:
            logger.error("store write failed", key=key, error=str(e))
            raise

    def _read(self, key: str) -> Optional[bytes]:
        try:
            return self.backend.get(key)
        except OSError as e:
            raise StoreReadError(f"Cannot read {key!r}: {e}") from e

    def _decode(self, key: str, raw: bytes, tp: Any) -> Any:
        # pydantic.ValidationError and UnicodeDecodeError are both ValueErrors
        try:
            return _adapter(tp).validate_json(raw)
        except ValueError as e:
            raise StoreReadError(f"Corrupt value under {key!r}: {e}") from e
