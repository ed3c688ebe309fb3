"""Key/value persistence for published artifacts."""

from __future__ import annotations

import logging
import os
import threading
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Tuple

from .exceptions import ConfigurationError, ObjectNotFoundError, ObjectStoreError


logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


class ObjectStore(ABC):
    """Abstract object store addressed by slash-separated keys."""

    @abstractmethod
    def head(self, key: str) -> bool:
        """Return True when an object exists under ``key``."""
        pass

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Write ``body`` under ``key``."""
        pass

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Read the object under ``key``; raises ObjectNotFoundError when absent."""
        pass

    @abstractmethod
    def list(self, prefix: str) -> List[str]:
        """Return the sorted keys starting with ``prefix``."""
        pass


class LocalObjectStore(ObjectStore):
    """Object store backed by a directory tree; each key maps to one file."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                f"Store directory is not usable: {self.base_dir}"
            ) from exc
        if not self.base_dir.is_dir():
            raise ConfigurationError(f"Store path is not a directory: {self.base_dir}")
        self._root = self.base_dir.resolve()

    def head(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def put(self, key: str, body: bytes, content_type: str) -> None:
        path = self._path_for(key)
        # Written beside the key and renamed so a failed write never leaves a partial object
        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}{TEMP_SUFFIX}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(body)
            os.replace(temp_path, path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise ObjectStoreError(f"Failed to write {key}: {exc}") from exc
        logger.debug("Stored %s (%s, %d bytes)", key, content_type, len(body))

    def get(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise ObjectNotFoundError(key)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ObjectStoreError(f"Failed to read {key}: {exc}") from exc

    def list(self, prefix: str) -> List[str]:
        keys = []
        for path in self._root.rglob("*"):
            if not path.is_file() or _is_temp_file(path):
                continue
            key = path.relative_to(self._root).as_posix()
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)

    def _path_for(self, key: str) -> Path:
        if not key or key.startswith("/"):
            raise ObjectStoreError(f"Invalid object key: {key!r}")
        path = (self._root / key).resolve()
        if self._root not in path.parents:
            raise ObjectStoreError(f"Object key escapes the store: {key!r}")
        return path


def _is_temp_file(path: Path) -> bool:
    return path.name.startswith(".") and path.name.endswith(TEMP_SUFFIX)


class InMemoryObjectStore(ObjectStore):
    """Thread-safe in-process store, used by tests and dry runs."""

    def __init__(self) -> None:
        self._objects: Dict[str, Tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def head(self, key: str) -> bool:
        with self._lock:
            return key in self._objects

    def put(self, key: str, body: bytes, content_type: str) -> None:
        with self._lock:
            self._objects[key] = (bytes(body), content_type)

    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._objects[key][0]
            except KeyError:
                raise ObjectNotFoundError(key) from None

    def content_type(self, key: str) -> str:
        with self._lock:
            try:
                return self._objects[key][1]
            except KeyError:
                raise ObjectNotFoundError(key) from None

    def list(self, prefix: str) -> List[str]:
        with self._lock:
            return sorted(key for key in self._objects if key.startswith(prefix))
