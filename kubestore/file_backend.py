"""File-backed store.

Stores each key as a file named after the key inside a single directory.
Meant as a fallback, or for running outside of Kubernetes. The directory
is created on demand by `set` and removed by `delete` once it is empty.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any

from .base import Store
from .errors import InvalidKeyError, KeyNotFoundError
from .serializer import Serializer

logger = logging.getLogger(__name__)


class FileStore(Store):
    def __init__(self, directory: str | Path, serializer: Serializer | None = None) -> None:
        super().__init__(serializer)
        self.directory = Path(directory)

    def __repr__(self) -> str:
        return f"FileStore(directory={str(self.directory)!r})"

    def validate_key(self, key: str) -> str:
        super().validate_key(key)
        if key in (".", "..") or "/" in key or os.sep in key or "\0" in key:
            raise InvalidKeyError(f"invalid key {key!r}: must be a plain file name")
        return key

    def _path_for(self, key: str) -> Path:
        return self.directory / self.validate_key(key)

    def get(self, key: str) -> Any:
        path = self._path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise KeyNotFoundError(key) from exc
        return self.serializer.load(data)

    def set(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        data = self.serializer.dump(value)
        self.directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        path.write_bytes(data)

    def list_keys(self) -> list[str]:
        try:
            entries = list(self.directory.iterdir())
        except FileNotFoundError:
            return []
        return sorted(p.name for p in entries if p.is_file())

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        # rmdir refuses non-empty directories, so no emptiness check is needed.
        try:
            self.directory.rmdir()
        except OSError as exc:
            logger.debug("Keeping %s: %s", self.directory, exc)
        else:
            logger.debug("Removed empty directory %s", self.directory)
