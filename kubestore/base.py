"""Store interface definitions.

Defines the `Store` abstract class implemented by every kubestore backend.
A store is bound to exactly one backing container at construction time and
keeps no state besides that binding: every call re-reads the container.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any

from .errors import InvalidKeyError
from .serializer import JSONSerializer, Serializer


class Store(ABC):
    """Abstract key/value store.

    Keys are strings, values are anything the serializer accepts (JSON by
    default). Backends may be called from several threads but offer no
    atomicity beyond a single write of a single key.
    """

    def __init__(self, serializer: Serializer | None = None) -> None:
        self.serializer = serializer or JSONSerializer()

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the decoded value stored under `key`.

        Raises `KeyNotFoundError` if either the key or the whole backing
        container is absent. The two cases are deliberately indistinguishable.
        """

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""

    @abstractmethod
    def list_keys(self) -> list[str]:
        """Return the sorted keys currently present (empty if no container)."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key`. Deleting an absent key is not an error."""

    def validate_key(self, key: str) -> str:
        if not isinstance(key, str) or not key:
            raise InvalidKeyError(f"invalid key {key!r}: must be a non-empty string")
        return key
