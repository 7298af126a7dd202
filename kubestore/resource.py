"""Stores backed by the flat data map of a namespaced Kubernetes object.

ConfigMaps and Secrets share one protocol: every key is one entry of the
object's ``data`` map, writes are JSON merge patches that only name the
touched entry, and the object itself is owned by the store. It is created on
the first write that finds it missing and deleted once a delete leaves its
data map empty.
"""
from __future__ import annotations
import logging
from abc import abstractmethod
from typing import Any, Mapping

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from .base import Store
from .errors import KeyNotFoundError
from .kube import build_api_client, in_cluster_namespace, is_resource_conflict, is_resource_missing
from .serializer import Serializer

logger = logging.getLogger(__name__)


class ResourceDataStore(Store):
    """Shared get/set/list/delete protocol over a named object's data map.

    Subclasses bind the CoreV1Api calls for one kind and may override
    `write_field` (the patch field new values are written through) and
    `_decode_entry` (how a raw data map entry becomes bytes).
    """

    kind = "Resource"
    write_field = "data"
    delete_field = "data"

    def __init__(
        self,
        api: client.CoreV1Api,
        name: str,
        namespace: str,
        serializer: Serializer | None = None,
    ) -> None:
        super().__init__(serializer)
        self.api = api
        self.name = name
        self.namespace = namespace

    @classmethod
    def from_cluster(
        cls,
        name: str,
        namespace: str | None = None,
        api_client: client.ApiClient | None = None,
    ) -> "ResourceDataStore":
        """Build a store using the pod's service account and namespace."""
        api = client.CoreV1Api(api_client or build_api_client())
        return cls(api, name, namespace or in_cluster_namespace())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, namespace={self.namespace!r})"

    # -- kind specific API bindings ---------------------------------------

    @abstractmethod
    def _read(self) -> Any: ...

    @abstractmethod
    def _patch(self, body: dict) -> Any: ...

    @abstractmethod
    def _create(self) -> None: ...

    @abstractmethod
    def _remove(self) -> None: ...

    def _entries(self, obj: Any) -> Mapping[str, str]:
        return obj.data or {}

    def _decode_entry(self, raw: str) -> bytes | str:
        return raw

    # -- Store ------------------------------------------------------------

    def _fetch_entries(self) -> Mapping[str, str] | None:
        """Return the data map, or None when the object does not exist."""
        try:
            obj = self._read()
        except ApiException as exc:
            if is_resource_missing(exc):
                return None
            raise
        return self._entries(obj)

    def get(self, key: str) -> Any:
        self.validate_key(key)
        entries = self._fetch_entries()
        if entries is None or key not in entries:
            raise KeyNotFoundError(key)
        return self.serializer.load(self._decode_entry(entries[key]))

    def set(self, key: str, value: Any) -> None:
        self.validate_key(key)
        body = {self.write_field: {key: self.serializer.dump(value).decode("utf-8")}}
        try:
            self._patch(body)
            return
        except ApiException as exc:
            if not is_resource_missing(exc):
                raise
        # Create the object on demand and retry the patch exactly once.
        logger.debug("%s %s/%s does not exist, creating it", self.kind, self.namespace, self.name)
        self._ensure_created()
        self._patch(body)

    def list_keys(self) -> list[str]:
        entries = self._fetch_entries()
        if entries is None:
            return []
        return sorted(entries)

    def delete(self, key: str) -> None:
        self.validate_key(key)
        # A null value makes the merge patch remove the entry.
        body = {self.delete_field: {key: None}}
        try:
            obj = self._patch(body)
        except ApiException as exc:
            if is_resource_missing(exc):
                return
            raise
        if not self._entries(obj):
            self._discard()

    def _ensure_created(self) -> None:
        try:
            self._create()
        except ApiException as exc:
            # Another writer created it first.
            if not is_resource_conflict(exc):
                raise
            logger.debug("%s %s/%s was created concurrently", self.kind, self.namespace, self.name)

    def _discard(self) -> None:
        """Delete the now-empty object; failures are ignored."""
        try:
            self._remove()
        except Exception as exc:
            logger.debug("Ignoring failure to delete empty %s %s/%s: %s", self.kind, self.namespace, self.name, exc)
        else:
            logger.debug("Deleted empty %s %s/%s", self.kind, self.namespace, self.name)
