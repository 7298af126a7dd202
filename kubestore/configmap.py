"""Store backed by a ConfigMap."""
from __future__ import annotations
from typing import Any

from kubernetes import client

from .kube import MERGE_PATCH
from .resource import ResourceDataStore


class ConfigMapStore(ResourceDataStore):
    """Keys map to entries of the ConfigMap's ``data``.

    The store assumes exclusive ownership of the ConfigMap: it is created on
    demand by `set` and deleted by `delete` once it holds no entries.
    """

    kind = "ConfigMap"

    def _read(self) -> Any:
        return self.api.read_namespaced_config_map(self.name, self.namespace)

    def _patch(self, body: dict) -> Any:
        return self.api.patch_namespaced_config_map(
            self.name, self.namespace, body, _content_type=MERGE_PATCH
        )

    def _create(self) -> None:
        self.api.create_namespaced_config_map(
            self.namespace, client.V1ConfigMap(metadata=client.V1ObjectMeta(name=self.name))
        )

    def _remove(self) -> None:
        self.api.delete_namespaced_config_map(self.name, self.namespace)
