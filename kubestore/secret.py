"""Store backed by a Secret.

Values are written through ``stringData`` and the API server materializes
them into the base64 encoded ``data`` map, which is what reads and deletes
operate on.
"""
from __future__ import annotations
import base64
import binascii
from typing import Any

from kubernetes import client

from .errors import DecodeError
from .kube import MERGE_PATCH
from .resource import ResourceDataStore


class SecretStore(ResourceDataStore):
    """Keys map to entries of the Secret's ``data``.

    Like `ConfigMapStore`, the Secret is created on demand and deleted once
    empty.
    """

    kind = "Secret"
    write_field = "stringData"

    def _read(self) -> Any:
        return self.api.read_namespaced_secret(self.name, self.namespace)

    def _patch(self, body: dict) -> Any:
        return self.api.patch_namespaced_secret(
            self.name, self.namespace, body, _content_type=MERGE_PATCH
        )

    def _create(self) -> None:
        self.api.create_namespaced_secret(
            self.namespace, client.V1Secret(metadata=client.V1ObjectMeta(name=self.name))
        )

    def _remove(self) -> None:
        self.api.delete_namespaced_secret(self.name, self.namespace)

    def _decode_entry(self, raw: str) -> bytes:
        try:
            return base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"secret entry is not valid base64: {exc}") from exc
