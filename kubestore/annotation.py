"""Store backed by the annotations of an existing Kubernetes resource.

Each key ``k`` is stored as the annotation ``kubestore/k``. Annotations
without that prefix are never listed, read or modified. The host resource
is owned by someone else: the store never creates or deletes it.
"""
from __future__ import annotations
import logging
from typing import Any, Mapping

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from kubernetes.dynamic import DynamicClient

from .base import Store
from .errors import InvalidKeyError, KeyNotFoundError
from .kube import MERGE_PATCH, build_api_client, in_cluster_namespace, is_resource_missing
from .serializer import Serializer

logger = logging.getLogger(__name__)

ANNOTATION_PREFIX = "kubestore"


class AnnotationStore(Store):
    """Keys map to prefixed annotations on a named resource of any kind.

    Parameters
    - resource: a dynamic client resource (``DynamicClient.resources.get(...)``).
    - name: name of the host object.
    - namespace: namespace of the host object, None for cluster scoped kinds.
    """

    def __init__(
        self,
        resource: Any,
        name: str,
        namespace: str | None = None,
        serializer: Serializer | None = None,
    ) -> None:
        super().__init__(serializer)
        self.resource = resource
        self.name = name
        self.namespace = namespace

    @classmethod
    def from_cluster(
        cls,
        group: str,
        version: str,
        resource: str,
        name: str,
        namespace: str | None = None,
        api_client: client.ApiClient | None = None,
    ) -> "AnnotationStore":
        """Build a store for ``group/version/resource`` in the pod's namespace."""
        dynamic = DynamicClient(api_client or build_api_client())
        api_version = f"{group}/{version}" if group else version
        res = dynamic.resources.get(api_version=api_version, name=resource)
        return cls(res, name, namespace or in_cluster_namespace())

    def __repr__(self) -> str:
        return f"AnnotationStore(name={self.name!r}, namespace={self.namespace!r})"

    @staticmethod
    def annotation_for(key: str) -> str:
        return f"{ANNOTATION_PREFIX}/{key}"

    def validate_key(self, key: str) -> str:
        super().validate_key(key)
        if "/" in key:
            raise InvalidKeyError(f"invalid key {key!r}: annotation keys must not contain '/'")
        return key

    def _annotations(self) -> Mapping[str, str] | None:
        """Return the host's annotations, or None when the host does not exist."""
        try:
            obj = self.resource.get(name=self.name, namespace=self.namespace)
        except ApiException as exc:
            if is_resource_missing(exc):
                return None
            raise
        metadata = obj.to_dict().get("metadata") or {}
        return metadata.get("annotations") or {}

    def _patch(self, annotations: dict) -> None:
        body = {"metadata": {"annotations": annotations}}
        self.resource.patch(body=body, name=self.name, namespace=self.namespace, content_type=MERGE_PATCH)

    def get(self, key: str) -> Any:
        annotation = self.annotation_for(self.validate_key(key))
        annotations = self._annotations()
        if annotations is None or annotation not in annotations:
            raise KeyNotFoundError(key)
        return self.serializer.load(annotations[annotation])

    def set(self, key: str, value: Any) -> None:
        annotation = self.annotation_for(self.validate_key(key))
        # A missing host propagates; its lifecycle is not ours.
        self._patch({annotation: self.serializer.dump(value).decode("utf-8")})

    def list_keys(self) -> list[str]:
        annotations = self._annotations()
        if annotations is None:
            return []
        prefix = ANNOTATION_PREFIX + "/"
        keys = (a[len(prefix):] for a in annotations if a.startswith(prefix))
        # Names with a further "/" were not written by this store and cannot be addressed.
        return sorted(k for k in keys if k and "/" not in k)

    def delete(self, key: str) -> None:
        annotation = self.annotation_for(self.validate_key(key))
        try:
            self._patch({annotation: None})
        except ApiException as exc:
            if is_resource_missing(exc):
                logger.debug("Host %s not found, nothing to delete for %s", self.name, key)
                return
            raise
