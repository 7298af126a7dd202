"""In-memory stand-ins for the Kubernetes API surfaces used by the stores.

The fakes apply JSON merge patch semantics and raise real `ApiException`
objects so the stores' not-found handling is exercised as against a cluster.
"""
import base64
import copy
from typing import Any, Callable

from kubernetes import client
from kubernetes.client.exceptions import ApiException


def api_error(status: int, reason: str = "") -> ApiException:
    return ApiException(status=status, reason=reason)


def merge_patch(target: Any, patch: Any) -> Any:
    """Apply an RFC 7386 merge patch to `target` and return the result."""
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    result = dict(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result.get(key), value)
    return result


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class FakeCoreV1Api:
    """Just the ConfigMap and Secret calls of `client.CoreV1Api`."""

    def __init__(self):
        self.config_maps: dict[tuple[str, str], dict] = {}
        self.secrets: dict[tuple[str, str], dict] = {}
        self.calls: list[str] = []
        self.content_types: list[str] = []
        # method name -> exception raised instead of running the call
        self.fail: dict[str, Exception] = {}

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        if method in self.fail:
            raise self.fail[method]

    # -- ConfigMaps ------------------------------------------------------

    def _config_map(self, name, namespace):
        data = self.config_maps[(namespace, name)]
        return client.V1ConfigMap(
            metadata=client.V1ObjectMeta(name=name, namespace=namespace),
            data=dict(data) or None,
        )

    def read_namespaced_config_map(self, name, namespace, **kwargs):
        self._enter("read_namespaced_config_map")
        if (namespace, name) not in self.config_maps:
            raise api_error(404, "Not Found")
        return self._config_map(name, namespace)

    def patch_namespaced_config_map(self, name, namespace, body, **kwargs):
        self._enter("patch_namespaced_config_map")
        self.content_types.append(kwargs.get("_content_type"))
        if (namespace, name) not in self.config_maps:
            raise api_error(404, "Not Found")
        current = self.config_maps[(namespace, name)]
        self.config_maps[(namespace, name)] = merge_patch(current, body.get("data", {}))
        return self._config_map(name, namespace)

    def create_namespaced_config_map(self, namespace, body, **kwargs):
        self._enter("create_namespaced_config_map")
        name = body.metadata.name
        if (namespace, name) in self.config_maps:
            raise api_error(409, "AlreadyExists")
        self.config_maps[(namespace, name)] = dict(body.data or {})
        return self._config_map(name, namespace)

    def delete_namespaced_config_map(self, name, namespace, **kwargs):
        self._enter("delete_namespaced_config_map")
        if self.config_maps.pop((namespace, name), None) is None:
            raise api_error(404, "Not Found")

    # -- Secrets ---------------------------------------------------------

    def _secret(self, name, namespace):
        data = self.secrets[(namespace, name)]
        return client.V1Secret(
            metadata=client.V1ObjectMeta(name=name, namespace=namespace),
            data=dict(data) or None,
        )

    def read_namespaced_secret(self, name, namespace, **kwargs):
        self._enter("read_namespaced_secret")
        if (namespace, name) not in self.secrets:
            raise api_error(404, "Not Found")
        return self._secret(name, namespace)

    def patch_namespaced_secret(self, name, namespace, body, **kwargs):
        self._enter("patch_namespaced_secret")
        self.content_types.append(kwargs.get("_content_type"))
        if (namespace, name) not in self.secrets:
            raise api_error(404, "Not Found")
        data = merge_patch(self.secrets[(namespace, name)], body.get("data", {}))
        # stringData is write-only: the API server folds it into data.
        for key, value in (body.get("stringData") or {}).items():
            data[key] = b64(value)
        self.secrets[(namespace, name)] = data
        return self._secret(name, namespace)

    def create_namespaced_secret(self, namespace, body, **kwargs):
        self._enter("create_namespaced_secret")
        name = body.metadata.name
        if (namespace, name) in self.secrets:
            raise api_error(409, "AlreadyExists")
        self.secrets[(namespace, name)] = dict(body.data or {})
        return self._secret(name, namespace)

    def delete_namespaced_secret(self, name, namespace, **kwargs):
        self._enter("delete_namespaced_secret")
        if self.secrets.pop((namespace, name), None) is None:
            raise api_error(404, "Not Found")


class FakeInstance:
    def __init__(self, obj: dict):
        self._obj = obj

    def to_dict(self) -> dict:
        return copy.deepcopy(self._obj)


class FakeDynamicResource:
    """A `kubernetes.dynamic` resource holding objects as plain dicts."""

    def __init__(self, kind: str = "Deployment"):
        self.kind = kind
        self.objects: dict[tuple[Any, str], dict] = {}
        self.content_types: list[str] = []
        self.fail: dict[str, Exception] = {}

    def add(self, name: str, namespace: str = "default", annotations: dict | None = None) -> None:
        self.objects[(namespace, name)] = {
            "kind": self.kind,
            "metadata": {"name": name, "namespace": namespace, "annotations": dict(annotations or {})},
        }

    def annotations(self, name: str, namespace: str = "default") -> dict:
        return self.objects[(namespace, name)]["metadata"].get("annotations") or {}

    def get(self, name=None, namespace=None, **kwargs):
        if "get" in self.fail:
            raise self.fail["get"]
        if (namespace, name) not in self.objects:
            raise api_error(404, "Not Found")
        return FakeInstance(self.objects[(namespace, name)])

    def patch(self, body=None, name=None, namespace=None, **kwargs):
        if "patch" in self.fail:
            raise self.fail["patch"]
        self.content_types.append(kwargs.get("content_type"))
        if (namespace, name) not in self.objects:
            raise api_error(404, "Not Found")
        self.objects[(namespace, name)] = merge_patch(self.objects[(namespace, name)], body)
        return FakeInstance(self.objects[(namespace, name)])


def wrap(method: Callable, before: Callable[[], None]) -> Callable:
    """Return `method` with `before` run ahead of it, to simulate a concurrent writer."""
    def wrapped(*args, **kwargs):
        before()
        return method(*args, **kwargs)
    return wrapped
