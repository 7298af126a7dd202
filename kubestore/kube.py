"""Helpers for talking to the Kubernetes API.

Holds the not-found classification shared by the remote backends and the
thin wiring used to build an API client from the pod's service account.
"""
from __future__ import annotations
import logging
from pathlib import Path

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_NAMESPACE = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")

MERGE_PATCH = "application/merge-patch+json"


def is_resource_missing(exc: BaseException) -> bool:
    """Return True if `exc` means the targeted resource does not exist."""
    return isinstance(exc, ApiException) and exc.status == 404


def is_resource_conflict(exc: BaseException) -> bool:
    """Return True if `exc` means the resource already exists."""
    return isinstance(exc, ApiException) and exc.status == 409


def in_cluster_namespace(path: str | Path = SERVICE_ACCOUNT_NAMESPACE) -> str:
    """Read the namespace associated with the pod's service account token."""
    return Path(path).read_text(encoding="utf-8").strip()


def build_api_client(kubeconfig: str | None = None, context: str | None = None) -> client.ApiClient:
    """Build an ApiClient from a kubeconfig file, or from the in-cluster service account."""
    if kubeconfig or context:
        logger.debug("Loading kubeconfig %s (context=%s)", kubeconfig or "<default>", context)
        return config.new_client_from_config(config_file=kubeconfig, context=context)
    configuration = client.Configuration()
    config.load_incluster_config(client_configuration=configuration)
    return client.ApiClient(configuration=configuration)
