"""Store configuration and backend selection.

A store is described by a small YAML document, for example::

    backend: configmap
    name: my-app-state
    namespace: default
    log_level: INFO

`create_store` turns such a configuration into a concrete `Store`.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from kubernetes import client
from pydantic import BaseModel, model_validator

from .annotation import AnnotationStore
from .base import Store
from .configmap import ConfigMapStore
from .file_backend import FileStore
from .kube import build_api_client, in_cluster_namespace
from .secret import SecretStore

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY = "./data/kubestore"

Backend = Literal["configmap", "secret", "annotation", "file"]


class StoreConfig(BaseModel):
    backend: Backend = "file"
    name: Optional[str] = None
    namespace: Optional[str] = None
    directory: Optional[str] = DEFAULT_DIRECTORY
    # annotation backend: the host resource's group/version/plural name
    group: str = ""
    version: str = "v1"
    resource: Optional[str] = None
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    log_level: str = "WARNING"

    @model_validator(mode="after")
    def _check_backend_fields(self) -> "StoreConfig":
        if self.backend == "file":
            if not self.directory:
                raise ValueError("the file backend requires 'directory'")
            return self
        if not self.name:
            raise ValueError(f"the {self.backend} backend requires 'name'")
        if self.backend == "annotation" and not self.resource:
            raise ValueError("the annotation backend requires 'resource'")
        return self


def load_config(path: str | Path) -> StoreConfig:
    """Load a StoreConfig from a YAML file. An empty file yields the defaults."""
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return StoreConfig.model_validate(raw)


def create_store(config: StoreConfig, api_client: client.ApiClient | None = None) -> Store:
    """Instantiate the backend described by `config`."""
    if config.backend == "file":
        logger.debug("Using FileStore in %s", config.directory)
        return FileStore(config.directory)

    api_client = api_client or build_api_client(config.kubeconfig, config.context)
    namespace = config.namespace or in_cluster_namespace()
    logger.debug("Using %s backend for %s/%s", config.backend, namespace, config.name)
    if config.backend == "configmap":
        return ConfigMapStore.from_cluster(config.name, namespace, api_client)
    if config.backend == "secret":
        return SecretStore.from_cluster(config.name, namespace, api_client)
    return AnnotationStore.from_cluster(
        config.group, config.version, config.resource, config.name, namespace, api_client
    )
