"""Key/value storage on top of Kubernetes objects, or a local directory."""

from .annotation import ANNOTATION_PREFIX, AnnotationStore
from .base import Store
from .config import StoreConfig, create_store, load_config
from .configmap import ConfigMapStore
from .errors import DecodeError, InvalidKeyError, KeyNotFoundError, StoreError
from .file_backend import FileStore
from .secret import SecretStore
from .serializer import JSONSerializer, Serializer

__all__ = [
    "ANNOTATION_PREFIX",
    "AnnotationStore",
    "ConfigMapStore",
    "DecodeError",
    "FileStore",
    "InvalidKeyError",
    "JSONSerializer",
    "KeyNotFoundError",
    "SecretStore",
    "Serializer",
    "Store",
    "StoreConfig",
    "StoreError",
    "create_store",
    "load_config",
]
