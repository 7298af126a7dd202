"""Exceptions raised by kubestore backends.

Transport failures (``ApiException`` from the Kubernetes client, ``OSError``
from the filesystem) are not wrapped; they propagate as-is.
"""


class StoreError(Exception):
    """Base exception for kubestore."""

    pass


class KeyNotFoundError(StoreError, KeyError):
    """The requested key is not present in the store.

    Raised both when the backing container is missing and when the container
    exists but has no entry for the key.
    """

    pass


class DecodeError(StoreError, ValueError):
    """A stored value could not be decoded."""

    pass


class InvalidKeyError(StoreError, ValueError):
    """The key cannot be represented by the backend."""

    pass
