"""Command line access to a kubestore backend.

Examples::

    kubestore --backend file --directory ./state set greeting '"hello"'
    kubestore --config store.yml list
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, Iterable, Optional

from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError

from .config import StoreConfig, create_store, load_config
from .errors import DecodeError, InvalidKeyError, KeyNotFoundError, StoreError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)

# Options that override values from the configuration file.
_OVERRIDES = ("backend", "name", "namespace", "directory", "log_level")


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kubestore", description="Read and write a kubestore backend")
    p.add_argument("--config", help="YAML file describing the store")
    p.add_argument("--backend", choices=["configmap", "secret", "annotation", "file"])
    p.add_argument("--name", help="ConfigMap, Secret or host resource name")
    p.add_argument("--namespace", help="Kubernetes namespace (default: the pod's namespace)")
    p.add_argument("--directory", help="Directory for the file backend")
    p.add_argument("--log-level", dest="log_level", help="Log level name, e.g. DEBUG")

    sub = p.add_subparsers(dest="command", required=True)
    get = sub.add_parser("get", help="Print the value of KEY as JSON")
    get.add_argument("key")
    set_ = sub.add_parser("set", help="Store VALUE (JSON, or a plain string) under KEY")
    set_.add_argument("key")
    set_.add_argument("value")
    sub.add_parser("list", help="Print all keys, one per line")
    delete = sub.add_parser("delete", help="Remove KEY")
    delete.add_argument("key")
    return p


def parse_value(text: str) -> Any:
    """Parse `text` as JSON; anything that is not valid JSON is kept as a string."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def build_config(args: argparse.Namespace) -> StoreConfig:
    data = load_config(args.config).model_dump() if args.config else {}
    for field in _OVERRIDES:
        value = getattr(args, field, None)
        if value is not None:
            data[field] = value
    return StoreConfig(**data)


def run(args: argparse.Namespace, out=None) -> int:
    out = out or sys.stdout
    config = build_config(args)
    configure_logging(config.log_level)
    store = create_store(config)
    logger.debug("Running %s against %r", args.command, store)

    if args.command == "get":
        out.write(json.dumps(store.get(args.key)) + "\n")
    elif args.command == "set":
        store.set(args.key, parse_value(args.value))
    elif args.command == "list":
        for key in store.list_keys():
            out.write(key + "\n")
    elif args.command == "delete":
        store.delete(args.key)
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = get_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        return run(args)
    except KeyNotFoundError as exc:
        print(f"kubestore: key not found: {exc.args[0]}", file=sys.stderr)
        return 1
    except DecodeError as exc:
        print(f"kubestore: {exc}", file=sys.stderr)
        return 1
    except (InvalidKeyError, ValidationError, ValueError, FileNotFoundError) as exc:
        print(f"kubestore: {exc}", file=sys.stderr)
        return 2
    except (StoreError, ApiException, OSError) as exc:
        print(f"kubestore: {exc}", file=sys.stderr)
        return 1
