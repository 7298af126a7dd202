from typing import Any, Protocol
import json

from .errors import DecodeError


class Serializer(Protocol):
    """Serialize/deserialize Python values for backends that store bytes/text.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    """

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


class JSONSerializer:
    """Serializer using compact JSON text encoded as UTF-8.

    Caller must ensure values are JSON-serializable; `dump` raises
    `TypeError` otherwise. Malformed stored data raises `DecodeError`.
    """

    def dump(self, value: Any) -> bytes:
        return json.dumps(value, separators=(",", ":")).encode("utf-8")

    def load(self, data: bytes | str) -> Any:
        try:
            if isinstance(data, (bytes, bytearray)):
                data = data.decode("utf-8")
            return json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"stored value is not valid JSON: {exc}") from exc
