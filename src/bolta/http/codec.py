r"""JSON codec for request payloads and typed response decoding."""

from __future__ import annotations

__all__ = ["JsonCodec"]

import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any

from bolta.exceptions import DecodeError, EncodeError

logger: logging.Logger = logging.getLogger(__name__)

_JSON_TYPES = (dict, list, str, int, float, bool)


class JsonCodec:
    """Encode payloads to JSON and decode JSON bodies into typed values.

    Decoding supports:
    - ``object`` or ``Any``: the parsed JSON value
    - ``dict``, ``list``, ``str``, ``int``, ``float``, ``bool``: the parsed
      value, which must have that type
    - dataclasses: built from the JSON object, unknown keys are ignored
    - any class with a ``from_dict`` classmethod

    Encoding supports JSON values and dataclasses, including nested ones.

    Example:
        ```pycon
        >>> from dataclasses import dataclass
        >>> from bolta.http import JsonCodec
        >>> @dataclass
        ... class Customer:
        ...     email: str
        ...     name: str
        ...
        >>> codec = JsonCodec()
        >>> codec.encode(Customer(email="a@b.c", name="Kim"))
        b'{"email": "a@b.c", "name": "Kim"}'
        >>> codec.decode(b'{"email": "a@b.c", "name": "Kim", "extra": 1}', Customer)
        Customer(email='a@b.c', name='Kim')

        ```
    """

    def encode(self, obj: Any) -> bytes:
        """Serialize an object to JSON bytes.

        Args:
            obj: The object to serialize.

        Returns:
            The UTF-8 encoded JSON document.

        Raises:
            EncodeError: If the object cannot be serialized.
        """
        try:
            return json.dumps(obj, default=_to_json_value, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            msg = f"Failed to encode {type(obj).__name__}: {exc}"
            raise EncodeError(msg) from exc

    def decode(self, data: bytes, target_type: Any) -> Any:
        """Deserialize JSON bytes into an instance of ``target_type``.

        Args:
            data: The JSON document.
            target_type: The expected type.

        Returns:
            The decoded value.

        Raises:
            DecodeError: If the document is not valid JSON or does not fit
                the target type.
        """
        try:
            value = json.loads(data)
        except (TypeError, ValueError) as exc:
            msg = f"Failed to parse response: {exc}"
            raise DecodeError(msg, body=data) from exc

        try:
            return self._convert(value, target_type)
        except (TypeError, ValueError, KeyError) as exc:
            msg = f"Failed to parse response as {getattr(target_type, '__name__', target_type)}: {exc}"
            raise DecodeError(msg, body=data) from exc

    def _convert(self, value: Any, target_type: Any) -> Any:
        if target_type is object or target_type is Any:
            return value
        if target_type in _JSON_TYPES:
            if not isinstance(value, target_type) or (
                target_type is int and isinstance(value, bool)
            ):
                msg = f"expected {target_type.__name__}, got {type(value).__name__}"
                raise TypeError(msg)
            return value
        from_dict = getattr(target_type, "from_dict", None)
        if callable(from_dict):
            return from_dict(value)
        if dataclasses.is_dataclass(target_type):
            if not isinstance(value, Mapping):
                msg = f"expected a JSON object, got {type(value).__name__}"
                raise TypeError(msg)
            names = {f.name for f in dataclasses.fields(target_type) if f.init}
            return target_type(**{k: v for k, v in value.items() if k in names})
        msg = f"unsupported target type {target_type!r}"
        raise TypeError(msg)


def _to_json_value(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: getattr(obj, f.name)
            for f in dataclasses.fields(obj)
            if getattr(obj, f.name) is not None
        }
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)
