"""
Opencode SDK - Query string encoding for parameter objects.

Turns the query-tagged fields of a parameter dataclass into an ordered list
of ``(key, value)`` pairs. Output order follows field declaration order so
the wire form is reproducible.
"""

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from .encoding import QUERY, is_required, wire_name
from .exceptions import ParamValidationError
from .validation import validate_required


class ArrayFormat(str, Enum):
    """How list values are written to the query string."""

    COMMA = "comma"
    REPEAT = "repeat"
    BRACKETS = "brackets"


class NestedFormat(str, Enum):
    """How nested object keys are composed."""

    BRACKETS = "brackets"
    DOTS = "dots"


@dataclass(frozen=True)
class QuerySettings:
    array_format: ArrayFormat = ArrayFormat.COMMA
    nested_format: NestedFormat = NestedFormat.BRACKETS


DEFAULT_SETTINGS = QuerySettings()

Pair = tuple[str, str]


def encode_scalar(value: Any) -> str:
    """Render a scalar query value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return encode_scalar(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise TypeError(f"unsupported query value type: {type(value).__name__}")


class _Encoder:
    def __init__(self, settings: QuerySettings):
        self.settings = settings

    def key_path(self, key: str, subkey: str) -> str:
        if not key:
            return subkey
        if self.settings.nested_format == NestedFormat.DOTS:
            return f"{key}.{subkey}"
        return f"{key}[{subkey}]"

    def encode_object(self, key: str, obj: Any) -> list[Pair]:
        pairs: list[Pair] = []
        for f in dataclasses.fields(obj):
            location = f.metadata.get("location")
            # nested values may be plain dataclasses without location markers
            if location != QUERY and (not key or location is not None):
                continue
            subkey = self.key_path(key, wire_name(f))
            value = getattr(obj, f.name)
            if is_required(f):
                validate_required(value, subkey)
            pairs.extend(self.encode(subkey, value))
        return pairs

    def encode(self, key: str, value: Any) -> list[Pair]:
        if value is None:
            return []
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return self.encode_object(key, value)
        if isinstance(value, Mapping):
            pairs: list[Pair] = []
            for subkey, item in value.items():
                pairs.extend(self.encode(self.key_path(key, encode_scalar(subkey)), item))
            return pairs
        if isinstance(value, (list, tuple)):
            return self.encode_array(key, value)
        try:
            return [(key, encode_scalar(value))]
        except TypeError as exc:
            raise ParamValidationError(key, str(exc)) from exc

    def encode_array(self, key: str, values: Any) -> list[Pair]:
        fmt = self.settings.array_format
        if fmt == ArrayFormat.COMMA:
            elements = []
            for item in values:
                elements.extend(v for _, v in self.encode("", item))
            if not elements:
                return []
            return [(key, ",".join(elements))]
        if fmt == ArrayFormat.BRACKETS:
            key = f"{key}[]"
        pairs: list[Pair] = []
        for item in values:
            pairs.extend(self.encode(key, item))
        return pairs


def encode_query(params: Any, settings: Optional[QuerySettings] = None) -> list[Pair]:
    """Encode the query-tagged fields of ``params``.

    Raises:
        ParamValidationError: A required field is unset or empty, or a
            value cannot be represented in a query string.
    """
    if params is None:
        return []
    if not dataclasses.is_dataclass(params):
        raise TypeError(f"query parameters must be a dataclass, got {type(params).__name__}")
    return _Encoder(settings or DEFAULT_SETTINGS).encode_object("", params)
