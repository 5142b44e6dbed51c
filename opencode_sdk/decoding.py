"""
Opencode SDK - Response decoding.

``decode`` maps parsed JSON onto dataclass shapes: unknown keys are ignored,
missing required keys fail with a DecodeError naming the field.

Tagged payloads subclass ``DiscriminatedUnion``. Decoding one only reads the
discriminator; each ``as_*`` accessor then decodes the whole payload into its
own variant and returns ``None`` unless both the tag and the full shape match.
An absent or unrecognised tag is not an error, the value is simply of no
known variant.
"""

import collections.abc
import copy
import dataclasses
import functools
import inspect
import json
import logging
import types
import typing
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional, Union

from .encoding import wire_name
from .exceptions import DecodeError

logger = logging.getLogger("opencode_sdk.decoding")

_NoneType = type(None)
_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


@functools.lru_cache(maxsize=None)
def _type_hints(cls: type) -> dict[str, Any]:
    return typing.get_type_hints(cls)


def _join(path: str, key: Union[str, int]) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def _mismatch(path: str, expected: str, value: Any) -> DecodeError:
    where = path or "<root>"
    return DecodeError(
        f"{where}: expected {expected}, got {type(value).__name__}",
        raw_body=value,
        field=path or None,
    )


def _allows_none(shape: Any) -> bool:
    if shape is Any or shape is None or shape is _NoneType:
        return True
    if typing.get_origin(shape) in _UNION_TYPES:
        return _NoneType in typing.get_args(shape)
    return False


def _decode_dataclass(value: Any, cls: type, path: str) -> Any:
    if not isinstance(value, dict):
        raise _mismatch(path, f"object for {cls.__name__}", value)
    hints = _type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        key = wire_name(f)
        has_default = (
            f.default is not dataclasses.MISSING
            or f.default_factory is not dataclasses.MISSING
        )
        if key not in value or (value[key] is None and has_default):
            if not has_default:
                raise DecodeError(
                    f"missing required field {_join(path, key)!r}",
                    raw_body=value,
                    field=_join(path, key),
                )
            continue
        kwargs[f.name] = _decode(value[key], hints[f.name], _join(path, key))
    return cls(**kwargs)


def _decode(value: Any, shape: Any, path: str) -> Any:
    if shape is Any or shape is object:
        return value
    if shape is None or shape is _NoneType:
        if value is not None:
            raise _mismatch(path, "null", value)
        return None

    origin = typing.get_origin(shape)
    if origin in _UNION_TYPES:
        args = typing.get_args(shape)
        if value is None and _NoneType in args:
            return None
        last_error: Optional[DecodeError] = None
        for arg in args:
            if arg is _NoneType:
                continue
            try:
                return _decode(value, arg, path)
            except DecodeError as exc:
                last_error = exc
        raise last_error or _mismatch(path, str(shape), value)
    if origin in (list, tuple, collections.abc.Sequence):
        if not isinstance(value, list):
            raise _mismatch(path, "array", value)
        (item_shape,) = typing.get_args(shape)[:1] or (Any,)
        return [_decode(item, item_shape, _join(path, i)) for i, item in enumerate(value)]
    if origin in (dict, collections.abc.Mapping):
        if not isinstance(value, dict):
            raise _mismatch(path, "object", value)
        args = typing.get_args(shape)
        item_shape = args[1] if len(args) == 2 else Any
        return {k: _decode(v, item_shape, _join(path, k)) for k, v in value.items()}

    if inspect.isclass(shape):
        if issubclass(shape, DiscriminatedUnion):
            return shape.from_raw(value, path)
        if dataclasses.is_dataclass(shape):
            return _decode_dataclass(value, shape, path)
        if issubclass(shape, Enum):
            try:
                return shape(value)
            except (TypeError, ValueError) as exc:
                raise DecodeError(
                    f"{path or '<root>'}: {value!r} is not a valid {shape.__name__}",
                    raw_body=value,
                    cause=exc,
                    field=path or None,
                ) from exc
        if shape is bool:
            if not isinstance(value, bool):
                raise _mismatch(path, "boolean", value)
            return value
        if shape is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise _mismatch(path, "integer", value)
            return value
        if shape is float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise _mismatch(path, "number", value)
            return float(value)
        if shape in (dict, list, str):
            if not isinstance(value, shape):
                raise _mismatch(path, shape.__name__, value)
            return value
        if isinstance(value, shape):
            return value
        raise _mismatch(path, shape.__name__, value)

    raise TypeError(f"unsupported response shape: {shape!r}")


def decode(raw: Any, shape: Any) -> Any:
    """Decode already-parsed JSON ``raw`` into ``shape``.

    Raises:
        DecodeError: ``raw`` does not structurally match ``shape``.
    """
    return _decode(raw, shape, "")


def parse_json(content: bytes) -> Any:
    """Parse a UTF-8 JSON body; an empty body parses to ``None``."""
    if not content.strip():
        return None
    try:
        return json.loads(content)
    except ValueError as exc:
        raise DecodeError(
            f"response body is not valid JSON: {exc}",
            raw_body=content.decode("utf-8", errors="replace"),
            cause=exc,
        ) from exc


def decode_response(content: bytes, shape: Any) -> Any:
    """Decode a 2xx response body. A ``None`` shape discards the body."""
    if shape is None:
        return None
    data = parse_json(content)
    if data is None and not _allows_none(shape):
        raise DecodeError("empty response body", raw_body="")
    try:
        return decode(data, shape)
    except DecodeError as exc:
        exc.raw_body = content.decode("utf-8", errors="replace")
        raise


class DiscriminatedUnion:
    """A payload whose ``discriminator`` field selects one of ``variants``.

    Instances are immutable snapshots of what the server sent. Subclasses
    declare ``discriminator`` and ``variants`` and expose one ``as_*``
    accessor per variant built on ``_as``.
    """

    discriminator: ClassVar[str] = "type"
    variants: ClassVar[Mapping[str, type]] = {}

    __slots__ = ("_raw", "_tag")

    def __init__(self, raw: Mapping[str, Any]):
        data = copy.deepcopy(dict(raw))
        tag = data.get(self.discriminator)
        object.__setattr__(self, "_raw", MappingProxyType(data))
        object.__setattr__(self, "_tag", tag if isinstance(tag, str) else None)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_raw(cls, value: Any, path: str = ""):
        if not isinstance(value, dict):
            raise _mismatch(path, f"object for {cls.__name__}", value)
        return cls(value)

    @property
    def tag(self) -> Optional[str]:
        """The discriminator value as received, or ``None`` when absent."""
        return self._tag

    @property
    def is_known(self) -> bool:
        return self._tag is not None and self._tag in self.variants

    @property
    def raw(self) -> dict[str, Any]:
        """A copy of the undecoded payload."""
        return copy.deepcopy(dict(self._raw))

    def _as(self, tag: str) -> Optional[Any]:
        if self._tag != tag:
            return None
        try:
            return decode(self.raw, self.variants[tag])
        except DecodeError as exc:
            logger.debug("%s tagged %r does not match its shape: %s", type(self).__name__, tag, exc)
            return None

    def variant(self) -> Optional[Any]:
        """The decoded active variant, or ``None`` for unknown or invalid payloads."""
        if not self.is_known:
            return None
        return self._as(self._tag)

    def to_dict(self) -> dict[str, Any]:
        return self.raw

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return dict(self._raw) == dict(other._raw)

    def __hash__(self) -> int:
        return hash((type(self), json.dumps(dict(self._raw), sort_keys=True, default=str)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.discriminator}={self._tag!r})"
