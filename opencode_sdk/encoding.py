"""
Opencode SDK - Parameter field markers and JSON body encoding.

Parameter objects are dataclasses. Each field is tagged as travelling in the
query string or in the JSON body, under an optional wire name, and as
required or optional. ``None`` always means "absent".
"""

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .validation import validate_required

QUERY = "query"
BODY = "body"


def wire(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field whose JSON name differs from the attribute."""
    metadata = dict(kwargs.pop("metadata", {}))
    metadata["wire"] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def query_field(name: Optional[str] = None, *, required: bool = False) -> Any:
    """Declare a parameter sent in the query string.

    Required fields have no default and must be non-empty; optional fields
    default to ``None`` and are omitted when unset.
    """
    metadata = {"location": QUERY, "required": required}
    if name:
        metadata["wire"] = name
    if required:
        return dataclasses.field(metadata=metadata)
    return dataclasses.field(default=None, metadata=metadata)


def body_field(
    name: Optional[str] = None, *, required: bool = False, root: bool = False
) -> Any:
    """Declare a parameter sent in the JSON body.

    With ``root=True`` the field's value is the whole body rather than a key.
    """
    metadata = {"location": BODY, "required": required, "root": root}
    if name:
        metadata["wire"] = name
    if required:
        return dataclasses.field(metadata=metadata)
    return dataclasses.field(default=None, metadata=metadata)


def wire_name(f: dataclasses.Field) -> str:
    return f.metadata.get("wire", f.name)


def fields_at(params: Any, location: str) -> list[dataclasses.Field]:
    """Fields of a parameter dataclass tagged with ``location``, in declaration order."""
    return [f for f in dataclasses.fields(params) if f.metadata.get("location") == location]


def is_required(f: dataclasses.Field) -> bool:
    """A field is required when marked so or declared without any default."""
    if f.metadata.get("required"):
        return True
    return (
        f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    )


def _subpath(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def to_json_value(value: Any, path: str = "") -> Any:
    """Convert a parameter value into plain JSON-compatible data.

    ``path`` is the wire location of ``value``; validation errors for nested
    required fields name it, e.g. ``parts[0].text``.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        encoded = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            key = _subpath(path, wire_name(f))
            if is_required(f):
                validate_required(item, key)
            if item is None:
                continue
            encoded[wire_name(f)] = to_json_value(item, key)
        return encoded
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_json_value(v, _subpath(path, str(k))) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v, f"{path}[{i}]") for i, v in enumerate(value)]
    return value


def encode_body(params: Any) -> Optional[Any]:
    """Build the JSON body for a parameter object.

    Returns ``None`` when the parameter type declares no body fields, so
    parameterless and query-only calls send no body at all.
    """
    if params is None:
        return None
    body_fields = fields_at(params, BODY)
    if not body_fields:
        return None

    body: dict[str, Any] = {}
    for f in body_fields:
        value = getattr(params, f.name)
        if is_required(f):
            validate_required(value, wire_name(f))
        if value is None:
            continue
        if f.metadata.get("root"):
            return to_json_value(value)
        body[wire_name(f)] = to_json_value(value, wire_name(f))
    return body
