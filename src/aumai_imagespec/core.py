"""JSON codec helpers shared by every document model."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import MalformedDocument

__all__ = [
    "decode",
    "encode",
    "merge",
    "read_bytes",
    "validate",
]

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def read_bytes(path: str | Path) -> bytes:
    """Return the raw content of *path*; ``OSError`` is left to the caller."""
    return Path(path).read_bytes()


def validate(model: type[ModelT], tree: Any) -> ModelT:
    """
    Validate an already decoded JSON *tree* against *model*.

    Shape and type failures are reported as ``MalformedDocument``.  The
    package's own errors (``MissingRequiredField``, ``InvalidDigest``,
    ``InvalidReference``) are raised from inside validators and propagate
    untouched.
    """
    try:
        return model.model_validate(tree)
    except ValidationError as exc:
        raise MalformedDocument(
            model.__name__, exc.errors(include_url=False, include_context=False)
        ) from exc


def decode(data: bytes | str, model: type[ModelT]) -> ModelT:
    """Parse JSON text in *data* and validate it as *model*."""
    try:
        tree = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedDocument(
            model.__name__, [{"loc": (), "msg": str(exc)}]
        ) from exc
    value = validate(model, tree)
    logger.debug("Decoded %s from %d bytes", model.__name__, len(data))
    return value


def encode(value: BaseModel, indent: int | None = None) -> bytes:
    """
    Serialize *value* to JSON bytes using the on-disk key names.

    Absent optional fields (``None``) are omitted rather than written as
    ``null``.
    """
    data = value.model_dump_json(
        by_alias=True, exclude_none=True, indent=indent
    ).encode("utf-8")
    logger.debug("Encoded %s into %d bytes", type(value).__name__, len(data))
    return data


def merge(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge *extra* into *base* and return *base*.

    Nested objects are merged key by key, any other value in *extra*
    replaces the one in *base*.  ``None`` values in *extra* are skipped.
    """
    for key, value in extra.items():
        if value is None:
            continue
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge(current, value)
        else:
            base[key] = value
    return base
