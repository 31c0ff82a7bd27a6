"""Error taxonomy for aumai-imagespec."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ImageSpecError",
    "InvalidDigest",
    "InvalidReference",
    "MalformedDocument",
    "MissingRequiredField",
]


def _describe(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", ""))
    return f"{location}: {message}" if location else message


class ImageSpecError(Exception):
    """Base class for every validation failure raised by this package.

    Not a ``ValueError`` on purpose: pydantic only wraps ``ValueError`` and
    ``AssertionError`` raised by validators, so these propagate unchanged.
    """


class MalformedDocument(ImageSpecError):
    """The document is not valid JSON or does not have the expected shape."""

    def __init__(
        self, document: str, errors: list[dict[str, Any]] | tuple = ()
    ) -> None:
        self.document = document
        self.errors = tuple(errors)
        detail = "; ".join(_describe(err) for err in self.errors)
        message = f"malformed {document}"
        super().__init__(f"{message}: {detail}" if detail else message)


class MissingRequiredField(ImageSpecError):
    """A required field was not set, or was set to an empty value."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing required field: {field}")


class InvalidDigest(ImageSpecError):
    """A string is not a valid ``algorithm:hex`` content digest."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"invalid digest {value!r}: {reason}")


class InvalidReference(ImageSpecError):
    """A string is not a valid ``name:tag`` or ``name@digest`` reference."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"invalid reference {value!r}: {reason}")
