"""Content digest and image reference primitives."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import InvalidDigest, InvalidReference

__all__ = [
    "DIGEST_ALGORITHMS",
    "Digest",
    "Reference",
    "parse_digest",
    "parse_reference",
]

# Registered algorithm -> length of its hex encoded output.
DIGEST_ALGORITHMS: dict[str, int] = {
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}

_HEX_RE = re.compile(r"[0-9a-f]+")
_HEX_ANY_CASE_RE = re.compile(r"[0-9a-fA-F]+")
_COMPONENT_RE = re.compile(r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*")
_DOMAIN_RE = re.compile(r"[a-z0-9]+(?:[.-][a-z0-9]+)*(?::[0-9]+)?")
_TAG_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}")


def _check_digest(value: str, algorithm: str, hex_part: str) -> None:
    expected = DIGEST_ALGORITHMS.get(algorithm)
    if expected is None:
        raise InvalidDigest(value, f"unknown algorithm {algorithm!r}")
    if not _HEX_RE.fullmatch(hex_part):
        if _HEX_ANY_CASE_RE.fullmatch(hex_part):
            raise InvalidDigest(value, "hex payload must be lowercase")
        raise InvalidDigest(value, "hex payload contains non-hex characters")
    if len(hex_part) != expected:
        raise InvalidDigest(
            value,
            f"{algorithm} expects {expected} hex characters, got {len(hex_part)}",
        )


class Digest(BaseModel):
    """A content-addressed identifier, ``algorithm:hex``."""

    model_config = ConfigDict(frozen=True)

    algorithm: str
    hex: str

    @model_validator(mode="after")
    def _validate(self) -> "Digest":
        _check_digest(str(self), self.algorithm, self.hex)
        return self

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hex}"

    @classmethod
    def parse(cls, value: str) -> "Digest":
        return parse_digest(value)


class Reference(BaseModel):
    """A human readable image identifier, ``name:tag`` or ``name@digest``."""

    model_config = ConfigDict(frozen=True)

    name: str
    tag: str | None = None
    digest: Digest | None = None

    @model_validator(mode="after")
    def _validate(self) -> "Reference":
        if (self.tag is None) == (self.digest is None):
            raise InvalidReference(
                self.name, "exactly one of tag or digest must be set"
            )
        parse_reference(str(self))
        return self

    def __str__(self) -> str:
        if self.digest is not None:
            return f"{self.name}@{self.digest}"
        return f"{self.name}:{self.tag}"

    @classmethod
    def parse(cls, value: str) -> "Reference":
        return parse_reference(value)


def parse_digest(value: str) -> Digest:
    """
    Parse and validate a digest string such as ``sha256:<64 hex chars>``.

    Raises ``InvalidDigest`` when the separator is missing, the algorithm is
    not registered (names are case sensitive) or the hex payload has the wrong
    length or case.
    """
    if not isinstance(value, str):
        raise InvalidDigest(repr(value), "digest must be a string")
    algorithm, sep, hex_part = value.partition(":")
    if not sep:
        raise InvalidDigest(value, "missing ':' separator")
    _check_digest(value, algorithm, hex_part)
    return Digest.model_construct(algorithm=algorithm, hex=hex_part)


def _check_name(value: str, name: str) -> None:
    if not name:
        raise InvalidReference(value, "empty repository name")
    components = name.split("/")
    if len(components) > 1 and _DOMAIN_RE.fullmatch(components[0]):
        components = components[1:]
    for component in components:
        if not _COMPONENT_RE.fullmatch(component):
            raise InvalidReference(
                value, f"invalid name component {component!r}"
            )


def parse_reference(value: str) -> Reference:
    """
    Parse ``name:tag`` or ``name@digest`` into a ``Reference``.

    The name must be lowercase alphanumerics joined by ``.``, ``_``, ``-``
    and ``/``; the first of several components may be a registry host with
    an optional port.
    """
    if not isinstance(value, str):
        raise InvalidReference(repr(value), "reference must be a string")

    if "@" in value:
        name, _, raw_digest = value.partition("@")
        try:
            digest = parse_digest(raw_digest)
        except InvalidDigest as exc:
            raise InvalidReference(value, exc.reason) from exc
        _check_name(value, name)
        return Reference.model_construct(name=name, tag=None, digest=digest)

    colon = value.rfind(":")
    if colon <= value.rfind("/"):
        raise InvalidReference(value, "missing ':tag' or '@digest' suffix")
    name, tag = value[:colon], value[colon + 1:]
    if not _TAG_RE.fullmatch(tag):
        raise InvalidReference(value, f"invalid tag {tag!r}")
    _check_name(value, name)
    return Reference.model_construct(name=name, tag=tag, digest=None)
