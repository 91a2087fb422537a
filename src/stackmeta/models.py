from __future__ import annotations

import base64
import binascii
import gzip
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .constants import Analytics
from .errors import AnalyticsFormatError


@dataclass(frozen=True)
class ConstructInfo:
    """Source information on a construct (class fqn and version)."""

    fqn: str
    version: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.fqn, self.version)


class AnalyticsEncoding(str, Enum):
    PLAINTEXT = "plaintext"
    DEFLATE64 = "deflate64"


@dataclass(frozen=True)
class EncodedPayload:
    """Analytics string split into its three parts."""

    format_version: int
    encoding: AnalyticsEncoding
    body: str

    def __str__(self) -> str:
        return f"v{self.format_version}:{self.encoding.value}:{self.body}"

    @classmethod
    def parse(cls, text: str) -> "EncodedPayload":
        parts = text.split(":", 2)
        if len(parts) != 3 or not parts[0].startswith("v"):
            raise AnalyticsFormatError(f"Not an analytics string: {text[:40]!r}")
        version_tag, encoding_tag, body = parts
        try:
            format_version = int(version_tag[1:])
        except ValueError as exc:
            raise AnalyticsFormatError(f"Bad format version: {version_tag!r}") from exc
        if format_version != Analytics.FORMAT_VERSION:
            raise AnalyticsFormatError(f"Unsupported format version: {format_version}")
        try:
            encoding = AnalyticsEncoding(encoding_tag)
        except ValueError as exc:
            raise AnalyticsFormatError(f"Unknown encoding: {encoding_tag!r}") from exc
        return cls(format_version=format_version, encoding=encoding, body=body)

    def plaintext_body(self) -> str:
        """Body with the compression undone."""
        if self.encoding is AnalyticsEncoding.PLAINTEXT:
            return self.body
        try:
            return gzip.decompress(base64.b64decode(self.body, validate=True)).decode("utf-8")
        except (binascii.Error, zlib.error, OSError, EOFError, UnicodeDecodeError) as exc:
            raise AnalyticsFormatError(f"Corrupt deflate64 body: {exc}") from exc


@dataclass(frozen=True)
class Resolved:
    """A value known at synthesis time."""

    value: str


@dataclass(frozen=True)
class Deferred:
    """A value only known at deploy time, referenced by a template Ref."""

    ref: str = Analytics.REGION_PSEUDO_PARAMETER

    def to_template(self) -> Dict[str, str]:
        return {"Ref": self.ref}


RegionValue = Union[Resolved, Deferred]


def as_region_value(value: Union[RegionValue, str, None]) -> RegionValue:
    """Coerce a plain string / None into a RegionValue."""
    if isinstance(value, (Resolved, Deferred)):
        return value
    if value is None:
        return Deferred()
    return Resolved(str(value))


class InclusionKind(str, Enum):
    OMIT = "omit"
    INCLUDE_UNCONDITIONAL = "include_unconditional"
    INCLUDE_CONDITIONAL = "include_conditional"


@dataclass(frozen=True)
class InclusionDecision:
    kind: InclusionKind
    condition: Optional[Dict[str, Any]] = None

    @property
    def includes(self) -> bool:
        return self.kind is not InclusionKind.OMIT
