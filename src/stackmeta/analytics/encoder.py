"""
Compact encoding of construct infos for the CDKMetadata Analytics property.

Infos are grouped by version, then by shared dotted prefix, into a brace
grammar:

    1.2.3!aws-cdk-lib.{Stack,aws_s3.{Bucket,CfnBucket}},Python/3.12.1!jsii-runtime.Runtime

Versions sort lexicographically, and so do fqns within a version, which makes
the output a function of the set of infos only. When gzip + base64 is shorter
than the plaintext body, the compressed form is used instead.
"""

from __future__ import annotations

import base64
import gzip
import re
import zlib
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..constants import Analytics
from ..errors import AnalyticsEncodingError, AnalyticsFormatError
from ..models import AnalyticsEncoding, ConstructInfo, EncodedPayload

_SEGMENT_RE = re.compile(r"(?<=\.)")

# Child key marking "an identifier ends at this node".
_END = ""


@dataclass
class _TrieNode:
    children: Dict[str, "_TrieNode"] = field(default_factory=dict)

    def insert(self, segments: Iterable[str]) -> None:
        node = self
        for segment in segments:
            node = node.children.setdefault(segment, _TrieNode())
        node.children.setdefault(_END, _TrieNode())

    def render(self) -> str:
        parts = []
        for key, child in self.children.items():
            if len(child.children) > 1:
                parts.append(f"{key}{{{child.render()}}}")
            else:
                parts.append(key + child.render())
        return ",".join(parts)


def _segments(fqn: str) -> List[str]:
    """Split on dots, keeping each dot on the segment before it."""
    return [segment for segment in _SEGMENT_RE.split(fqn) if segment]


def prefix_encode(infos: Iterable[ConstructInfo]) -> str:
    """Plaintext body: version buckets, each a prefix-grouped fqn tree."""
    root = _TrieNode()
    for info in sorted({info.key: info for info in infos}.values(), key=lambda i: (i.version, i.fqn)):
        root.insert([f"{info.version}!", *_segments(info.fqn)])
    return root.render()


def compress_body(plaintext: str) -> str:
    """base64(gzip(plaintext)) with a zeroed header timestamp."""
    try:
        compressed = gzip.compress(plaintext.encode("utf-8"), mtime=0)
    except (zlib.error, OSError) as exc:
        raise AnalyticsEncodingError(f"Failed to compress analytics: {exc}") from exc
    return base64.b64encode(compressed).decode("ascii")


def encode_analytics(
    infos: Iterable[ConstructInfo],
    force_uncompressed: bool = False,
) -> EncodedPayload:
    plaintext = prefix_encode(infos)
    if force_uncompressed:
        return EncodedPayload(Analytics.FORMAT_VERSION, AnalyticsEncoding.PLAINTEXT, plaintext)

    compressed = compress_body(plaintext)
    if len(plaintext) <= len(compressed):
        return EncodedPayload(Analytics.FORMAT_VERSION, AnalyticsEncoding.PLAINTEXT, plaintext)
    return EncodedPayload(Analytics.FORMAT_VERSION, AnalyticsEncoding.DEFLATE64, compressed)


def format_analytics(infos: Iterable[ConstructInfo], force_uncompressed: bool = False) -> str:
    return str(encode_analytics(infos, force_uncompressed))


def _split_top_level(text: str) -> List[str]:
    items: List[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise AnalyticsFormatError(f"Unbalanced '}}' at offset {index}")
        elif char == "," and depth == 0:
            items.append(text[start:index])
            start = index + 1
    if depth != 0:
        raise AnalyticsFormatError("Unbalanced '{' in analytics body")
    items.append(text[start:])
    return items


def _expand(text: str) -> List[str]:
    expanded: List[str] = []
    for item in _split_top_level(text):
        brace = item.find("{")
        if brace == -1:
            expanded.append(item)
            continue
        if not item.endswith("}"):
            raise AnalyticsFormatError(f"Trailing text after group: {item!r}")
        prefix = item[:brace]
        expanded.extend(prefix + rest for rest in _expand(item[brace + 1 : -1]))
    return expanded


def expand_analytics(text: str) -> List[ConstructInfo]:
    """Parse an analytics string (either encoding) back into construct infos."""
    body = EncodedPayload.parse(text).plaintext_body()
    if not body:
        return []

    infos: List[ConstructInfo] = []
    for entry in _expand(body):
        version, sep, fqn = entry.partition("!")
        if not sep or not version or not fqn:
            raise AnalyticsFormatError(f"Entry without version: {entry!r}")
        infos.append(ConstructInfo(fqn=fqn, version=version))
    return infos
