from __future__ import annotations

from dataclasses import dataclass


FORMAT_TAG = b"CG"
CURRENT_FORMAT_VERSION = 1
SUPPORTED_FORMAT_VERSIONS = {1}
DEPRECATED_FORMAT_VERSIONS: set[int] = set()


@dataclass(frozen=True)
class FormatCompatibility:
    accepted: bool
    warning: str | None


def check_format_compatibility(tag: bytes, version: bytes) -> FormatCompatibility:
    if tag != FORMAT_TAG:
        return FormatCompatibility(
            accepted=False,
            warning=f"unrecognised graph format tag={tag!r}",
        )
    if len(version) != 2:
        return FormatCompatibility(
            accepted=False,
            warning=f"graph version must be 2 bytes, got {len(version)}",
        )
    number = int.from_bytes(version, "big")
    if number not in SUPPORTED_FORMAT_VERSIONS:
        return FormatCompatibility(
            accepted=False,
            warning=f"unsupported graph format version={number}",
        )
    if number in DEPRECATED_FORMAT_VERSIONS:
        return FormatCompatibility(
            accepted=True,
            warning=f"graph format version={number} is deprecated",
        )
    return FormatCompatibility(accepted=True, warning=None)
