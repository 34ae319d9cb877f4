from __future__ import annotations


class CarpGraphError(Exception):
    pass


class DecodeError(CarpGraphError):
    pass


class MalformedHeader(DecodeError):
    pass


class TruncatedPayload(DecodeError):
    def __init__(self, kind: str, offset: int, expected: int, actual: int) -> None:
        super().__init__(
            f"truncated {kind} payload at offset {offset}: expected {expected} bytes, got {actual}"
        )
        self.kind = kind
        self.offset = offset
        self.expected = expected
        self.actual = actual


class InvalidUtf8Color(DecodeError):
    pass


class LegacyFormatError(DecodeError):
    pass


class CommandPayloadError(CarpGraphError, ValueError):
    pass


class ConfigError(CarpGraphError, ValueError):
    pass


class MediaError(CarpGraphError, ValueError):
    pass
