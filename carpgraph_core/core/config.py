from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import tomllib
from typing import Any

from .errors import ConfigError
from .graph import DecodePolicy

LOGGER = logging.getLogger(__name__)
CONFIG_ENV_VAR = "CARPGRAPH_CONFIG"
TRUNCATION_MODES = ("reject", "accept")


@dataclass(frozen=True)
class CodecConfig:
    truncated_payloads: str = "reject"
    require_utf8_colors: bool = False
    svg_background: str = "white"
    max_media_length: int = 64 * 512
    canvas_width: int = 300
    canvas_height: int = 200
    max_raster_pixels: int = 16_000_000

    def __post_init__(self) -> None:
        if self.truncated_payloads not in TRUNCATION_MODES:
            raise ConfigError(
                f"truncated_payloads must be one of {TRUNCATION_MODES}, got {self.truncated_payloads!r}"
            )
        for name in ("max_media_length", "canvas_width", "canvas_height", "max_raster_pixels"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0")

    def decode_policy(self) -> DecodePolicy:
        return DecodePolicy(
            accept_truncated=self.truncated_payloads == "accept",
            require_utf8_colors=self.require_utf8_colors,
        )


def load_config(path: str | Path) -> CodecConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {config_path}: {exc}") from exc
    section = raw.get("carpgraph", {})
    if not isinstance(section, dict):
        raise ConfigError("[carpgraph] must be a table")
    unknown = sorted(set(section) - set(CodecConfig.__dataclass_fields__))
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
    config = CodecConfig(
        truncated_payloads=_coerce_str(section, "truncated_payloads", "reject"),
        require_utf8_colors=_coerce_bool(section, "require_utf8_colors", False),
        svg_background=_coerce_str(section, "svg_background", "white"),
        max_media_length=_coerce_int(section, "max_media_length", 64 * 512),
        canvas_width=_coerce_int(section, "canvas_width", 300),
        canvas_height=_coerce_int(section, "canvas_height", 200),
        max_raster_pixels=_coerce_int(section, "max_raster_pixels", 16_000_000),
    )
    LOGGER.debug("loaded config from %s", config_path)
    return config


def resolve_config(path: str | Path | None = None) -> CodecConfig:
    """Load from ``path``, else from $CARPGRAPH_CONFIG, else defaults."""
    if path is not None:
        return load_config(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return load_config(env_path)
    return CodecConfig()


def _coerce_str(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _coerce_bool(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be a boolean")
    return value


def _coerce_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    return value
