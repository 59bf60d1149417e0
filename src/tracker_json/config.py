"""Codec and tracker configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_MAX_DEPTH = 256


class ConfigLoadError(RuntimeError):
    """Raised when a configuration file cannot be loaded."""


class DuplicateKeyPolicy(str, Enum):
    """Which member survives when a decoded object repeats a key."""

    KEEP_LAST = "keep_last"
    KEEP_FIRST = "keep_first"


class CodecOptions(BaseModel):
    """Settings shared by the decode and encode directions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    duplicate_keys: DuplicateKeyPolicy = DuplicateKeyPolicy.KEEP_LAST
    ensure_ascii: bool = False


DEFAULT_OPTIONS = CodecOptions()


@dataclass(frozen=True)
class TrackerConfig:
    """Identity of one tracker instance."""

    namespace: str
    app_id: str
    codec: CodecOptions = field(default_factory=CodecOptions)


def load_codec_options(path: Path) -> CodecOptions:
    """Load codec options from a YAML file.

    Args:
        path (Path): YAML file with any of the ``CodecOptions`` fields.

    Returns:
        CodecOptions: Validated options. An empty file yields the defaults.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigLoadError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Failed to parse YAML in {path}: {exc}") from exc

    if payload is None:
        return CodecOptions()
    if not isinstance(payload, dict):
        raise ConfigLoadError(
            f"Config file {path} must deserialize to a mapping, got {type(payload)!r}"
        )

    try:
        return CodecOptions.model_validate(payload)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid codec options in {path}: {exc}") from exc
