from __future__ import annotations

import json
import os
import warnings
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from .cloud import (
    DEFAULT_MAX_TAGS_TO_DISPLAY,
    DEFAULT_MAX_WEIGHT,
    DEFAULT_MIN_WEIGHT,
    DEFAULT_WORD_PATTERN,
)
from .tag import Rounding
from .text_case import DEFAULT_LOCALE, TagCase

DEFAULT_CONFIG_PATH = Path("~/.config/tagcloud/config.json").expanduser()

CONFIG_ENV_OVERRIDES = {
    "min_weight": "TAGCLOUD_MIN_WEIGHT",
    "max_weight": "TAGCLOUD_MAX_WEIGHT",
    "max_tags_to_display": "TAGCLOUD_MAX_TAGS",
    "threshold": "TAGCLOUD_THRESHOLD",
    "norm_threshold": "TAGCLOUD_NORM_THRESHOLD",
    "tag_lifetime": "TAGCLOUD_TAG_LIFETIME",
    "word_pattern": "TAGCLOUD_WORD_PATTERN",
    "tag_case": "TAGCLOUD_TAG_CASE",
    "locale": "TAGCLOUD_LOCALE",
    "default_link": "TAGCLOUD_DEFAULT_LINK",
    "rounding": "TAGCLOUD_ROUNDING",
    "blacklist_file": "TAGCLOUD_BLACKLIST_FILE",
    "blacklist_locale": "TAGCLOUD_BLACKLIST_LOCALE",
    "min_length": "TAGCLOUD_MIN_LENGTH",
    "max_length": "TAGCLOUD_MAX_LENGTH",
}

_FLOAT_KEYS = {"min_weight", "max_weight", "threshold", "norm_threshold"}
_INT_KEYS = {"max_tags_to_display", "tag_lifetime"}
_OPTIONAL_INT_KEYS = {"min_length", "max_length"}

E = TypeVar("E", bound=Enum)


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("TAGCLOUD_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class CloudConfig:
    min_weight: float = DEFAULT_MIN_WEIGHT
    max_weight: float = DEFAULT_MAX_WEIGHT
    max_tags_to_display: int = DEFAULT_MAX_TAGS_TO_DISPLAY
    threshold: float = 0.0
    norm_threshold: float = 0.0
    tag_lifetime: int = -1
    word_pattern: str = DEFAULT_WORD_PATTERN
    tag_case: TagCase = TagCase.LOWER
    locale: str = DEFAULT_LOCALE
    default_link: str | None = None
    rounding: Rounding = Rounding.CEIL

    # Denylist applied as an input filter by the CLI. A file wins over a locale bundle.
    blacklist_file: str | None = None
    blacklist_locale: str | None = None
    min_length: int | None = None
    max_length: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["tag_case"] = self.tag_case.value
        data["rounding"] = self.rounding.value
        return data


def _parse_int(value: object, default: int, *, key: str) -> int:
    if value is None:
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default


def _parse_optional_int(value: object, default: int | None, *, key: str) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default


def _parse_float(value: object, default: float, *, key: str) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        warnings.warn(f"Invalid float for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid float for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default


def _parse_enum(value: object, default: E, enum_cls: type[E], *, key: str) -> E:
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if normalized in {str(member.value), member.name.lower()}:
                return member
    warnings.warn(f"Invalid {enum_cls.__name__} for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def _coerce_optional_str(value: object, default: str | None) -> str | None:
    if value is None:
        return default
    if isinstance(value, str):
        return value or None
    return str(value)


def load_config(path: Path | None = None) -> CloudConfig:
    cfg = CloudConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError:
            data = {}
        if isinstance(data, dict):
            cfg = _apply_dict(cfg, data)
    cfg = _apply_dict(cfg, get_env_overrides())
    return cfg


def apply_overrides(cfg: CloudConfig, overrides: dict[str, Any]) -> CloudConfig:
    """Apply explicitly given values (``None`` means not given) on top of ``cfg``."""

    return _apply_dict(cfg, {key: value for key, value in overrides.items() if value is not None})


def _apply_dict(cfg: CloudConfig, data: dict[str, Any]) -> CloudConfig:
    for key, value in data.items():
        if not hasattr(cfg, key):
            continue
        if key in _FLOAT_KEYS:
            setattr(cfg, key, _parse_float(value, getattr(cfg, key), key=key))
            continue
        if key in _INT_KEYS:
            setattr(cfg, key, _parse_int(value, getattr(cfg, key), key=key))
            continue
        if key in _OPTIONAL_INT_KEYS:
            setattr(cfg, key, _parse_optional_int(value, getattr(cfg, key), key=key))
            continue
        if key == "tag_case":
            cfg.tag_case = _parse_enum(value, cfg.tag_case, TagCase, key=key)
            continue
        if key == "rounding":
            cfg.rounding = _parse_enum(value, cfg.rounding, Rounding, key=key)
            continue
        if key in {"word_pattern", "locale"}:
            parsed = _coerce_optional_str(value, getattr(cfg, key))
            if parsed is not None:
                setattr(cfg, key, parsed)
            continue
        setattr(cfg, key, _coerce_optional_str(value, getattr(cfg, key)))
    return cfg
