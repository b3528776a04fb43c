"""Formatter options and `typstfmt.toml` loading."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import cast

import structlog

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAME = "typstfmt.toml"

_KEY_MAP: dict[str, str] = {
    "indent_space": "indent_width",
    "indent_width": "indent_width",
    "max_line_length": "max_line_length",
}


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Style parameters for one formatting run."""

    indent_width: int = 2
    max_line_length: int = 80

    def __post_init__(self) -> None:
        for option in fields(self):
            value = getattr(self, option.name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"Invalid value for '{option.name}': expected positive int, got {value!r}.")


def load_format_options(path: Path | str | None = None, *, search_from: Path | str | None = None) -> FormatOptions:
    """Load options from ``path``, or from the nearest `typstfmt.toml` above ``search_from``.

    Without a config file the defaults are returned.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ValueError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_file(Path(search_from) if search_from is not None else Path.cwd())
        if config_path is None:
            return FormatOptions()

    try:
        payload_obj = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {config_path}: {exc}") from exc

    payload = cast("dict[str, object]", payload_obj)
    return FormatOptions(**_coerce_payload(payload, source=str(config_path)))


def find_config_file(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _coerce_payload(payload: dict[str, object], *, source: str) -> dict[str, int]:
    values: dict[str, int] = {}
    for key, raw_value in payload.items():
        field_name = _KEY_MAP.get(key)
        if field_name is None:
            logger.warning("Ignoring unknown typstfmt config key '%s' in %s.", key, source)
            continue
        if isinstance(raw_value, bool) or not isinstance(raw_value, int):
            raise ValueError(
                f"Invalid value for '{key}' in {source}: expected int, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        values[field_name] = raw_value
    return values
