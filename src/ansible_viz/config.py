"""Graph options and the optional ``ansible-viz.yml`` config file.

Example config::

    vars: true
    usage: false
    legend: true
    exclude_nodes: "role:legacy-.*"
    exclude_edges: "task:.* -> var:debug_.*"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ansible-viz.yml"

# config key -> GraphOptions field
_BOOL_KEYS = {"vars": "show_vars", "usage": "show_usage", "legend": "with_legend"}
_PATTERN_KEYS = {"exclude_nodes": "exclude_nodes", "exclude_edges": "exclude_edges"}


class ConfigError(Exception):
    """Raised when the config file or an option value is invalid."""


@dataclass(frozen=True)
class GraphOptions:
    """Switches controlling what ends up in the graph."""

    show_vars: bool = True
    show_usage: bool = True
    with_legend: bool = True
    exclude_nodes: re.Pattern[str] | None = None
    exclude_edges: re.Pattern[str] | None = None


def compile_pattern(value: str | None, *, name: str) -> re.Pattern[str] | None:
    """Compile an exclusion pattern, wrapping regex errors in ConfigError."""
    if value is None or value == "":
        return None
    try:
        return re.compile(value)
    except re.error as exc:
        msg = f"Invalid {name} pattern {value!r}: {exc}"
        raise ConfigError(msg) from exc


def options_from_dict(data: dict[str, Any]) -> GraphOptions:
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in _BOOL_KEYS:
            if not isinstance(value, bool):
                msg = f"'{key}' must be true or false, got {value!r}"
                raise ConfigError(msg)
            kwargs[_BOOL_KEYS[key]] = value
        elif key in _PATTERN_KEYS:
            if value is not None and not isinstance(value, str):
                msg = f"'{key}' must be a regular expression string"
                raise ConfigError(msg)
            kwargs[_PATTERN_KEYS[key]] = compile_pattern(value, name=key)
        else:
            msg = f"Unknown config key '{key}'"
            raise ConfigError(msg)
    return GraphOptions(**kwargs)


def load_options(path: Path | None) -> GraphOptions:
    """Read options from *path*; a missing file yields the defaults."""
    if path is None or not path.is_file():
        return GraphOptions()

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc

    if data is None:
        return GraphOptions()
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping"
        raise ConfigError(msg)

    logger.debug("Loaded options from %s", path)
    return options_from_dict(data)


def merge_options(base: GraphOptions, **overrides: Any) -> GraphOptions:
    """Return *base* with every non-None override applied."""
    changes = {k: v for k, v in overrides.items() if v is not None}
    return replace(base, **changes)
