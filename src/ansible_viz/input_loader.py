"""Reader for the annotated configuration dictionary.

The resolver stage writes its output as YAML or JSON.  YAML anchors let one
record be shared between several places (a role referenced by two
playbooks); plain ``fqn`` strings work as references too.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from pathlib import Path

_SECTIONS = ("role", "playbook")


class InputError(Exception):
    """Raised when the annotated dictionary cannot be read."""


def validate_input(data: Any) -> dict[str, list[dict[str, Any]]]:
    """Check the top-level shape and return a normalized copy.

    Missing sections become empty lists.  Record contents are not checked
    here; malformed references surface as graph errors while building.
    """
    if not isinstance(data, dict):
        msg = "Input must be a mapping with 'role' and 'playbook' lists"
        raise InputError(msg)

    result: dict[str, list[dict[str, Any]]] = {}
    for section in _SECTIONS:
        records = data.get(section) or []
        if not isinstance(records, list):
            msg = f"'{section}' must be a list, got {type(records).__name__}"
            raise InputError(msg)
        for record in records:
            if not isinstance(record, dict) or "fqn" not in record:
                msg = f"Every '{section}' record needs an 'fqn'"
                raise InputError(msg)
        result[section] = records
    return result


def load_input(path: Path) -> dict[str, list[dict[str, Any]]]:
    """Load and validate the annotated dictionary stored at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise InputError(msg) from exc

    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        msg = f"Cannot parse {path}: {exc}"
        raise InputError(msg) from exc

    return validate_input(data)
