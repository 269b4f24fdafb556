"""Shared test fixtures for ansible-viz."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

Record = dict[str, Any]


def _var(name: str, scope: str, *, defined: bool = True, used: bool = True) -> Record:
    return {
        "name": name,
        "fqn": f"var:{scope}/{name}",
        "type": "var",
        "defined": defined,
        "used": [f"task:{scope}"] if used else [],
    }


def _task(
    name: str,
    role: str,
    *,
    var: list[Record] | None = None,
    uses: list[Record | str] | None = None,
) -> Record:
    return {
        "name": name,
        "fqn": f"task:{role}/{name}",
        "type": "task",
        "var": var or [],
        "uses": uses or [],
    }


def _varset(
    name: str,
    role: str,
    *,
    var: list[Record] | None = None,
    defaults: bool = False,
) -> Record:
    tag = "vardefaults" if defaults else "varset"
    return {"name": name, "fqn": f"{tag}:{role}/{name}", "type": tag, "var": var or []}


def _role(
    name: str,
    *,
    task: list[Record] | None = None,
    varset: list[Record] | None = None,
    role_deps: list[Record | str] | None = None,
) -> Record:
    return {
        "name": name,
        "fqn": f"role:{name}",
        "type": "role",
        "task": task or [],
        "varset": varset or [],
        "role_deps": role_deps or [],
    }


def _playbook(
    name: str,
    *,
    role: list[Record | str] | None = None,
    task: list[Record | str] | None = None,
) -> Record:
    return {
        "name": name,
        "fqn": f"playbook:{name}",
        "type": "playbook",
        "role": role or [],
        "task": task or [],
    }


@pytest.fixture()
def records() -> SimpleNamespace:
    """Factories for input records with predictable fqns."""
    return SimpleNamespace(
        var=_var,
        task=_task,
        varset=_varset,
        role=_role,
        playbook=_playbook,
    )


@pytest.fixture()
def sample_data() -> dict[str, list[Record]]:
    """A small but complete annotated dictionary.

    - ``web``: ``main`` task setting ``web_ready``, ``deploy`` task using
      ``port`` (from defaults) and ``web_ready``; defaults ``main`` with
      ``port`` and the unused ``debug``; vars ``main`` with ``listen``.
    - ``db``: ``install`` task using the undefined ``db_password``; depends
      on ``common``.
    - ``common``: only reached through ``db``'s dependency.
    - ``orphan``: referenced by no playbook.
    - playbook ``site`` includes ``web`` and ``db`` and calls ``deploy``.
    """
    web_ready = _var("web_ready", "web/main")
    port = _var("port", "web/defaults")
    debug = _var("debug", "web/defaults", used=False)
    listen = _var("listen", "web/vars")
    db_password = _var("db_password", "db/install", defined=False)

    main_task = _task("main", "web", var=[web_ready])
    deploy = _task("deploy", "web", uses=[port, web_ready, listen])
    install = _task("install", "db", var=[db_password], uses=[db_password])
    noop = _task("noop", "orphan")
    ping = _task("ping", "common")

    common = _role("common", task=[ping])
    web = _role(
        "web",
        task=[main_task, deploy],
        varset=[
            _varset("main", "web", var=[port, debug], defaults=True),
            _varset("main", "web", var=[listen]),
        ],
    )
    db = _role("db", task=[install], role_deps=[common])
    orphan = _role("orphan", task=[noop])

    site = _playbook("site", role=[web, db], task=[deploy])
    return {"role": [web, db, common, orphan], "playbook": [site]}
