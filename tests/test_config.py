"""Tests for ansible_viz.config — options file and overrides."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import pytest

from ansible_viz.config import (
    ConfigError,
    GraphOptions,
    compile_pattern,
    load_options,
    merge_options,
    options_from_dict,
)

if TYPE_CHECKING:
    from pathlib import Path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "ansible-viz.yml"
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class TestCompilePattern:
    def test_empty_means_none(self) -> None:
        assert compile_pattern(None, name="x") is None
        assert compile_pattern("", name="x") is None

    def test_compiles(self) -> None:
        pattern = compile_pattern("role:a|role:b", name="x")
        assert pattern is not None
        assert pattern.search("role:b")

    def test_invalid(self) -> None:
        with pytest.raises(ConfigError, match="Invalid exclude-nodes pattern"):
            compile_pattern("[", name="exclude-nodes")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestOptionsFromDict:
    def test_all_keys(self) -> None:
        options = options_from_dict({
            "vars": False,
            "usage": False,
            "legend": False,
            "exclude_nodes": "role:legacy-.*",
            "exclude_edges": None,
        })
        assert options.show_vars is False
        assert options.show_usage is False
        assert options.with_legend is False
        assert options.exclude_nodes == re.compile("role:legacy-.*")
        assert options.exclude_edges is None

    def test_empty(self) -> None:
        assert options_from_dict({}) == GraphOptions()

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown config key 'colour'"):
            options_from_dict({"colour": "red"})

    def test_bool_type_checked(self) -> None:
        with pytest.raises(ConfigError, match="'vars' must be true or false"):
            options_from_dict({"vars": "no"})

    def test_pattern_type_checked(self) -> None:
        with pytest.raises(ConfigError, match="regular expression"):
            options_from_dict({"exclude_edges": 3})


class TestLoadOptions:
    def test_no_path(self) -> None:
        assert load_options(None) == GraphOptions()

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_options(tmp_path / "absent.yml") == GraphOptions()

    def test_empty_file(self, tmp_path: Path) -> None:
        assert load_options(_write_config(tmp_path, "")) == GraphOptions()

    def test_reads_yaml(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path, "usage: false\nexclude_nodes: 'task:.*/debug'\n")
        options = load_options(path)
        assert options.show_usage is False
        assert options.show_vars is True
        assert options.exclude_nodes is not None
        assert options.exclude_nodes.pattern == "task:.*/debug"

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_options(_write_config(tmp_path, "- vars\n- usage\n"))

    def test_broken_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to read"):
            load_options(_write_config(tmp_path, "vars: [unclosed\n"))


class TestMergeOptions:
    def test_none_keeps_base(self) -> None:
        base = GraphOptions(show_vars=False)
        assert merge_options(base, show_vars=None, show_usage=None) == base

    def test_overrides(self) -> None:
        base = GraphOptions(show_vars=False, with_legend=False)
        merged = merge_options(base, show_vars=True)
        assert merged.show_vars is True
        assert merged.with_legend is False
        assert base.show_vars is False
