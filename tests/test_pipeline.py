"""Tests for ansible_viz.pipeline and ansible_viz.graph.export."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

import pytest

from ansible_viz.config import GraphOptions
from ansible_viz.graph.decorate import ROLE_UNUSED_SUFFIX
from ansible_viz.graph.export import graph_to_dict, graph_to_json
from ansible_viz.graph.model import DanglingEndpointError, EdgeKind, NodeType
from ansible_viz.graph.styles import Category
from ansible_viz.pipeline import (
    GRAPH_TITLE,
    build_document,
    graph_from_data,
    run_pipeline,
)

if TYPE_CHECKING:
    from types import SimpleNamespace


# ===========================================================================
# End-to-end scenarios
# ===========================================================================


class TestScenarios:
    def test_fact_set_but_never_used(self, records: SimpleNamespace) -> None:
        var = records.var("v", "r/t", defined=True, used=False)
        task = records.task("t", "r", var=[var])
        role = records.role("r", task=[task])
        play = records.playbook("p", role=[role])

        result = run_pipeline({"role": [role], "playbook": [play]})
        g = result.graph

        assert [(e.src, e.dst, e.attrs["tooltip"]) for e in g.edges] == [
            ("playbook:p", "role:r", "includes"),
            ("role:r", "task:r/t", "calls task"),
            ("task:r/t", "var:r/t/v", "sets fact"),
        ]
        assert result.decoration.categories["var:r/t/v"] is Category.VAR_UNUSED

    def test_main_varset_replaced_by_direct_edge(self, records: SimpleNamespace) -> None:
        var = records.var("v", "r/vars")
        task = records.task("t", "r", uses=[var])
        role = records.role("r", task=[task], varset=[records.varset("main", "r", var=[var])])

        g = graph_from_data({"role": [role], "playbook": []})

        assert "varset:r/main" not in g
        defines = [e for e in g.incoming("var:r/vars/v") if e.kind is EdgeKind.DEFINES_VAR]
        assert [(e.src, e.attrs["tooltip"]) for e in defines] == [("role:r", "defines var")]
        assert g.by_id("role:r").attrs["tooltip"] == "Role role:r" + ROLE_UNUSED_SUFFIX

    def test_dangling_reference_aborts(self, records: SimpleNamespace) -> None:
        data = {"role": [], "playbook": [records.playbook("p", task=["task:x/y"])]}
        with pytest.raises(DanglingEndpointError, match="task:x/y"):
            run_pipeline(data)


# ===========================================================================
# Options
# ===========================================================================


class TestRunPipeline:
    def test_defaults(self, sample_data: dict[str, Any]) -> None:
        result = run_pipeline(sample_data)
        g = result.graph
        assert g.name == "dependencies"
        assert g.is_cluster is True
        assert g.attrs == {
            "tooltip": " ",
            "label": GRAPH_TITLE,
            "fontsize": 36,
            "rankdir": "LR",
        }
        assert len(result.elision.elided) == 3
        assert len(g) == 14
        assert result.vars_dropped == 0

    def test_without_vars(self, sample_data: dict[str, Any]) -> None:
        result = run_pipeline(sample_data, GraphOptions(show_vars=False))
        assert result.vars_dropped == 5
        assert not result.graph.find_nodes(lambda n: n.type is NodeType.VAR)
        # Classification already happened.
        assert result.decoration.categories["var:web/defaults/debug"] is Category.VAR_UNUSED

    def test_without_usage(self, sample_data: dict[str, Any]) -> None:
        g = graph_from_data(sample_data, GraphOptions(show_usage=False))
        assert not [e for e in g.edges if e.kind is EdgeKind.USES_VAR]

    def test_exclusions(self, sample_data: dict[str, Any]) -> None:
        options = GraphOptions(
            exclude_nodes=re.compile("orphan"),
            exclude_edges=re.compile("calls extra task"),
        )
        result = run_pipeline(sample_data, options)
        assert result.nodes_excluded == 2
        assert result.edges_excluded == 1
        assert "role:orphan" not in result.graph
        assert result.graph.incoming("role:common") == []
        # Decoration ran before the edge was removed.
        assert not result.graph.by_id("role:common").attrs["tooltip"].endswith(
            ROLE_UNUSED_SUFFIX
        )


class TestBuildDocument:
    def test_with_legend(self, sample_data: dict[str, Any]) -> None:
        graph = graph_from_data(sample_data)
        document = build_document(graph)
        assert document.attrs == {"rankdir": "LR", "ranksep": 2, "tooltip": " "}
        assert [sub.name for sub in document.subgraphs] == ["dependencies", "legend"]
        assert len(document) == 0

    def test_without_legend(self, sample_data: dict[str, Any]) -> None:
        document = build_document(graph_from_data(sample_data), with_legend=False)
        assert [sub.name for sub in document.subgraphs] == ["dependencies"]


# ===========================================================================
# Export
# ===========================================================================


class TestExport:
    def test_graph_to_dict(self, sample_data: dict[str, Any]) -> None:
        data = graph_to_dict(graph_from_data(sample_data))
        assert data["name"] == "dependencies"
        assert data["cluster"] is True
        assert data["subgraphs"] == []

        nodes = {n["id"]: n for n in data["nodes"]}
        assert nodes["playbook:site"]["rank"] == "source"
        assert nodes["var:web/defaults/port"]["rank"] == "sink"
        assert nodes["role:web"]["rank"] is None
        assert nodes["role:web"]["type"] == "role"
        assert nodes["var:web/defaults/debug"]["attrs"]["tooltip"].endswith(". UNUSED.")

        first_edge = data["edges"][0]
        assert first_edge == {
            "src": "playbook:site",
            "dst": "role:web",
            "ordinal": 0,
            "kind": "includes",
            "attrs": {"tooltip": "includes"},
        }

    def test_document_round_trips_through_json(self, sample_data: dict[str, Any]) -> None:
        document = build_document(graph_from_data(sample_data))
        parsed = json.loads(graph_to_json(document))
        assert [sub["name"] for sub in parsed["subgraphs"]] == ["dependencies", "legend"]
        legend = parsed["subgraphs"][1]
        assert legend["cluster"] is True
        assert all(n["type"] is None for n in legend["nodes"])
