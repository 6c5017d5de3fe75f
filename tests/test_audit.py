"""Tests for graph document loading and audit replay."""

import json
from pathlib import Path

import pytest

from pipecheck.audit import GraphAudit, load_graph_config, parse_graph_config
from pipecheck.config import GraphEdge, LogLevel
from pipecheck.exceptions import ConfigValidationError, GraphLoadError
from pipecheck.validator import RejectionReason

GRAPH_YAML = """
name: orders
description: Orders enrichment
logging:
  level: DEBUG
nodes:
  - id: src1
    type: source
  - id: strm1
    type: stream
  - id: filter1
    type: filter
  - id: strm2
    type: stream
  - id: sink1
    type: sink
edges:
  - source: src1
    target: strm1
  - source: strm1
    target: filter1
  - source: filter1
    target: strm2
  - source: strm2
    target: sink1
"""


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graph.yaml"
    path.write_text(GRAPH_YAML, encoding="utf-8")
    return path


class TestLoading:
    """Test reading graph documents."""

    def test_load_yaml(self, graph_file):
        config = load_graph_config(str(graph_file))

        assert config.name == "orders"
        assert config.logging.level == LogLevel.DEBUG
        assert [n.id for n in config.nodes] == ["src1", "strm1", "filter1", "strm2", "sink1"]
        assert config.edges[0] == GraphEdge(source="src1", target="strm1")

    def test_load_json_with_aliases(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text(
            json.dumps(
                {
                    "name": "json-graph",
                    "nodes": [{"id": "a", "type": "source"}, {"id": "b", "type": "stream"}],
                    "edges": [{"sourceId": "a", "targetId": "b"}],
                }
            ),
            encoding="utf-8",
        )

        config = load_graph_config(str(path))

        assert config.edges == [GraphEdge(source="a", target="b")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(GraphLoadError, match="Failed to load graph"):
            load_graph_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("nodes: [unclosed", encoding="utf-8")

        with pytest.raises(GraphLoadError, match="Invalid YAML"):
            load_graph_config(str(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(GraphLoadError, match="Expected a mapping"):
            load_graph_config(str(path))

    def test_schema_errors_are_listed(self, tmp_path):
        path = tmp_path / "schema.yaml"
        path.write_text("nodes:\n  - id: a\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_graph_config(str(path))

        err = exc_info.value
        assert err.file == str(path)
        assert any(e.startswith("name") for e in err.errors)
        assert any("nodes.0.type" in e for e in err.errors)

    def test_duplicate_node_ids(self):
        data = {
            "name": "dup",
            "nodes": [{"id": "a", "type": "stream"}, {"id": "a", "type": "sink"}],
        }
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_graph_config(data)

        assert "Duplicate node ids: a" in str(exc_info.value)

    def test_environment_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SINK_TYPE", "sink")
        path = tmp_path / "graph.yaml"
        path.write_text(
            "name: env-graph\n"
            "nodes:\n"
            "  - id: k\n"
            "    type: ${SINK_TYPE}\n"
            "environments:\n"
            "  prod:\n"
            "    name: env-graph-prod\n",
            encoding="utf-8",
        )

        config = load_graph_config(str(path), env="prod")

        assert config.name == "env-graph-prod"
        assert config.nodes[0].type == "sink"

    def test_imported_fragments_are_appended(self, tmp_path):
        (tmp_path / "connectors.yaml").write_text(
            "nodes:\n  - id: src1\n    type: source\n", encoding="utf-8"
        )
        main = tmp_path / "main.yaml"
        main.write_text(
            "name: composed\n"
            "imports:\n  - connectors.yaml\n"
            "nodes:\n  - id: strm1\n    type: stream\n"
            "edges:\n  - source: src1\n    target: strm1\n",
            encoding="utf-8",
        )

        config = load_graph_config(str(main))

        assert sorted(n.id for n in config.nodes) == ["src1", "strm1"]


class TestAudit:
    """Test replaying documents through the validator."""

    def test_clean_graph(self, graph_file):
        report = GraphAudit.from_yaml(str(graph_file)).run()

        assert report.is_clean
        assert len(report.accepted) == 4
        assert report.rejected == []

    def test_capacity_summary(self, graph_file):
        report = GraphAudit.from_yaml(str(graph_file)).run()

        filter_cap = report.capacity["filter1"]
        assert (filter_cap.inputs, filter_cap.outputs) == (1, 1)
        assert (filter_cap.max_inputs, filter_cap.max_outputs) == ("1", "1")
        assert not filter_cap.can_accept_input
        assert not filter_cap.can_have_output

        stream_cap = report.capacity["strm1"]
        assert stream_cap.max_inputs == "∞"
        assert stream_cap.can_accept_input

    def test_rejected_edges_are_not_committed(self):
        config = parse_graph_config(
            {
                "name": "conflicts",
                "nodes": [
                    {"id": "src1", "type": "source"},
                    {"id": "src2", "type": "source"},
                    {"id": "strm1", "type": "stream"},
                    {"id": "sink1", "type": "sink"},
                    {"id": "w", "type": "window"},
                    {"id": "f1", "type": "filter"},
                    {"id": "f2", "type": "filter"},
                ],
                "edges": [
                    {"source": "src1", "target": "strm1"},
                    {"source": "src1", "target": "strm1"},
                    {"source": "src2", "target": "strm1"},
                    {"source": "strm1", "target": "sink1"},
                    {"source": "w", "target": "f1"},
                    {"source": "w", "target": "f2"},
                    {"source": "ghost", "target": "f2"},
                ],
            }
        )

        report = GraphAudit(config).run()

        assert not report.is_clean
        assert report.accepted == [
            GraphEdge(source="src1", target="strm1"),
            GraphEdge(source="w", target="f1"),
        ]
        assert [f.verdict.code for f in report.rejected] == [
            RejectionReason.DUPLICATE,
            RejectionReason.CONNECTOR_CONFLICT,
            RejectionReason.CONNECTOR_CONFLICT,
            RejectionReason.OUTPUT_CAPACITY,
            RejectionReason.NODE_NOT_FOUND,
        ]
        assert report.capacity["w"].outputs == 1

    def test_unknown_types_are_reported(self):
        config = parse_graph_config(
            {
                "name": "custom",
                "nodes": [{"id": "a", "type": "stream"}, {"id": "b", "type": "webhook"}],
                "edges": [{"source": "a", "target": "b"}],
            }
        )

        report = GraphAudit(config).run()

        assert report.rejected[0].verdict.code == RejectionReason.UNKNOWN_TYPE
        assert report.capacity["b"].max_inputs == "?"
        assert not report.capacity["b"].can_accept_input


def test_bundled_example_is_clean():
    example = Path(__file__).resolve().parents[1] / "examples" / "orders_graph.yaml"

    report = GraphAudit.from_yaml(str(example), env="dev").run()

    assert report.is_clean
    assert report.capacity["enrich"].inputs == 2
    assert not report.capacity["enrich"].can_accept_input
