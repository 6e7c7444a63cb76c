"""Tests for status_source: flattening, fetch_nodes, load_nodes."""

import json
from unittest.mock import patch

import pytest

from fluxtree.config import FluxTreeConfig
from fluxtree.errors import InputUnavailable
from fluxtree.models import Node, ReadyState
from fluxtree.status_source import (
    fetch_nodes,
    flatten_kustomization,
    load_nodes,
    parse_snapshot,
    ready_condition,
)


class TestFlatten:
    def test_picks_ready_condition(self, kustomization_list):
        cond = ready_condition(kustomization_list["items"][0])
        assert cond["status"] == "True"

    def test_no_status_yields_none(self, kustomization_list):
        record = flatten_kustomization(kustomization_list["items"][2])
        assert record == {
            "name": "monitoring",
            "ready": None,
            "message": "",
            "dependencies": ["infra", "crds"],
        }

    def test_missing_name_raises(self):
        with pytest.raises(InputUnavailable, match="metadata.name"):
            flatten_kustomization({"metadata": {}})


class TestParseSnapshot:
    def test_kubernetes_list(self, kustomization_list):
        nodes = parse_snapshot(kustomization_list)
        assert nodes == [
            Node("infra", ReadyState.READY, "Applied revision: main@sha1:abc", ()),
            Node("apps", ReadyState.NOT_READY, "dependency 'flux-system/infra' is not ready", ("infra",)),
            Node("monitoring", ReadyState.UNKNOWN, "", ("infra", "crds")),
        ]

    def test_empty_list(self):
        assert parse_snapshot({"items": []}) == []

    def test_flattened_records(self):
        nodes = parse_snapshot([{"name": "a", "ready": "True", "dependencies": ""}])
        assert nodes == [Node("a", ReadyState.READY)]

    def test_unknown_shape_raises(self):
        with pytest.raises(InputUnavailable, match="neither"):
            parse_snapshot("not a snapshot")

    def test_record_without_name_raises(self):
        with pytest.raises(InputUnavailable, match="Malformed"):
            parse_snapshot([{"ready": "True"}])


class TestFetchNodes:
    @patch("fluxtree.status_source.require_command")
    @patch("fluxtree.status_source.run_kubectl")
    def test_queries_configured_namespace(self, mock_kubectl, _mock_require, kustomization_list):
        mock_kubectl.return_value = (True, json.dumps(kustomization_list), "")
        nodes = fetch_nodes(FluxTreeConfig(namespace="gitops", kubectl_timeout=5))
        assert [n.name for n in nodes] == ["infra", "apps", "monitoring"]
        mock_kubectl.assert_called_once_with(
            ["-n", "gitops", "get", "kustomization", "-o", "json"], timeout=5,
        )

    @patch("fluxtree.status_source.require_command")
    @patch("fluxtree.status_source.run_kubectl")
    def test_kubectl_failure(self, mock_kubectl, _mock_require):
        mock_kubectl.return_value = (False, "", "connection refused\n")
        with pytest.raises(InputUnavailable, match="connection refused"):
            fetch_nodes(FluxTreeConfig())

    @patch("fluxtree.status_source.require_command")
    @patch("fluxtree.status_source.run_kubectl")
    def test_invalid_json(self, mock_kubectl, _mock_require):
        mock_kubectl.return_value = (True, "{not json", "")
        with pytest.raises(InputUnavailable, match="invalid JSON"):
            fetch_nodes(FluxTreeConfig())

    @patch("fluxtree.status_source.require_command", side_effect=RuntimeError("Required command 'kubectl' not found"))
    def test_missing_kubectl(self, _mock_require):
        with pytest.raises(InputUnavailable, match="kubectl"):
            fetch_nodes(FluxTreeConfig())


class TestLoadNodes:
    def test_yaml_records(self, tmp_path):
        path = tmp_path / "snapshot.yaml"
        path.write_text(
            "- name: a\n"
            "  ready: \"True\"\n"
            "- name: b\n"
            "  ready: \"False\"\n"
            "  message: boom\n"
            "  dependencies: a\n",
            encoding="utf-8",
        )
        assert load_nodes(path) == [
            Node("a", ReadyState.READY),
            Node("b", ReadyState.NOT_READY, "boom", ("a",)),
        ]

    def test_json_list(self, tmp_path, kustomization_list):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(kustomization_list), encoding="utf-8")
        assert len(load_nodes(path)) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputUnavailable, match="Cannot read"):
            load_nodes(tmp_path / "nope.json")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(InputUnavailable, match="Cannot parse"):
            load_nodes(path)


class TestMalformedSnapshots:
    def test_non_mapping_item_in_list(self):
        with pytest.raises(InputUnavailable, match="not a mapping"):
            parse_snapshot({"items": ["oops"]})

    def test_items_not_a_list(self):
        with pytest.raises(InputUnavailable, match="items must be a list"):
            parse_snapshot({"items": {"name": "a"}})

    def test_non_mapping_record_is_not_dropped(self):
        with pytest.raises(InputUnavailable, match="Snapshot record 0 is not a mapping"):
            parse_snapshot(["oops", {"name": "b"}])

    def test_numeric_dependencies(self):
        with pytest.raises(InputUnavailable, match="a: dependencies must be a string or a list"):
            parse_snapshot([{"name": "a", "dependencies": 5}])

    def test_numeric_dependency_in_list(self):
        with pytest.raises(InputUnavailable, match="dependency name must be a string"):
            parse_snapshot([{"name": "a", "dependencies": ["b", 3]}])

    def test_non_string_ready(self):
        with pytest.raises(InputUnavailable, match="ready must be a string"):
            parse_snapshot([{"name": "a", "ready": 1}])

    def test_depends_on_name_not_a_string(self):
        item = {"metadata": {"name": "apps"}, "spec": {"dependsOn": [{"name": 7}]}}
        with pytest.raises(InputUnavailable, match="apps: spec.dependsOn entry"):
            parse_snapshot({"items": [item]})

    def test_depends_on_not_a_list(self):
        item = {"metadata": {"name": "apps"}, "spec": {"dependsOn": "infra"}}
        with pytest.raises(InputUnavailable, match="spec.dependsOn must be a list"):
            parse_snapshot({"items": [item]})

    def test_status_not_a_mapping(self):
        item = {"metadata": {"name": "apps"}, "status": "Ready"}
        with pytest.raises(InputUnavailable, match="apps: status must be a mapping"):
            parse_snapshot({"items": [item]})

    def test_metadata_not_a_mapping(self):
        with pytest.raises(InputUnavailable, match="metadata must be a mapping"):
            parse_snapshot({"items": [{"metadata": "apps"}]})
