"""Shared fixtures for the fluxtree test suite."""

import os

import pytest

from fluxtree.models import Node, ReadyState


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep FLUXTREE_* variables from the developer shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("FLUXTREE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def example_nodes():
    """A ready root with a ready child, a blocked child, and a failed grandchild."""
    return [
        Node("A", ReadyState.READY),
        Node("B", ReadyState.READY, dependencies=("A",)),
        Node("C", ReadyState.NOT_READY, "waiting for dependency infra", ("A",)),
        Node("D", ReadyState.NOT_READY, "field required", ("B",)),
    ]


@pytest.fixture
def kustomization_list():
    """Output of ``kubectl get kustomization -o json`` for three resources."""
    return {
        "apiVersion": "v1",
        "kind": "List",
        "items": [
            {
                "metadata": {"name": "infra", "namespace": "flux-system"},
                "spec": {"path": "./infra"},
                "status": {
                    "conditions": [
                        {"type": "Reconciling", "status": "False", "message": "done"},
                        {"type": "Ready", "status": "True", "message": "Applied revision: main@sha1:abc"},
                    ]
                },
            },
            {
                "metadata": {"name": "apps", "namespace": "flux-system"},
                "spec": {"dependsOn": [{"name": "infra"}]},
                "status": {
                    "conditions": [
                        {
                            "type": "Ready",
                            "status": "False",
                            "message": "dependency 'flux-system/infra' is not ready",
                        },
                    ]
                },
            },
            {
                "metadata": {"name": "monitoring", "namespace": "flux-system"},
                "spec": {"dependsOn": [{"name": "infra"}, {"name": "crds"}]},
            },
        ],
    }
