# /*
# Copyright 2026 The fluxtree Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Fetch Kustomization status from the cluster or from a snapshot file."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from fluxtree import logger
from fluxtree.config import FluxTreeConfig
from fluxtree.constants import CONDITION_READY, RESOURCE_KUSTOMIZATION
from fluxtree.errors import InputUnavailable
from fluxtree.models import Node
from fluxtree.utils import require_command, run_kubectl


def _mapping(resource: dict, key: str, owner: str) -> dict:
    """Return ``resource[key]`` as a dict, treating absent/null as empty."""
    value = resource.get(key) or {}
    if not isinstance(value, dict):
        raise InputUnavailable(f"{owner}: {key} must be a mapping, got {value!r}")
    return value


def ready_condition(resource: dict, owner: str = "Kustomization") -> dict | None:
    """Return the Ready condition of a Flux resource, or None if absent."""
    conditions = _mapping(resource, "status", owner).get("conditions") or []
    if not isinstance(conditions, list):
        raise InputUnavailable(f"{owner}: status.conditions must be a list, got {conditions!r}")
    for condition in conditions:
        if isinstance(condition, dict) and condition.get("type") == CONDITION_READY:
            return condition
    return None


def flatten_kustomization(resource: dict) -> dict:
    """Flatten a Kustomization object into a name/ready/message/dependencies record.

    Args:
        resource: One item of ``kubectl get kustomization -o json``.

    Returns:
        Record with ``ready`` set to None when there is no Ready condition.

    Raises:
        InputUnavailable: If the resource is not a mapping, has no
            ``metadata.name``, or has a malformed ``spec.dependsOn``.
    """
    if not isinstance(resource, dict):
        raise InputUnavailable(f"Kustomization is not a mapping: {resource!r}")
    name = _mapping(resource, "metadata", "Kustomization").get("name")
    if not isinstance(name, str) or not name:
        raise InputUnavailable(f"Kustomization without metadata.name: {resource!r}")
    condition = ready_condition(resource, name) or {}
    depends_on = _mapping(resource, "spec", name).get("dependsOn") or []
    if not isinstance(depends_on, list):
        raise InputUnavailable(f"{name}: spec.dependsOn must be a list, got {depends_on!r}")
    dependencies = []
    for dep in depends_on:
        dep_name = dep.get("name") if isinstance(dep, dict) else None
        if not isinstance(dep_name, str) or not dep_name:
            raise InputUnavailable(f"{name}: spec.dependsOn entry without a string name: {dep!r}")
        dependencies.append(dep_name)
    return {
        "name": name,
        "ready": condition.get("status"),
        "message": condition.get("message") or "",
        "dependencies": dependencies,
    }


def parse_snapshot(document: object) -> list[Node]:
    """Turn a parsed snapshot document into nodes.

    Accepts a Kubernetes ``List`` (``{"items": [...]}``) of Kustomizations
    or a plain list of flattened records. Any malformed entry aborts the
    whole parse.

    Raises:
        InputUnavailable: If the document has neither shape or an entry is malformed.
    """
    if isinstance(document, dict) and "items" in document:
        items = document.get("items") or []
        if not isinstance(items, list):
            raise InputUnavailable(f"Snapshot items must be a list, got {type(items).__name__}")
        records = [flatten_kustomization(item) for item in items]
    elif isinstance(document, list):
        records = []
        for i, item in enumerate(document):
            if not isinstance(item, dict):
                raise InputUnavailable(f"Snapshot record {i} is not a mapping: {item!r}")
            records.append(flatten_kustomization(item) if "metadata" in item else item)
    else:
        raise InputUnavailable("Snapshot is neither a Kubernetes List nor a list of records")

    try:
        return [Node.from_record(record) for record in records]
    except ValueError as err:
        raise InputUnavailable(f"Malformed status record: {err}") from err


def fetch_nodes(cfg: FluxTreeConfig) -> list[Node]:
    """Query the cluster for Kustomizations in ``cfg.namespace``.

    Args:
        cfg: Status tree configuration with namespace and kubectl timeout.

    Returns:
        Nodes in the order kubectl listed them.

    Raises:
        InputUnavailable: If kubectl is missing, fails, or returns bad JSON.
    """
    try:
        require_command("kubectl")
    except RuntimeError as err:
        raise InputUnavailable(str(err)) from err

    logger.debug("Fetching Kustomizations in namespace %s", cfg.namespace)
    ok, stdout, stderr = run_kubectl(
        ["-n", cfg.namespace, "get", RESOURCE_KUSTOMIZATION, "-o", "json"],
        timeout=cfg.kubectl_timeout,
    )
    if not ok:
        raise InputUnavailable(f"kubectl get {RESOURCE_KUSTOMIZATION} failed: {stderr.strip()}")
    try:
        document = json.loads(stdout)
    except json.JSONDecodeError as err:
        raise InputUnavailable(f"kubectl returned invalid JSON: {err}") from err
    nodes = parse_snapshot(document)
    logger.debug("Fetched %d Kustomizations", len(nodes))
    return nodes


def load_nodes(path: Path) -> list[Node]:
    """Read nodes from a JSON or YAML snapshot file.

    Raises:
        InputUnavailable: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as err:
        raise InputUnavailable(f"Cannot read snapshot {path}: {err}") from err
    except yaml.YAMLError as err:
        raise InputUnavailable(f"Cannot parse snapshot {path}: {err}") from err
    return parse_snapshot(document)
