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

"""Trigger Flux reconciliation of the FluxInstance, Kustomizations, and HelmReleases."""

from __future__ import annotations

import json

import sh
from rich.panel import Panel
from tenacity import retry, stop_after_attempt, wait_fixed

from fluxtree import console, logger
from fluxtree.config import ReconcileConfig
from fluxtree.constants import (
    KIND_FLUX_INSTANCE,
    KIND_HELM_RELEASE,
    KIND_KUSTOMIZATION,
    RESOURCE_HELM_RELEASE,
    RESOURCE_KUSTOMIZATION,
)
from fluxtree.utils import require_command, run_kubectl


def check_prerequisites() -> None:
    """Ensure kubectl and flux-operator are on PATH."""
    for cmd in ("kubectl", "flux-operator"):
        require_command(cmd)


# ============================================================================
# Resource discovery
# ============================================================================

def list_kustomizations(namespace: str) -> list[str]:
    """List Kustomization names in *namespace*."""
    output = str(sh.kubectl(
        "-n", namespace, "get", RESOURCE_KUSTOMIZATION,
        "-o", "jsonpath={.items[*].metadata.name}",
    )).strip()
    return output.split()


def list_helmreleases() -> list[tuple[str, str]]:
    """List HelmReleases across all namespaces.

    Returns:
        List of (namespace, name) tuples in kubectl order.

    Raises:
        RuntimeError: If kubectl fails or returns unusable JSON.
    """
    ok, stdout, stderr = run_kubectl(["get", RESOURCE_HELM_RELEASE, "--all-namespaces", "-o", "json"])
    if not ok:
        raise RuntimeError(f"kubectl get {RESOURCE_HELM_RELEASE} failed: {stderr.strip()}")
    try:
        output = json.loads(stdout)
        return [
            (item["metadata"]["namespace"], item["metadata"]["name"])
            for item in output.get("items", [])
        ]
    except (json.JSONDecodeError, AttributeError, KeyError, TypeError) as err:
        raise RuntimeError(f"Unexpected kubectl get {RESOURCE_HELM_RELEASE} output: {err}") from err


# ============================================================================
# Reconcile triggers
# ============================================================================

def reconcile_resource(namespace: str, kind: str, name: str, cfg: ReconcileConfig) -> None:
    """Ask flux-operator to reconcile one resource, retrying on failure.

    Args:
        namespace: Namespace of the resource.
        kind: Flux kind, e.g. ``Kustomization``.
        name: Resource name.
        cfg: Reconcile configuration with retry settings.

    Raises:
        RuntimeError: If every attempt fails.
    """

    @retry(
        stop=stop_after_attempt(cfg.max_retries),
        wait=wait_fixed(cfg.retry_wait_seconds),
        reraise=True,
    )
    def _attempt() -> None:
        logger.debug("Reconciling %s/%s in %s", kind, name, namespace)
        sh.flux_operator("-n", namespace, "reconcile", "resource", f"{kind}/{name}")

    try:
        _attempt()
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"Failed to reconcile {kind}/{name} in {namespace}") from err


def reconcile_instance(cfg: ReconcileConfig) -> None:
    """Reconcile the FluxInstance."""
    console.print(Panel.fit("Reconciling FluxInstance", style="bold blue"))
    reconcile_resource(cfg.namespace, KIND_FLUX_INSTANCE, cfg.instance_name, cfg)
    console.print(f"[green]✅ {KIND_FLUX_INSTANCE}/{cfg.instance_name}[/green]")


def reconcile_kustomizations(cfg: ReconcileConfig) -> int:
    """Reconcile every Kustomization in the configured namespace.

    Returns:
        Number of Kustomizations reconciled.
    """
    console.print(Panel.fit("Reconciling Kustomizations", style="bold blue"))
    names = list_kustomizations(cfg.namespace)
    for name in names:
        console.print(f"  {KIND_KUSTOMIZATION}/{name}")
        reconcile_resource(cfg.namespace, KIND_KUSTOMIZATION, name, cfg)
    console.print(f"[green]✅ Reconciled {len(names)} Kustomizations[/green]")
    return len(names)


def reconcile_helmreleases(cfg: ReconcileConfig) -> int:
    """Reconcile every HelmRelease in every namespace.

    Returns:
        Number of HelmReleases reconciled.
    """
    console.print(Panel.fit("Reconciling HelmReleases", style="bold blue"))
    releases = list_helmreleases()
    for namespace, name in releases:
        console.print(f"  {KIND_HELM_RELEASE}/{name} ({namespace})")
        reconcile_resource(namespace, KIND_HELM_RELEASE, name, cfg)
    console.print(f"[green]✅ Reconciled {len(releases)} HelmReleases[/green]")
    return len(releases)


def reconcile_all(cfg: ReconcileConfig) -> None:
    """Reconcile the FluxInstance, then Kustomizations, then HelmReleases."""
    reconcile_instance(cfg)
    reconcile_kustomizations(cfg)
    reconcile_helmreleases(cfg)
    console.print("[green]✅ Reconciliation triggered for all resources[/green]")
