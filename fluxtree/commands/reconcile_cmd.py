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

"""Reconcile subcommands (all, instance, kustomizations, helmreleases)."""

from __future__ import annotations

import typer

from fluxtree.config import ReconcileConfig
from fluxtree.reconcile import (
    check_prerequisites,
    reconcile_all,
    reconcile_helmreleases,
    reconcile_instance,
    reconcile_kustomizations,
)

app = typer.Typer(help="Trigger Flux reconciliation.")


def _resolve_config(namespace: str | None, max_retries: int | None) -> ReconcileConfig:
    cfg = ReconcileConfig()
    overrides: dict = {}
    if namespace is not None:
        overrides["namespace"] = namespace
    if max_retries is not None:
        overrides["max_retries"] = max_retries
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    return cfg


@app.command("all")
def all_resources(
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Flux namespace"),
    max_retries: int | None = typer.Option(None, "--max-retries", help="Attempts per resource"),
) -> None:
    """Reconcile the FluxInstance, all Kustomizations, and all HelmReleases."""
    cfg = _resolve_config(namespace, max_retries)
    check_prerequisites()
    reconcile_all(cfg)


@app.command()
def instance(
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Flux namespace"),
    name: str | None = typer.Option(None, "--name", help="FluxInstance name"),
    max_retries: int | None = typer.Option(None, "--max-retries", help="Attempts per resource"),
) -> None:
    """Reconcile the FluxInstance."""
    cfg = _resolve_config(namespace, max_retries)
    if name is not None:
        cfg = cfg.model_copy(update={"instance_name": name})
    check_prerequisites()
    reconcile_instance(cfg)


@app.command()
def kustomizations(
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Flux namespace"),
    max_retries: int | None = typer.Option(None, "--max-retries", help="Attempts per resource"),
) -> None:
    """Reconcile every Kustomization in the Flux namespace."""
    cfg = _resolve_config(namespace, max_retries)
    check_prerequisites()
    reconcile_kustomizations(cfg)


@app.command()
def helmreleases(
    max_retries: int | None = typer.Option(None, "--max-retries", help="Attempts per resource"),
) -> None:
    """Reconcile every HelmRelease in every namespace."""
    cfg = _resolve_config(None, max_retries)
    check_prerequisites()
    reconcile_helmreleases(cfg)
