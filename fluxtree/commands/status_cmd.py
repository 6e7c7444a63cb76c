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

"""Status subcommands (tree)."""

from __future__ import annotations

import sys
from pathlib import Path

import typer

from fluxtree.config import FluxTreeConfig, RenderOptions
from fluxtree.constants import OUTPUT_FORMATS, OUTPUT_JSON
from fluxtree.forest import DependencyForest
from fluxtree.renderer import render_json, render_text
from fluxtree.status_source import fetch_nodes, load_nodes

app = typer.Typer(help="Inspect Flux reconciliation status.")


def ensure_utf8_stdout() -> None:
    """Switch stdout to UTF-8 so tree glyphs survive non-UTF-8 locales."""
    encoding = (getattr(sys.stdout, "encoding", None) or "").lower().replace("-", "")
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if encoding != "utf8" and reconfigure is not None:
        reconfigure(encoding="utf-8")


@app.command()
def tree(
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Kustomization namespace"),
    from_file: Path | None = typer.Option(
        None, "--from-file", "-f", help="Read a JSON/YAML snapshot instead of querying the cluster"),
    output: str = typer.Option("text", "--output", "-o", help="Output format: text or json"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable ANSI colours"),
    hide_orphans: bool = typer.Option(
        False, "--hide-orphans", help="Do not list nodes whose dependencies are all missing"),
) -> None:
    """Render Kustomizations as a dependency tree with health glyphs."""
    if output not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"must be one of {', '.join(OUTPUT_FORMATS)}", param_hint="--output")

    cfg = FluxTreeConfig()
    overrides: dict = {}
    if namespace is not None:
        overrides["namespace"] = namespace
    if no_color:
        overrides["color"] = False
    if hide_orphans:
        overrides["show_orphans"] = False
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    nodes = load_nodes(from_file) if from_file is not None else fetch_nodes(cfg)
    forest = DependencyForest(nodes)
    options = RenderOptions.from_config(cfg, output=output)

    ensure_utf8_stdout()
    if options.output == OUTPUT_JSON:
        sys.stdout.write(render_json(forest, options) + "\n")
    else:
        render_text(forest, options)
