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

"""
cli.py - Flux status tree and reconcile CLI.

Subcommands:
    status     Inspect reconciliation status (tree)
    reconcile  Trigger reconciliation (all, instance, kustomizations, helmreleases)

Environment Variables:
    - FLUXTREE_NAMESPACE (default: flux-system)
    - FLUXTREE_KUBECTL_TIMEOUT (default: 30)
    - FLUXTREE_COLOR (default: true)
    - FLUXTREE_SHOW_ORPHANS (default: true)
    - FLUXTREE_INSTANCE_NAME (default: flux)
    - FLUXTREE_MAX_RETRIES (default: 3)
    - FLUXTREE_RETRY_WAIT_SECONDS (default: 2)

Examples:
    # Dependency tree of the Kustomizations in flux-system
    fluxtree status tree

    # Same tree from a saved `kubectl get kustomization -o json`
    fluxtree status tree --from-file kustomizations.json --no-color

    # Machine-readable tree
    fluxtree status tree -o json

    # Reconcile everything
    fluxtree reconcile all
"""

from __future__ import annotations

import logging
import sys

import typer
from rich.markup import escape

from fluxtree import console
from fluxtree.commands import reconcile_cmd, status_cmd

app = typer.Typer(
    help="Flux reconciliation status tree and reconcile triggers.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.add_typer(status_cmd.app, name="status")
app.add_typer(reconcile_cmd.app, name="reconcile")


def main() -> None:
    try:
        app()
    except Exception as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
