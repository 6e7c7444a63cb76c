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

"""Text tree and JSON rendering for the dependency forest."""

from __future__ import annotations

import json
import sys
from collections import Counter
from typing import TextIO

from fluxtree.config import RenderOptions
from fluxtree.constants import (
    ANSI_RESET,
    CONNECTOR_BRANCH,
    CONNECTOR_LAST,
    EXTENSION_BRANCH,
    EXTENSION_LAST,
    ORPHANS_HEADER,
)
from fluxtree.forest import DependencyForest
from fluxtree.models import Node, StatusClass


class TreeRenderer:
    """Stream the forest as a box-drawn tree, one line per visited node.

    Lines are written as the depth-first walk reaches each node, so nothing
    is buffered beyond what the output stream itself does.
    """

    def __init__(
        self,
        forest: DependencyForest,
        options: RenderOptions | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.forest = forest
        self.options = options or RenderOptions()
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def format_node(self, node: Node) -> str:
        """Format the glyph and name of a node, coloured when enabled."""
        status = node.status
        label = f"{status.glyph} {node.name}"
        if self.options.color:
            return f"{status.color}{label}{ANSI_RESET}"
        return label

    def render(self) -> int:
        """Write the whole tree to the stream.

        The cycle check runs before the first write, so a cyclic snapshot
        produces no partial output.

        Returns:
            Number of lines written.

        Raises:
            CycleInDependencies: If the snapshot's dependencies form a cycle.
        """
        self.forest.check_acyclic()
        count = 0
        for root in self.forest.roots():
            count += self._render_subtree(root, "", "")

        orphans = self.forest.orphans() if self.options.show_orphans else []
        if orphans:
            self._write("")
            self._write(ORPHANS_HEADER)
            for orphan in orphans:
                missing = ", ".join(self.forest.missing_dependencies(orphan))
                count += self._render_subtree(orphan, "", "", suffix=f" (missing: {missing})")
        return count

    def _render_subtree(self, node: Node, prefix: str, connector: str, suffix: str = "") -> int:
        self._write(f"{prefix}{connector}{self.format_node(node)}{suffix}")

        if not connector:
            extension = ""
        elif connector == CONNECTOR_LAST:
            extension = EXTENSION_LAST
        else:
            extension = EXTENSION_BRANCH
        child_prefix = prefix + extension

        children = self.forest.children_of(node.name)
        count = 1
        for i, child in enumerate(children):
            child_connector = CONNECTOR_LAST if i == len(children) - 1 else CONNECTOR_BRANCH
            count += self._render_subtree(child, child_prefix, child_connector)
        return count

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")


def render_text(
    forest: DependencyForest,
    options: RenderOptions | None = None,
    stream: TextIO | None = None,
) -> int:
    """Render the forest as a text tree. Returns the number of node lines."""
    return TreeRenderer(forest, options, stream).render()


def render_json(forest: DependencyForest, options: RenderOptions | None = None) -> str:
    """Render the forest as a JSON document.

    Raises:
        CycleInDependencies: If the snapshot's dependencies form a cycle.
    """
    options = options or RenderOptions()
    forest.check_acyclic()
    counts = Counter(node.status for node in forest.nodes)
    orphans = forest.orphans() if options.show_orphans else []
    output = {
        "roots": [_node_to_dict(forest, root) for root in forest.roots()],
        "orphans": [
            {**_node_to_dict(forest, orphan), "missing": forest.missing_dependencies(orphan)}
            for orphan in orphans
        ],
        "summary": {
            "total": len(forest),
            **{status.value.lower(): counts.get(status, 0) for status in StatusClass},
        },
    }
    return json.dumps(output, indent=2, ensure_ascii=False)


def _node_to_dict(forest: DependencyForest, node: Node) -> dict:
    """Convert a node and its descendants to a JSON-serializable dictionary."""
    return {
        "name": node.name,
        "ready": node.ready.value,
        "status": node.status.value,
        "message": node.message,
        "dependencies": list(node.dependencies),
        "children": [_node_to_dict(forest, child) for child in forest.children_of(node.name)],
    }
