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

"""Dependency forest built from a snapshot of Kustomization nodes."""

from __future__ import annotations

from collections.abc import Iterable

from fluxtree import logger
from fluxtree.errors import CycleInDependencies, InputUnavailable
from fluxtree.models import Node

_WHITE, _GREY, _BLACK = 0, 1, 2


class DependencyForest:
    """Read-only parent/children view over one snapshot of nodes.

    A node is a root when its dependency list is empty. Its children are the
    nodes that list it in ``dependencies``, in snapshot order. Names that do
    not exist in the snapshot are tolerated and simply have no children.
    """

    def __init__(self, nodes: Iterable[Node]) -> None:
        self._nodes: tuple[Node, ...] = tuple(nodes)
        self._index: dict[str, int] = {}
        for pos, node in enumerate(self._nodes):
            if node.name in self._index:
                raise InputUnavailable(f"Duplicate node name in snapshot: {node.name}")
            self._index[node.name] = pos

        children: dict[str, list[Node]] = {}
        for node in self._nodes:
            for dep in dict.fromkeys(node.dependencies):
                children.setdefault(dep, []).append(node)
        self._children: dict[str, tuple[Node, ...]] = {k: tuple(v) for k, v in children.items()}
        logger.debug("Built forest with %d nodes, %d parents", len(self._nodes), len(self._children))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def get(self, name: str) -> Node | None:
        pos = self._index.get(name)
        return None if pos is None else self._nodes[pos]

    def roots(self) -> list[Node]:
        """Return nodes with no dependencies, in snapshot order."""
        return [node for node in self._nodes if node.is_root]

    def children_of(self, name: str) -> list[Node]:
        """Return nodes that depend on *name*, in snapshot order.

        Unknown names yield an empty list.
        """
        return list(self._children.get(name, ()))

    def missing_dependencies(self, node: Node) -> list[str]:
        """Return the dependency names of *node* absent from the snapshot."""
        return [dep for dep in node.dependencies if dep not in self._index]

    def orphans(self) -> list[Node]:
        """Return non-root nodes none of whose dependencies exist.

        These nodes are unreachable from any root, so a plain traversal
        never prints them.
        """
        return [
            node for node in self._nodes
            if node.dependencies and not any(dep in self._index for dep in node.dependencies)
        ]

    def find_cycle(self) -> list[str] | None:
        """Find one dependency cycle among the snapshot's nodes.

        Returns:
            Names along the cycle with the first name repeated at the end,
            or None when the graph is acyclic.
        """
        color = dict.fromkeys(self._index, _WHITE)
        for start in self._index:
            if color[start] != _WHITE:
                continue
            path: list[str] = [start]
            stack = [iter(self.children_of(start))]
            color[start] = _GREY
            while stack:
                child = next(stack[-1], None)
                if child is None:
                    stack.pop()
                    color[path.pop()] = _BLACK
                    continue
                if color[child.name] == _GREY:
                    return path[path.index(child.name):] + [child.name]
                if color[child.name] == _WHITE:
                    color[child.name] = _GREY
                    path.append(child.name)
                    stack.append(iter(self.children_of(child.name)))
        return None

    def check_acyclic(self) -> None:
        """Raise if the dependency graph contains a cycle.

        Raises:
            CycleInDependencies: With the offending cycle path.
        """
        cycle = self.find_cycle()
        if cycle is not None:
            raise CycleInDependencies(cycle)
