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

"""Node value objects and status classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fluxtree.constants import (
    ANSI_GREEN,
    ANSI_RED,
    ANSI_YELLOW,
    BLOCKED_MESSAGE_KEYWORD,
    CONDITION_STATUS_TRUE,
    GLYPH_BLOCKED,
    GLYPH_FAILED,
    GLYPH_HEALTHY,
)


class ReadyState(str, Enum):
    """Tri-state view of a Ready condition."""

    READY = "Ready"
    NOT_READY = "NotReady"
    UNKNOWN = "Unknown"

    @classmethod
    def from_condition(cls, status: str | None) -> ReadyState:
        """Map an upstream condition status to a ReadyState.

        Args:
            status: ``status`` field of the Ready condition, or None when the
                resource has no Ready condition yet.

        Returns:
            READY for ``"True"``, UNKNOWN for a missing condition or the
            literal ``"Unknown"``, NOT_READY otherwise.
        """
        if status is None or status == cls.UNKNOWN.value:
            return cls.UNKNOWN
        if status == CONDITION_STATUS_TRUE:
            return cls.READY
        return cls.NOT_READY


class StatusClass(str, Enum):
    """Rendered health of a node."""

    HEALTHY = "Healthy"
    BLOCKED = "Blocked"
    FAILED = "Failed"

    @property
    def glyph(self) -> str:
        return _STATUS_GLYPHS[self]

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_GLYPHS = {
    StatusClass.HEALTHY: GLYPH_HEALTHY,
    StatusClass.BLOCKED: GLYPH_BLOCKED,
    StatusClass.FAILED: GLYPH_FAILED,
}

_STATUS_COLORS = {
    StatusClass.HEALTHY: ANSI_GREEN,
    StatusClass.BLOCKED: ANSI_YELLOW,
    StatusClass.FAILED: ANSI_RED,
}


def classify_status(ready: ReadyState, message: str) -> StatusClass:
    """Classify a node from its readiness and condition message.

    The blocked check is a substring heuristic on Flux's free-text message
    ("dependency 'flux-system/infra' is not ready"). It is case-sensitive and
    only as reliable as the upstream wording.

    Args:
        ready: Node readiness.
        message: Ready condition message, possibly empty.

    Returns:
        HEALTHY when ready, BLOCKED when the message mentions a dependency,
        FAILED otherwise.
    """
    if ready is ReadyState.READY:
        return StatusClass.HEALTHY
    if BLOCKED_MESSAGE_KEYWORD in message:
        return StatusClass.BLOCKED
    return StatusClass.FAILED


def parse_dependencies(value: str | list[str] | tuple[str, ...] | None) -> tuple[str, ...]:
    """Normalize a dependency list from a comma-separated string or a sequence.

    Empty segments are dropped, so ``""`` and ``"a,,b"`` are tolerated.

    Raises:
        ValueError: If *value* is not a string or a list of strings.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ValueError(f"dependencies must be a string or a list, got {type(value).__name__}")
    for part in parts:
        if not isinstance(part, str):
            raise ValueError(f"dependency name must be a string, got {part!r}")
    return tuple(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class Node:
    """One Kustomization with its readiness and declared dependencies.

    Attributes:
        name: Resource name, unique within one snapshot.
        ready: Readiness derived from the Ready condition.
        message: Ready condition message, possibly empty.
        dependencies: Names from ``spec.dependsOn`` in declaration order.
    """

    name: str
    ready: ReadyState = ReadyState.UNKNOWN
    message: str = ""
    dependencies: tuple[str, ...] = field(default_factory=tuple)

    @property
    def status(self) -> StatusClass:
        return classify_status(self.ready, self.message)

    @property
    def is_root(self) -> bool:
        return not self.dependencies

    @classmethod
    def from_record(cls, record: dict) -> Node:
        """Build a Node from a flattened four-field record.

        Args:
            record: Mapping with ``name``, optional ``ready`` (condition
                status string), ``message`` and ``dependencies`` (list or
                comma-separated string).

        Returns:
            The corresponding Node.

        Raises:
            ValueError: If ``name`` is missing or empty, or a field has the
                wrong type.
        """
        name = record.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"record has no name: {record!r}")
        ready = record.get("ready")
        # YAML snapshots may spell the status as a bare boolean
        if isinstance(ready, bool):
            ready = CONDITION_STATUS_TRUE if ready else "False"
        if ready is not None and not isinstance(ready, str):
            raise ValueError(f"{name}: ready must be a string, got {ready!r}")
        try:
            dependencies = parse_dependencies(record.get("dependencies"))
        except ValueError as err:
            raise ValueError(f"{name}: {err}") from err
        return cls(
            name=name,
            ready=ReadyState.from_condition(ready),
            message=str(record.get("message") or ""),
            dependencies=dependencies,
        )
