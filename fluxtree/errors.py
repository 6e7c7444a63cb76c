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

"""Errors raised while fetching and rendering the status tree."""

from __future__ import annotations


class InputUnavailable(RuntimeError):
    """Kustomization status could not be fetched or parsed."""


class CycleInDependencies(RuntimeError):
    """The dependsOn graph contains a cycle.

    Attributes:
        cycle: Node names along the cycle, first and last equal.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Dependency cycle detected: {' -> '.join(cycle)}")
