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

"""Configuration classes and render options."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fluxtree.constants import (
    DEFAULT_FLUX_INSTANCE,
    DEFAULT_KUBECTL_TIMEOUT,
    DEFAULT_RECONCILE_MAX_RETRIES,
    DEFAULT_RECONCILE_RETRY_WAIT_SECONDS,
    ENV_PREFIX,
    NS_FLUX_SYSTEM,
    OUTPUT_TEXT,
)


# ============================================================================
# Configuration classes
# ============================================================================

class FluxTreeConfig(BaseSettings):
    """Status tree configuration, auto-loaded from FLUXTREE_* env vars.

    Attributes:
        namespace: Namespace holding the Flux Kustomizations.
        kubectl_timeout: Maximum seconds to wait for the kubectl query.
        color: Whether to wrap tree lines in ANSI colour codes.
        show_orphans: Whether to list nodes whose dependencies are all missing.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    namespace: str = NS_FLUX_SYSTEM
    kubectl_timeout: int = Field(default=DEFAULT_KUBECTL_TIMEOUT, ge=1, le=600)
    color: bool = True
    show_orphans: bool = True


class ReconcileConfig(BaseSettings):
    """Reconcile trigger configuration, auto-loaded from FLUXTREE_* env vars.

    Attributes:
        namespace: Namespace holding the FluxInstance and Kustomizations.
        instance_name: Name of the FluxInstance resource.
        max_retries: Attempts per resource before giving up.
        retry_wait_seconds: Fixed wait between attempts.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    namespace: str = NS_FLUX_SYSTEM
    instance_name: str = DEFAULT_FLUX_INSTANCE
    max_retries: int = Field(default=DEFAULT_RECONCILE_MAX_RETRIES, ge=1, le=10)
    retry_wait_seconds: float = Field(default=DEFAULT_RECONCILE_RETRY_WAIT_SECONDS, ge=0)


# ============================================================================
# Render options
# ============================================================================

@dataclass(frozen=True)
class RenderOptions:
    """Options for a single tree render.

    Attributes:
        output: Output format, ``text`` or ``json``.
        color: Whether to emit ANSI colour codes in text output.
        show_orphans: Whether to append the orphaned section.
    """

    output: str = OUTPUT_TEXT
    color: bool = True
    show_orphans: bool = True

    @classmethod
    def from_config(cls, cfg: FluxTreeConfig, output: str = OUTPUT_TEXT) -> RenderOptions:
        return cls(output=output, color=cfg.color, show_orphans=cfg.show_orphans)
