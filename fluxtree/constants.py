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

"""Constants for Flux resources, tree glyphs, and CLI defaults."""

from __future__ import annotations

# -- Namespaces --
NS_FLUX_SYSTEM = "flux-system"

# -- Flux resource kinds --
KIND_FLUX_INSTANCE = "FluxInstance"
KIND_KUSTOMIZATION = "Kustomization"
KIND_HELM_RELEASE = "HelmRelease"

# kubectl resource names
RESOURCE_KUSTOMIZATION = "kustomization"
RESOURCE_HELM_RELEASE = "helmrelease"

# -- Status conditions --
CONDITION_READY = "Ready"
CONDITION_STATUS_TRUE = "True"

# Substring of a Ready condition message that marks a node as blocked on a
# dependency rather than failed.
BLOCKED_MESSAGE_KEYWORD = "dependency"

# -- ANSI colours --
ANSI_RED = "\033[0;31m"
ANSI_YELLOW = "\033[0;33m"
ANSI_GREEN = "\033[0;32m"
ANSI_RESET = "\033[0m"

# -- Glyphs --
GLYPH_HEALTHY = "●"
GLYPH_BLOCKED = "◌"
GLYPH_FAILED = "✗"

# -- Tree connectors --
CONNECTOR_BRANCH = "├── "
CONNECTOR_LAST = "└── "
EXTENSION_BRANCH = "│   "
EXTENSION_LAST = "    "

ORPHANS_HEADER = "orphaned (missing dependencies):"

# -- Output formats --
OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"
OUTPUT_FORMATS = (OUTPUT_TEXT, OUTPUT_JSON)

# -- Defaults --
DEFAULT_KUBECTL_TIMEOUT = 30
DEFAULT_FLUX_INSTANCE = "flux"
DEFAULT_RECONCILE_MAX_RETRIES = 3
DEFAULT_RECONCILE_RETRY_WAIT_SECONDS = 2

ENV_PREFIX = "FLUXTREE_"
