# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Binding configuration and the end-to-end generation pipeline."""

from scriptbind.workspace.config import (
    BindingConfig,
    BindingConfigError,
    ExportMacros,
    Namespaces,
    OutputFolders,
    load_binding_config,
)
from scriptbind.workspace.pipeline import BindingRun, analyze_documents, generate_bindings

__all__ = [
    # Configuration
    "BindingConfig",
    "BindingConfigError",
    "ExportMacros",
    "Namespaces",
    "OutputFolders",
    "load_binding_config",
    # Pipeline
    "BindingRun",
    "analyze_documents",
    "generate_bindings",
]
