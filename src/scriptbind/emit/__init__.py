# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Native, managed and mapping emitters and the output writer."""

from scriptbind.emit.common import EmitOptions, xml_doc_comment
from scriptbind.emit.managed import managed_default_expression, render_managed_file
from scriptbind.emit.mapping import MAPPING_FILE, build_mapping, render_mapping
from scriptbind.emit.marshal import CallStreams, MarshalError, ReturnPlan, add_param, add_return
from scriptbind.emit.native import (
    COMPONENT_LOOKUP_FILE,
    EDITOR_COMPONENT_LOOKUP_FILE,
    EDITOR_REFLECTABLE_LOOKUP_FILE,
    REFLECTABLE_LOOKUP_FILE,
    render_component_lookup,
    render_native_header,
    render_native_source,
    render_reflectable_lookup,
)
from scriptbind.emit.output import TIMESTAMP_FILE, OutputError, OutputFile, OutputKind, render_all, write_outputs

__all__ = [
    # Options
    "EmitOptions",
    "xml_doc_comment",
    # Marshalling
    "CallStreams",
    "MarshalError",
    "ReturnPlan",
    "add_param",
    "add_return",
    # Native
    "COMPONENT_LOOKUP_FILE",
    "EDITOR_COMPONENT_LOOKUP_FILE",
    "EDITOR_REFLECTABLE_LOOKUP_FILE",
    "REFLECTABLE_LOOKUP_FILE",
    "render_component_lookup",
    "render_native_header",
    "render_native_source",
    "render_reflectable_lookup",
    # Managed
    "managed_default_expression",
    "render_managed_file",
    # Mapping
    "MAPPING_FILE",
    "build_mapping",
    "render_mapping",
    # Output
    "TIMESTAMP_FILE",
    "OutputError",
    "OutputFile",
    "OutputKind",
    "render_all",
    "write_outputs",
]
