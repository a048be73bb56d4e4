# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rendering of the complete output set and writing it to the output folders."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from scriptbind.analysis.postprocess import companion_header
from scriptbind.emit.common import EmitOptions
from scriptbind.emit.managed import render_managed_file
from scriptbind.emit.mapping import MAPPING_FILE, render_mapping
from scriptbind.emit.native import (
    COMPONENT_LOOKUP_FILE,
    EDITOR_COMPONENT_LOOKUP_FILE,
    EDITOR_REFLECTABLE_LOOKUP_FILE,
    REFLECTABLE_LOOKUP_FILE,
    has_native_output,
    render_component_lookup,
    render_native_header,
    render_native_source,
    render_reflectable_lookup,
)
from scriptbind.logging import get_logger
from scriptbind.model.context import BindingContext

_LOGGER = get_logger("output")

# ###############
# Public Interface
# ###############

TIMESTAMP_FILE = "scriptBindings.timestamp"


class OutputError(Exception):
    """Raised when generated files cannot be written."""


class OutputKind(Enum):
    """Destination folder of a generated file."""

    NATIVE_ENGINE = "native-engine"
    NATIVE_EDITOR = "native-editor"
    MANAGED_ENGINE = "managed-engine"
    MANAGED_EDITOR = "managed-editor"


@dataclass(frozen=True)
class OutputFile:
    """One generated file, not yet written."""

    kind: OutputKind
    name: str
    content: str


def render_all(
    context: BindingContext,
    options: EmitOptions,
    *,
    timestamp_ms: int | None = None,
) -> list[OutputFile]:
    """Render every output file for a post-processed context.

    Args:
        context: The post-processed binding context.
        options: Namespaces, export macros and the editor toggle.
        timestamp_ms: Generation time written to the timestamp file; the
            current time when omitted.

    Returns:
        The files in a stable order: per file group native header, native
        source and managed file, then lookups, the mapping and the timestamp.
    """
    files: list[OutputFile] = []
    for group in context.file_groups.values():
        if group.in_editor and not options.generate_editor:
            _LOGGER.debug("Skipping editor file group '%s'", group.name)
            continue
        native_kind = OutputKind.NATIVE_EDITOR if group.in_editor else OutputKind.NATIVE_ENGINE
        managed_kind = OutputKind.MANAGED_EDITOR if group.in_editor else OutputKind.MANAGED_ENGINE
        if has_native_output(group):
            header = companion_header(group.name)
            source = header.removesuffix(".h") + ".cpp"
            files.append(OutputFile(native_kind, header, render_native_header(group, context, options)))
            files.append(OutputFile(native_kind, source, render_native_source(group, context, options)))
        if not group.is_empty():
            files.append(
                OutputFile(managed_kind, f"{group.name}.generated.cs", render_managed_file(group, context, options))
            )

    engine = OutputKind.NATIVE_ENGINE
    files.append(OutputFile(engine, COMPONENT_LOOKUP_FILE, render_component_lookup(context, options)))
    files.append(OutputFile(engine, REFLECTABLE_LOOKUP_FILE, render_reflectable_lookup(context, options)))
    if options.generate_editor:
        editor = OutputKind.NATIVE_EDITOR
        lookup = render_component_lookup(context, options, in_editor=True)
        files.append(OutputFile(editor, EDITOR_COMPONENT_LOOKUP_FILE, lookup))
        lookup = render_reflectable_lookup(context, options, in_editor=True)
        files.append(OutputFile(editor, EDITOR_REFLECTABLE_LOOKUP_FILE, lookup))

    files.append(OutputFile(engine, MAPPING_FILE, render_mapping(context, options)))
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    files.append(OutputFile(engine, TIMESTAMP_FILE, f"{timestamp_ms}\n"))
    return files


def write_outputs(files: list[OutputFile], folders: Mapping[OutputKind, Path]) -> list[Path]:
    """Write *files* into their destination folders.

    Stale ``*.generated.*`` files are removed from every destination folder
    first, so bindings for removed declarations do not linger.

    Args:
        files: Rendered files.
        folders: Destination folder per output kind.

    Returns:
        Paths of the written files, in the order of *files*.

    Raises:
        OutputError: If a folder is missing from *folders*, or a folder or
            file cannot be created, removed or written.
    """
    used_kinds = {output.kind for output in files}
    for kind in used_kinds:
        if kind not in folders:
            raise OutputError(f"No output folder configured for '{kind.value}'")

    for folder in {folders[kind] for kind in used_kinds}:
        _prepare_folder(folder)

    written: list[Path] = []
    for output in files:
        path = folders[output.kind] / output.name
        try:
            path.write_text(output.content, encoding="utf-8", newline="\n")
        except OSError as exc:
            raise OutputError(f"Cannot write '{path}': {exc}") from exc
        written.append(path)
    _LOGGER.info("Wrote %d file(s)", len(written))
    return written


# ################
# Implementation
# ################

_STALE_PATTERN = "*.generated.*"


def _prepare_folder(folder: Path) -> None:
    try:
        folder.mkdir(parents=True, exist_ok=True)
        for stale in folder.glob(_STALE_PATTERN):
            if stale.is_file():
                _LOGGER.debug("Removing stale file '%s'", stale)
                stale.unlink()
    except OSError as exc:
        raise OutputError(f"Cannot prepare output folder '{folder}': {exc}") from exc
