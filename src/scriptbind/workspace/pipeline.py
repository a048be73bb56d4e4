# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end binding generation: load, collect, post-process, emit and write.

The phases run strictly in sequence over one :class:`BindingContext`. Problems
with single declarations become diagnostics; only unreadable inputs and
unwritable outputs raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from scriptbind.analysis.collector import collect, seed_type_map
from scriptbind.analysis.postprocess import postprocess
from scriptbind.diagnostics import Diagnostics
from scriptbind.emit.output import render_all, write_outputs
from scriptbind.frontend.declarations import SymbolTable, load_declarations
from scriptbind.logging import get_logger
from scriptbind.model.context import BindingContext
from scriptbind.workspace.config import BindingConfig

_LOGGER = get_logger("pipeline")

# ###############
# Public Interface
# ###############


@dataclass
class BindingRun:
    """Result of one binding run.

    Attributes:
        context: The post-processed binding context.
        diagnostics: Warnings and errors reported by every phase.
        written: Paths of generated files; empty when nothing was written.
    """

    context: BindingContext
    diagnostics: Diagnostics
    written: list[Path] = field(default_factory=list)


def analyze_documents(documents: list[Path], config: BindingConfig) -> BindingRun:
    """Load declaration documents, then collect and post-process them.

    Args:
        documents: Declaration documents to load, in order.
        config: Configuration providing extra type-map entries and aliases.

    Returns:
        The run holding the post-processed context and its diagnostics.

    Raises:
        DeclarationError: If a document cannot be loaded.
    """
    loaded = [load_declarations(path) for path in documents]
    symbols = SymbolTable(loaded, extra_aliases=config.aliases)

    context = BindingContext()
    diagnostics = Diagnostics()
    seed_type_map(context, config.type_map)

    _LOGGER.info("Collecting %d declaration(s)", len(symbols.declarations))
    collect(symbols, context, diagnostics)
    postprocess(context, diagnostics)
    _LOGGER.info(
        "Analysis finished with %d warning(s) and %d error(s)",
        len(diagnostics.warnings),
        len(diagnostics.errors),
    )
    return BindingRun(context=context, diagnostics=diagnostics)


def generate_bindings(
    documents: list[Path],
    config: BindingConfig,
    *,
    timestamp_ms: int | None = None,
) -> BindingRun:
    """Run the whole pipeline and write every output file.

    Raises:
        DeclarationError: If a document cannot be loaded.
        OutputError: If an output file cannot be written.
    """
    run = analyze_documents(documents, config)
    files = render_all(run.context, config.emit_options(), timestamp_ms=timestamp_ms)
    run.written = write_outputs(files, config.output.as_mapping())
    return run
