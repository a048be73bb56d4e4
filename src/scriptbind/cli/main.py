# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the scriptbind command-line interface."""

import argparse
import sys
from pathlib import Path

from scriptbind.diagnostics import Diagnostics, Severity
from scriptbind.emit.output import OutputError
from scriptbind.frontend.declarations import DeclarationError
from scriptbind.logging import configure_logging
from scriptbind.workspace.config import BindingConfig, BindingConfigError, load_binding_config
from scriptbind.workspace.pipeline import analyze_documents, generate_bindings

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the scriptbind CLI."""
    parser = argparse.ArgumentParser(
        prog="scriptbind",
        description="scriptbind: generate native and managed script bindings from annotated declarations",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate binding sources",
        description="Collect exported declarations and write native, managed and mapping files.",
    )
    _add_common_arguments(generate_parser)
    outputs = generate_parser.add_argument_group("output folders")
    outputs.add_argument("--native-engine-out", type=Path, help="Folder for engine C++ companions")
    outputs.add_argument("--native-editor-out", type=Path, help="Folder for editor C++ companions")
    outputs.add_argument("--managed-engine-out", type=Path, help="Folder for engine C# wrappers")
    outputs.add_argument("--managed-editor-out", type=Path, help="Folder for editor C# wrappers")
    generate_parser.add_argument(
        "--editor",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate editor file groups and lookups (default: from config, else on)",
    )
    names = generate_parser.add_argument_group("generated names")
    names.add_argument("--native-namespace", help="C++ namespace of engine companions")
    names.add_argument("--native-editor-namespace", help="C++ namespace of editor companions")
    names.add_argument("--managed-namespace", help="C# namespace of engine wrappers")
    names.add_argument("--managed-editor-namespace", help="C# namespace of editor wrappers")
    names.add_argument("--export-macro", help="Export macro on engine companion classes")
    names.add_argument("--editor-export-macro", help="Export macro on editor companion classes")
    generate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any error diagnostic was reported",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check declarations without writing files",
        description="Collect and post-process declarations and report diagnostics.",
    )
    _add_common_arguments(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("documents", nargs="+", type=Path, metavar="DOCUMENT", help="Declaration documents")
    parser.add_argument("--config", type=Path, help="Binding configuration file (YAML)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write log records to this file")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    configure_logging(verbose=args.verbose, log_file=args.log_file)
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _load_config(args: argparse.Namespace) -> BindingConfig:
    if args.config is None:
        return BindingConfig()
    return load_binding_config(args.config)


def _apply_overrides(config: BindingConfig, args: argparse.Namespace) -> None:
    """Command-line values take precedence over the configuration file."""
    folders = config.output
    for attribute, value in (
        ("native_engine", args.native_engine_out),
        ("native_editor", args.native_editor_out),
        ("managed_engine", args.managed_engine_out),
        ("managed_editor", args.managed_editor_out),
    ):
        if value is not None:
            setattr(folders, attribute, value)
    if args.editor is not None:
        config.generate_editor = args.editor

    for target, attribute, value in (
        (config.namespaces, "native_engine", args.native_namespace),
        (config.namespaces, "native_editor", args.native_editor_namespace),
        (config.namespaces, "managed_engine", args.managed_namespace),
        (config.namespaces, "managed_editor", args.managed_editor_namespace),
        (config.export_macros, "engine", args.export_macro),
        (config.export_macros, "editor", args.editor_export_macro),
    ):
        if value is not None:
            setattr(target, attribute, value)


def _print_diagnostics(diagnostics: Diagnostics) -> None:
    for diagnostic in diagnostics:
        if diagnostic.severity is Severity.ERROR:
            print(diagnostic.format(), file=sys.stderr)
        else:
            print(diagnostic.format())


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    try:
        config = _load_config(args)
    except BindingConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _apply_overrides(config, args)

    try:
        run = generate_bindings(args.documents, config)
    except (DeclarationError, OutputError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _print_diagnostics(run.diagnostics)
    print(f"Generated {len(run.written)} file(s).")
    if args.strict and run.diagnostics.has_errors:
        return 1
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        config = _load_config(args)
    except BindingConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Checking {len(args.documents)} declaration document(s)...")
    try:
        run = analyze_documents(args.documents, config)
    except DeclarationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _print_diagnostics(run.diagnostics)
    diagnostics = run.diagnostics
    if diagnostics.has_errors:
        print(f"Found {len(diagnostics.errors)} error(s) and {len(diagnostics.warnings)} warning(s).")
        return 1
    if diagnostics.warnings:
        print(f"Found {len(diagnostics.warnings)} warning(s).")
        return 0
    print("No issues found.")
    return 0
