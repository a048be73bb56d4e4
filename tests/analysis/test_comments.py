# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for documentation comment parsing and copydoc resolution."""

from typing import Any

from scriptbind.analysis.collector import collect, seed_type_map
from scriptbind.analysis.comments import normalize_signature_text, parse_doc_comment, resolve_copydocs
from scriptbind.diagnostics import Diagnostics
from scriptbind.frontend.declarations import DeclarationDocument, SymbolTable
from scriptbind.model.context import BindingContext

# ###############
# Test Helpers
# ###############


def _resolved(*declarations: dict[str, Any]) -> tuple[BindingContext, Diagnostics]:
    symbols = SymbolTable([DeclarationDocument.model_validate({"declarations": list(declarations)})])
    context = BindingContext()
    diagnostics = Diagnostics()
    seed_type_map(context)
    collect(symbols, context, diagnostics)
    resolve_copydocs(context, diagnostics)
    return context, diagnostics


def _brief(context: BindingContext, name: str) -> list[str]:
    record = context.comments.find(name, ["bs"])
    assert record is not None
    return record.comment.brief


# ###############
# Parsing
# ###############


class TestParseDocComment:
    def test_sections(self) -> None:
        entry = parse_doc_comment(
            "/** Brief line one\n"
            " * line two.\n"
            " *\n"
            " * Second paragraph.\n"
            " * @param a First param.\n"
            " * @return The result.\n"
            " */"
        )
        assert entry.brief == ["Brief line one line two.", "Second paragraph."]
        assert [(param.name, param.comment) for param in entry.params] == [("a", ["First param."])]
        assert entry.returns == ["The result."]

    def test_line_comments(self) -> None:
        assert parse_doc_comment("/// Line one\n/// Line two").brief == ["Line one Line two"]

    def test_brief_command_is_dropped(self) -> None:
        assert parse_doc_comment("@brief Short.\nMore.").brief == ["Short. More."]

    def test_native_spans_are_removed(self) -> None:
        entry = parse_doc_comment("/**\n * Visible.\n * @native\n * Native only.\n * @endnative\n */")
        assert entry.brief == ["Visible."]

    def test_empty_input(self) -> None:
        assert parse_doc_comment(None).is_empty()
        assert parse_doc_comment("").is_empty()

    def test_copydoc_marker(self) -> None:
        entry = parse_doc_comment("@copydoc Mesh::getVertexCount")
        assert entry.copydoc_target() == "Mesh::getVertexCount"

    def test_normalize_signature_text(self) -> None:
        assert normalize_signature_text("const  Vector < int > &") == "const Vector<int>&"


# ###############
# Copydoc Resolution
# ###############


class TestResolveCopydocs:
    def test_transitive_chain(self) -> None:
        context, diagnostics = _resolved(
            {"kind": "record", "name": "A", "namespaces": ["bs"], "comment": "First."},
            {"kind": "record", "name": "B", "namespaces": ["bs"], "comment": "@copydoc A"},
            {"kind": "record", "name": "C", "namespaces": ["bs"], "comment": "@copydoc B"},
        )
        assert _brief(context, "B") == ["First."]
        assert _brief(context, "C") == ["First."]
        assert len(diagnostics) == 0

    def test_resolution_is_idempotent(self) -> None:
        context, diagnostics = _resolved(
            {"kind": "record", "name": "A", "namespaces": ["bs"], "comment": "First."},
            {"kind": "record", "name": "C", "namespaces": ["bs"], "comment": "@copydoc A"},
        )
        resolve_copydocs(context, diagnostics)
        assert _brief(context, "C") == ["First."]
        assert len(diagnostics) == 0

    def test_missing_target_warns_and_clears(self) -> None:
        context, diagnostics = _resolved(
            {"kind": "record", "name": "C", "namespaces": ["bs"], "comment": "@copydoc Missing"},
        )
        assert _brief(context, "C") == []
        assert diagnostics.messages() == ['Cannot find identifier referenced by the @copydoc command: "Missing".']

    def test_cycle_terminates(self) -> None:
        _, diagnostics = _resolved(
            {"kind": "record", "name": "A", "namespaces": ["bs"], "comment": "@copydoc B"},
            {"kind": "record", "name": "B", "namespaces": ["bs"], "comment": "@copydoc A"},
        )
        assert len(diagnostics.warnings) >= 1

    def test_member_reference_relative_to_owner(self) -> None:
        context, diagnostics = _resolved(
            {
                "kind": "record",
                "name": "Mesh",
                "namespaces": ["bs"],
                "annotation": "se",
                "methods": [
                    {"name": "size", "annotation": "se", "return-type": "UINT32", "comment": "Number of items."},
                    {"name": "count", "annotation": "se", "return-type": "UINT32", "comment": "@copydoc size"},
                ],
            }
        )
        methods = context.file_groups["Mesh"].classes[0].methods
        assert methods[1].documentation.brief == ["Number of items."]
        assert len(diagnostics) == 0

    def test_overload_is_selected_by_signature(self) -> None:
        context, _ = _resolved(
            {
                "kind": "function",
                "name": "f",
                "namespaces": ["bs"],
                "params": [{"name": "a", "type": "int"}],
                "comment": "Integer.",
            },
            {
                "kind": "function",
                "name": "f",
                "namespaces": ["bs"],
                "params": [{"name": "a", "type": "float"}],
                "comment": "Float.",
            },
            {"kind": "record", "name": "Z", "namespaces": ["bs"], "comment": "@copydoc f(float)"},
        )
        assert _brief(context, "Z") == ["Float."]
