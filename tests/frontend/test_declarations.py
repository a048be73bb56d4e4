# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for declaration document loading and the symbol table."""

from pathlib import Path

import pytest

from scriptbind.frontend.declarations import (
    DeclarationDocument,
    DeclarationError,
    EnumDecl,
    FunctionDecl,
    RecordDecl,
    SymbolTable,
    load_declarations,
)

_DATA_DIR = Path(__file__).parent.parent / "data"

# ###############
# Helpers
# ###############


def _write(tmp_path: Path, content: str, name: str = "decls.yaml") -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


# ###############
# Loading
# ###############


class TestLoadDeclarations:
    def test_sample_document(self) -> None:
        document = load_declarations(_DATA_DIR / "engine.yaml")
        kinds = [type(declaration) for declaration in document.declarations]
        assert EnumDecl in kinds
        assert RecordDecl in kinds
        assert FunctionDecl in kinds
        assert document.aliases["HMesh"] == "ResourceHandle<Mesh>"

    def test_kebab_case_keys(self, tmp_path: Path) -> None:
        content = """\
declarations:
  - kind: record
    name: S
    is-struct: true
    rtti-type-id: TID_S
    methods:
      - name: get
        return-type: int
"""
        document = load_declarations(_write(tmp_path, content))
        record = document.declarations[0]
        assert isinstance(record, RecordDecl)
        assert record.is_struct
        assert record.rtti_type_id == "TID_S"
        assert record.methods[0].return_type == "int"

    def test_json_is_accepted(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '{"declarations": [{"kind": "enum", "name": "E"}]}', "decls.json")
        document = load_declarations(path)
        assert isinstance(document.declarations[0], EnumDecl)

    def test_empty_file_yields_empty_document(self, tmp_path: Path) -> None:
        document = load_declarations(_write(tmp_path, ""))
        assert document.declarations == []
        assert document.aliases == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DeclarationError, match="Cannot read"):
            load_declarations(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(DeclarationError, match="Invalid YAML"):
            load_declarations(_write(tmp_path, "declarations: [unclosed"))

    def test_unknown_kind(self, tmp_path: Path) -> None:
        content = "declarations:\n  - kind: union\n    name: U\n"
        with pytest.raises(DeclarationError, match="Invalid declaration document"):
            load_declarations(_write(tmp_path, content))

    def test_unknown_key(self, tmp_path: Path) -> None:
        content = "declarations:\n  - kind: enum\n    name: E\n    colour: red\n"
        with pytest.raises(DeclarationError):
            load_declarations(_write(tmp_path, content))


# ###############
# Symbol Table
# ###############


class TestSymbolTable:
    def test_lookup_by_simple_and_qualified_name(self) -> None:
        document = DeclarationDocument.model_validate(
            {"declarations": [{"kind": "record", "name": "Mesh", "namespaces": ["bs"]}]}
        )
        symbols = SymbolTable([document])
        assert symbols.find_record("Mesh") is symbols.find_record("bs::Mesh")
        assert symbols.find_record("other::Mesh") is not None
        assert symbols.find_record("Texture") is None

    def test_enums_and_functions_are_separated(self) -> None:
        document = DeclarationDocument.model_validate(
            {
                "declarations": [
                    {"kind": "enum", "name": "E"},
                    {"kind": "function", "name": "f"},
                ]
            }
        )
        symbols = SymbolTable([document])
        assert symbols.find_enum("E") is not None
        assert [function.name for function in symbols.functions] == ["f"]
        assert len(symbols.declarations) == 2

    def test_default_aliases(self) -> None:
        symbols = SymbolTable([])
        assert symbols.resolve_alias("UINT32") == "unsigned int"
        assert symbols.resolve_alias("bs::String") == "std::basic_string<char>"
        assert symbols.resolve_alias("Mesh") is None

    def test_later_aliases_override_earlier_ones(self) -> None:
        first = DeclarationDocument.model_validate({"aliases": {"Handle": "int"}})
        second = DeclarationDocument.model_validate({"aliases": {"Handle": "float"}})
        symbols = SymbolTable([first, second], extra_aliases={"Extra": "double"})
        assert symbols.resolve_alias("Handle") == "float"
        assert symbols.resolve_alias("Extra") == "double"
