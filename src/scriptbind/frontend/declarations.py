# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration document model and symbol table.

A declaration document is a YAML (or JSON) file describing the C++ declarations
a binding run sees: enums, records (classes and structs) with their members,
and free functions. Type and default-value expressions are kept as C++ text and
parsed on demand by :mod:`scriptbind.frontend.typeparser`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scriptbind.logging import get_logger

_LOGGER = get_logger("frontend")

# ###############
# Public Interface
# ###############

Access = Literal["public", "protected", "private"]


class DeclarationError(Exception):
    """Raised when a declaration document cannot be read or is invalid."""


class _DocumentModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ParamDecl(_DocumentModel):
    name: str
    type: str
    default: str | None = None


class EnumEntryDecl(_DocumentModel):
    """An enum entry; a missing value continues from the previous entry."""

    name: str
    value: int | str | None = None
    annotation: str | None = None
    comment: str | None = None


class EnumDecl(_DocumentModel):
    kind: Literal["enum"]
    name: str
    namespaces: list[str] = Field(default_factory=list)
    annotation: str | None = None
    underlying_type: str | None = Field(alias="underlying-type", default=None)
    file: str = ""
    comment: str | None = None
    entries: list[EnumEntryDecl] = Field(default_factory=list)


class InitializerDecl(_DocumentModel):
    """A member initializer or body assignment ``field = value`` in a constructor."""

    field: str
    value: str


class ConstructorDecl(_DocumentModel):
    annotation: str | None = None
    access: Access = "public"
    params: list[ParamDecl] = Field(default_factory=list)
    initializers: list[InitializerDecl] = Field(default_factory=list)
    assignments: list[InitializerDecl] = Field(default_factory=list)
    is_copy: bool = Field(alias="is-copy", default=False)
    comment: str | None = None


class MethodDecl(_DocumentModel):
    name: str
    annotation: str | None = None
    access: Access = "public"
    static: bool = False
    return_type: str = Field(alias="return-type", default="void")
    params: list[ParamDecl] = Field(default_factory=list)
    comment: str | None = None


class FieldDecl(_DocumentModel):
    name: str
    type: str
    access: Access = "public"
    static: bool = False
    initializer: str | None = None
    annotation: str | None = None
    comment: str | None = None


class RecordDecl(_DocumentModel):
    """A class or struct declaration.

    Records without an annotation are still needed: they take part in the base
    class ascent of exported classes.
    """

    kind: Literal["record"]
    name: str
    namespaces: list[str] = Field(default_factory=list)
    annotation: str | None = None
    is_struct: bool = Field(alias="is-struct", default=False)
    file: str = ""
    template_args: list[str] = Field(alias="template-args", default_factory=list)
    bases: list[str] = Field(default_factory=list)
    rtti_type_id: str | None = Field(alias="rtti-type-id", default=None)
    comment: str | None = None
    constructors: list[ConstructorDecl] = Field(default_factory=list)
    methods: list[MethodDecl] = Field(default_factory=list)
    fields: list[FieldDecl] = Field(default_factory=list)


class FunctionDecl(_DocumentModel):
    """A free function; only external (``e:``/``ec:``) annotations export it."""

    kind: Literal["function"]
    name: str
    namespaces: list[str] = Field(default_factory=list)
    annotation: str | None = None
    file: str = ""
    return_type: str = Field(alias="return-type", default="void")
    params: list[ParamDecl] = Field(default_factory=list)
    comment: str | None = None


Declaration = Annotated[EnumDecl | RecordDecl | FunctionDecl, Field(discriminator="kind")]


class DeclarationDocument(_DocumentModel):
    """Top-level declaration document."""

    aliases: dict[str, str] = Field(default_factory=dict)
    declarations: list[Declaration] = Field(default_factory=list)


DEFAULT_ALIASES: dict[str, str] = {
    "INT8": "signed char",
    "UINT8": "unsigned char",
    "INT16": "short",
    "UINT16": "unsigned short",
    "INT32": "int",
    "UINT32": "unsigned int",
    "INT64": "long long",
    "UINT64": "unsigned long long",
    "size_t": "unsigned long long",
    "String": "std::basic_string<char>",
    "WString": "std::basic_string<wchar_t>",
    "std::string": "std::basic_string<char>",
    "std::wstring": "std::basic_string<wchar_t>",
}


def load_declarations(path: Path) -> DeclarationDocument:
    """Load and validate a declaration document from disk.

    Args:
        path: Path to a YAML or JSON declaration document.

    Returns:
        A validated DeclarationDocument. An empty file yields an empty document.

    Raises:
        DeclarationError: If the file cannot be read, is not valid YAML or JSON,
            or does not conform to the document schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeclarationError(f"Cannot read declaration document '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise DeclarationError(f"Invalid YAML in declaration document '{path}': {exc}") from exc

    if data is None:
        data = {}

    try:
        document = DeclarationDocument.model_validate(data)
    except ValidationError as exc:
        raise DeclarationError(f"Invalid declaration document '{path}': {exc}") from exc

    _LOGGER.debug("Loaded %d declaration(s) from %s", len(document.declarations), path)
    return document


class SymbolTable:
    """Name lookup over every declaration of a run.

    Records and enums are indexed by simple and by fully-qualified name. Aliases
    map a type name to the C++ type text it stands for.
    """

    def __init__(
        self,
        documents: list[DeclarationDocument],
        *,
        extra_aliases: dict[str, str] | None = None,
    ) -> None:
        self.records: dict[str, RecordDecl] = {}
        self.enums: dict[str, EnumDecl] = {}
        self.functions: list[FunctionDecl] = []
        self.aliases: dict[str, str] = dict(DEFAULT_ALIASES)
        self.declarations: list[EnumDecl | RecordDecl | FunctionDecl] = []

        for document in documents:
            self.aliases.update(document.aliases)
            for declaration in document.declarations:
                self.declarations.append(declaration)
                if isinstance(declaration, EnumDecl):
                    _index(self.enums, declaration.name, declaration.namespaces, declaration)
                elif isinstance(declaration, RecordDecl):
                    _index(self.records, declaration.name, declaration.namespaces, declaration)
                else:
                    self.functions.append(declaration)
        if extra_aliases:
            self.aliases.update(extra_aliases)

    def find_record(self, name: str) -> RecordDecl | None:
        return self.records.get(name) or self.records.get(_simple(name))

    def find_enum(self, name: str) -> EnumDecl | None:
        return self.enums.get(name) or self.enums.get(_simple(name))

    def resolve_alias(self, name: str) -> str | None:
        """Return the type text *name* aliases, or None if it is no alias."""
        if name in self.aliases:
            return self.aliases[name]
        return self.aliases.get(_simple(name))


# ################
# Implementation
# ################


def _simple(name: str) -> str:
    return name.rpartition("::")[2]


def _index(table: dict, name: str, namespaces: list[str], declaration: object) -> None:
    table.setdefault(name, declaration)
    if namespaces:
        table.setdefault("::".join([*namespaces, name]), declaration)
