# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type references used throughout the binding model.

A :class:`TypeRef` describes one typed position (parameter, field, return value
or event argument) after classification. The ``flags`` bitset carries the
ownership wrapper the native code uses (pointer, reference, shared pointer or one
of the handle kinds), the container kind and a few markers added during
post-processing. The category is filled in once the full type map is known.
"""

from __future__ import annotations

from enum import Enum, IntFlag

from pydantic import BaseModel

# ###############
# Public Interface
# ###############


class Category(Enum):
    """Exportable categories a C++ type can be classified into."""

    COMPONENT = "component"
    SCENE_OBJECT = "scene-object"
    RESOURCE = "resource"
    CLASS = "class"
    REFLECTABLE_CLASS = "reflectable-class"
    STRUCT = "struct"
    ENUM = "enum"
    BUILTIN = "builtin"
    STRING = "string"
    WSTRING = "wstring"
    PATH = "path"
    SCRIPT_OBJECT = "script-object"
    GUI_ELEMENT = "gui-element"
    MONO_OBJECT = "mono-object"


class TypeFlags(IntFlag):
    """Bitset describing how a typed position is represented natively."""

    BUILTIN = 1 << 0
    OUTPUT = 1 << 1
    SRC_PTR = 1 << 2
    SRC_SPTR = 1 << 3
    SRC_REF = 1 << 4
    SRC_RHANDLE = 1 << 5
    SRC_GHANDLE = 1 << 6
    STRING = 1 << 7
    WSTRING = 1 << 8
    FUNCTION = 1 << 9
    COMPLEX_STRUCT = 1 << 10
    FLAGS_ENUM = 1 << 11
    REFERENCES_BASE = 1 << 12
    ARRAY = 1 << 13
    MONO_OBJECT = 1 << 14
    ASYNC_OP = 1 << 15
    PATH = 1 << 16
    SCRIPT_OBJECT = 1 << 17


SOURCE_KIND_FLAGS = (
    TypeFlags.SRC_PTR | TypeFlags.SRC_SPTR | TypeFlags.SRC_REF | TypeFlags.SRC_RHANDLE | TypeFlags.SRC_GHANDLE
)


class SourceKind(Enum):
    """How the native API holds a value: the single ownership kind of a position."""

    VALUE = "value"
    POINTER = "pointer"
    REFERENCE = "reference"
    SHARED_PTR = "shared-ptr"
    RESOURCE_HANDLE = "resource-handle"
    GAME_OBJECT_HANDLE = "game-object-handle"


HANDLE_CATEGORIES: frozenset[Category] = frozenset({Category.RESOURCE, Category.SCENE_OBJECT, Category.COMPONENT})
CLASS_CATEGORIES: frozenset[Category] = frozenset({Category.CLASS, Category.REFLECTABLE_CLASS})
STRING_CATEGORIES: frozenset[Category] = frozenset({Category.STRING, Category.WSTRING, Category.PATH})


class TypeRef(BaseModel):
    """A classified type at one position of an exported signature.

    Attributes:
        name: Source type name with wrappers removed (``Mesh`` for
            ``std::vector<ResourceHandle<Mesh>>``). Builtins use their canonical
            typedef (``INT32``, ``float``, ...).
        flags: :class:`TypeFlags` bitset.
        category: Resolved category; ``None`` until post-processing resolves
            user types against the type map.
        underlying: Canonical builtin typedef backing an enum type.
    """

    name: str
    flags: int = 0
    category: Category | None = None
    underlying: str | None = None

    def has(self, flag: TypeFlags) -> bool:
        """Return True if any bit of *flag* is set."""
        return bool(self.flags & flag)

    @property
    def is_output(self) -> bool:
        return self.has(TypeFlags.OUTPUT)

    @property
    def is_array(self) -> bool:
        return self.has(TypeFlags.ARRAY)

    @property
    def source_kind(self) -> SourceKind:
        """The ownership kind, derived from the single source-kind bit."""
        if self.has(TypeFlags.SRC_PTR):
            return SourceKind.POINTER
        if self.has(TypeFlags.SRC_REF):
            return SourceKind.REFERENCE
        if self.has(TypeFlags.SRC_SPTR):
            return SourceKind.SHARED_PTR
        if self.has(TypeFlags.SRC_RHANDLE):
            return SourceKind.RESOURCE_HANDLE
        if self.has(TypeFlags.SRC_GHANDLE):
            return SourceKind.GAME_OBJECT_HANDLE
        return SourceKind.VALUE

    def with_source_kind(self, flag: TypeFlags) -> TypeRef:
        """Return a copy whose source-kind bit is replaced by *flag*."""
        return self.model_copy(update={"flags": (self.flags & ~SOURCE_KIND_FLAGS) | flag})

    def same_type(self, other: TypeRef) -> bool:
        """Return True if both references name the same type with the same flags."""
        return self.name == other.name and self.flags == other.flags
