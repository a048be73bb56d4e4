# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Binding model shared by the analysis and emission phases."""

from scriptbind.model.comments import CommentEntry, CommentIndex, CommentOverload, CommentParam, CommentRecord
from scriptbind.model.context import BindingContext, FileGroup
from scriptbind.model.entities import (
    ClassFlags,
    ClassInfo,
    EnumEntryInfo,
    EnumInfo,
    EventInfo,
    ExportDirective,
    ExportFlags,
    FieldInfo,
    MethodFlags,
    MethodInfo,
    ParamInfo,
    PropertyInfo,
    ReturnInfo,
    StructCtorInfo,
    StructInfo,
    StyleInfo,
    UserTypeInfo,
    Visibility,
)
from scriptbind.model.types import (
    CLASS_CATEGORIES,
    HANDLE_CATEGORIES,
    STRING_CATEGORIES,
    Category,
    SourceKind,
    TypeFlags,
    TypeRef,
)

__all__ = [
    # Types
    "Category",
    "TypeFlags",
    "SourceKind",
    "TypeRef",
    "CLASS_CATEGORIES",
    "HANDLE_CATEGORIES",
    "STRING_CATEGORIES",
    # Comments
    "CommentEntry",
    "CommentParam",
    "CommentOverload",
    "CommentRecord",
    "CommentIndex",
    # Entities
    "Visibility",
    "ExportFlags",
    "MethodFlags",
    "ClassFlags",
    "StyleInfo",
    "ExportDirective",
    "ParamInfo",
    "ReturnInfo",
    "MethodInfo",
    "FieldInfo",
    "PropertyInfo",
    "EventInfo",
    "ClassInfo",
    "StructCtorInfo",
    "StructInfo",
    "EnumEntryInfo",
    "EnumInfo",
    "UserTypeInfo",
    # Context
    "FileGroup",
    "BindingContext",
]
