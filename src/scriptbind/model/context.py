# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""The binding context threaded through collection, post-processing and emission."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel
from pydantic import Field as _Field

from scriptbind.model.comments import CommentIndex
from scriptbind.model.entities import ClassFlags, ClassInfo, EnumInfo, MethodInfo, StructInfo, UserTypeInfo
from scriptbind.model.types import Category

# ###############
# Public Interface
# ###############


class FileGroup(BaseModel):
    """All records emitted into one output file trio.

    The include and forward-declaration lists behave as insertion-ordered sets;
    use :meth:`add_header_include`, :meth:`add_source_include` and
    :meth:`add_forward_declaration` to extend them.
    """

    name: str
    classes: list[ClassInfo] = _Field(default_factory=list)
    structs: list[StructInfo] = _Field(default_factory=list)
    enums: list[EnumInfo] = _Field(default_factory=list)
    forward_declarations: list[str] = _Field(default_factory=list)
    header_includes: list[str] = _Field(default_factory=list)
    source_includes: list[str] = _Field(default_factory=list)
    in_editor: bool = False

    def is_empty(self) -> bool:
        return not self.classes and not self.structs and not self.enums

    def add_header_include(self, include: str) -> None:
        _add_unique(self.header_includes, include)

    def add_source_include(self, include: str) -> None:
        _add_unique(self.source_includes, include)

    def add_forward_declaration(self, declaration: str) -> None:
        _add_unique(self.forward_declarations, declaration)


class BindingContext(BaseModel):
    """Registry of everything known about the exported surface.

    Attributes:
        file_groups: File-group name to its records, in insertion order.
        type_map: Source type name to its exported description.
        external_methods: Target class name to external methods waiting to be
            merged into that class.
        comments: Comment index used for ``@copydoc`` resolution.
        base_children: Exported base class name to its direct exported children.
        external_files: Class declaring external methods to its declaring file.
    """

    file_groups: dict[str, FileGroup] = _Field(default_factory=dict)
    type_map: dict[str, UserTypeInfo] = _Field(default_factory=dict)
    external_methods: dict[str, list[MethodInfo]] = _Field(default_factory=dict)
    comments: CommentIndex = _Field(default_factory=CommentIndex)
    base_children: dict[str, list[str]] = _Field(default_factory=dict)
    external_files: dict[str, str] = _Field(default_factory=dict)

    def group(self, name: str) -> FileGroup:
        """Return the file group *name*, creating it on first use."""
        group = self.file_groups.get(name)
        if group is None:
            group = FileGroup(name=name)
            self.file_groups[name] = group
        return group

    def iter_classes(self) -> Iterator[tuple[FileGroup, ClassInfo]]:
        for group in self.file_groups.values():
            for class_info in group.classes:
                yield group, class_info

    def iter_structs(self) -> Iterator[tuple[FileGroup, StructInfo]]:
        for group in self.file_groups.values():
            for struct_info in group.structs:
                yield group, struct_info

    def iter_enums(self) -> Iterator[tuple[FileGroup, EnumInfo]]:
        for group in self.file_groups.values():
            for enum_info in group.enums:
                yield group, enum_info

    def find_class(self, name: str, *, in_editor: bool | None = None) -> ClassInfo | None:
        """Find a class by source name.

        When *in_editor* is given and classes of that name exist in both the
        editor and the engine flavour, the matching flavour is preferred.
        """
        matches = [class_info for _, class_info in self.iter_classes() if class_info.name == name]
        if not matches:
            return None
        if in_editor is not None:
            for class_info in matches:
                if class_info.has(ClassFlags.EDITOR) == in_editor:
                    return class_info
        return matches[0]

    def find_struct(self, name: str) -> StructInfo | None:
        for _, struct_info in self.iter_structs():
            if struct_info.name == name:
                return struct_info
        return None

    def find_enum(self, name: str) -> EnumInfo | None:
        for _, enum_info in self.iter_enums():
            if enum_info.name == name:
                return enum_info
        return None

    def category_of(self, name: str) -> Category | None:
        info = self.type_map.get(name)
        return info.category if info is not None else None


# ################
# Implementation
# ################


def _add_unique(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)
