# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Post-processing of collected binding records.

Runs once after collection and rewrites the context in place so the emitters
can treat it as read-only. The passes run in a fixed order; later passes rely on
the results of earlier ones (property derivation needs interop names, the
complex-struct marking needs resolved categories and base flags, and include
computation needs the final flags).
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from scriptbind.analysis.classifier import resolve_type_info
from scriptbind.analysis.comments import resolve_copydocs
from scriptbind.diagnostics import Diagnostics
from scriptbind.logging import get_logger
from scriptbind.model.context import BindingContext, FileGroup
from scriptbind.model.entities import (
    ClassFlags,
    ClassInfo,
    EventInfo,
    MethodFlags,
    MethodInfo,
    ParamInfo,
    PropertyInfo,
    StructInfo,
)
from scriptbind.model.types import (
    CLASS_CATEGORIES,
    HANDLE_CATEGORIES,
    Category,
    TypeFlags,
    TypeRef,
)

_LOGGER = get_logger("postprocess")

# ###############
# Public Interface
# ###############


def postprocess(context: BindingContext, diagnostics: Diagnostics) -> None:
    """Run every post-processing pass over *context*."""
    processor = _PostProcessor(context, diagnostics)
    processor.merge_external_methods()
    resolve_copydocs(context, diagnostics)
    processor.assign_interop_names()
    processor.resolve_categories()
    processor.derive_properties()
    processor.mark_base_classes()
    processor.resolve_enum_defaults()
    processor.mark_complex_structs()
    processor.expand_default_parameters()
    processor.compute_includes()
    _LOGGER.debug("Post-processed %d file group(s)", len(context.file_groups))


def companion_header(group_name: str) -> str:
    """Name of the generated native header for *group_name*."""
    return f"BsScript{group_name}.generated.h"


def interop_struct_name(struct_info: StructInfo) -> str:
    return f"__{struct_info.clean_name}Interop"


def iter_class_refs(class_info: ClassInfo) -> Iterator[TypeRef]:
    """Yield every type reference in the signatures of *class_info*."""
    for method in [*class_info.ctors, *class_info.methods]:
        yield from _iter_method_refs(method)
    for event in class_info.events:
        for param in event.params:
            yield param.type
    for prop in class_info.properties:
        yield prop.type


def iter_struct_refs(struct_info: StructInfo) -> Iterator[TypeRef]:
    """Yield every type reference in the fields and constructors of *struct_info*."""
    for field in struct_info.fields:
        yield field.type
    for ctor in struct_info.ctors:
        for param in ctor.params:
            yield param.type


# ################
# Implementation
# ################

_INTEGER_LITERAL = re.compile(r"^-?\d+$")

# Representation bits that differ between a value getter and a ``const T&`` setter.
_PASSING_FLAGS = TypeFlags.SRC_PTR | TypeFlags.SRC_REF | TypeFlags.OUTPUT

_INVALID_FIELD_CATEGORIES = frozenset({Category.SCRIPT_OBJECT, Category.MONO_OBJECT, Category.GUI_ELEMENT})

_TEMPLATE_HEADERS: dict[Category, str] = {
    Category.RESOURCE: "Wrappers/BsScriptResource.h",
    Category.COMPONENT: "Wrappers/BsScriptComponent.h",
    Category.REFLECTABLE_CLASS: "Wrappers/BsScriptReflectable.h",
    Category.GUI_ELEMENT: "Wrappers/GUI/BsScriptGUIElement.h",
}

_SUPPORT_HEADERS: dict[Category, str] = {
    Category.RESOURCE: "BsScriptResourceManager.h",
    Category.COMPONENT: "BsScriptGameObjectManager.h",
    Category.SCENE_OBJECT: "BsScriptGameObjectManager.h",
    Category.REFLECTABLE_CLASS: "Reflection/BsRTTIType.h",
}

_BUILTIN_COMPANIONS: dict[str, str] = {
    "SceneObject": "Wrappers/BsScriptSceneObject.h",
}


def _iter_method_refs(method: MethodInfo) -> Iterator[TypeRef]:
    if method.return_info is not None:
        yield method.return_info.type
    for param in method.params:
        yield param.type


def _passing_independent(ref: TypeRef) -> tuple[str, int]:
    return ref.name, ref.flags & ~_PASSING_FLAGS


def _strip_misplaced_defaults(params: list[ParamInfo]) -> None:
    """Clear non-trivial defaults and any default followed by a required parameter."""
    for param in params:
        if param.default_value_type is not None:
            param.default_value = None
            param.default_value_type = None
    required_seen = False
    for param in reversed(params):
        if param.default_value is None:
            required_seen = True
        elif required_seen:
            param.default_value = None


class _PostProcessor:
    """Holds the context and diagnostics shared by the passes."""

    def __init__(self, context: BindingContext, diagnostics: Diagnostics) -> None:
        self._context = context
        self._diagnostics = diagnostics

    # ------------------------------------------------------------------
    # External merge
    # ------------------------------------------------------------------

    def merge_external_methods(self) -> None:
        for target, methods in self._context.external_methods.items():
            for method in methods:
                class_info = self._context.find_class(target, in_editor=method.has(MethodFlags.EDITOR))
                if class_info is None:
                    self._diagnostics.error(
                        f'Unable to find class "{target}" for external method "{method.source_name}".'
                    )
                    continue
                if method.has(MethodFlags.CONSTRUCTOR):
                    self._merge_external_ctor(class_info, method)
                else:
                    self._merge_external_method(class_info, method)
        self._context.external_methods.clear()

    def _merge_external_ctor(self, class_info: ClassInfo, method: MethodInfo) -> None:
        if method.return_info is None or method.return_info.type.name != class_info.name:
            self._diagnostics.error(f'External constructor "{method.source_name}" must return "{class_info.name}".')
            return
        method.script_name = class_info.clean_name
        class_info.ctors.append(method)

    def _merge_external_method(self, class_info: ClassInfo, method: MethodInfo) -> None:
        if not method.params or method.params[0].type.name != class_info.name:
            self._diagnostics.error(
                f'External method "{method.source_name}" must accept "{class_info.name}" as its first parameter.'
            )
            return
        method.params = method.params[1:]
        class_info.methods.append(method)

    # ------------------------------------------------------------------
    # Interop names
    # ------------------------------------------------------------------

    def assign_interop_names(self) -> None:
        for _, class_info in self._context.iter_classes():
            used: set[str] = set()
            for method in class_info.methods:
                method.interop_name = _unique_name(_interop_seed(method), used)
            for ctor in class_info.ctors:
                ctor.interop_name = _unique_name(ctor.source_name, used)
            for event in class_info.events:
                event.interop_name = _unique_name(event.source_name, used)
        for _, struct_info in self._context.iter_structs():
            struct_info.interop_name = interop_struct_name(struct_info)

    # ------------------------------------------------------------------
    # Category resolution and validation
    # ------------------------------------------------------------------

    def resolve_categories(self) -> None:
        for _, class_info in self._context.iter_classes():
            for ref in iter_class_refs(class_info):
                self._resolve_ref(ref)
            class_info.ctors = [m for m in class_info.ctors if self._valid_signature(class_info, m)]
            class_info.methods = [m for m in class_info.methods if self._valid_signature(class_info, m)]
            class_info.events = [e for e in class_info.events if self._valid_event(class_info, e)]
        for _, struct_info in self._context.iter_structs():
            for ref in iter_struct_refs(struct_info):
                self._resolve_ref(ref)
            valid_fields = []
            for field in struct_info.fields:
                if field.type.category in _INVALID_FIELD_CATEGORIES or field.type.has(TypeFlags.ASYNC_OP):
                    self._diagnostics.error(
                        f'Invalid field type found in struct "{struct_info.name}" for field "{field.name}". Skipping.'
                    )
                    continue
                valid_fields.append(field)
            struct_info.fields = valid_fields

    def _resolve_ref(self, ref: TypeRef) -> None:
        if ref.category is None:
            info = resolve_type_info(ref, self._context, self._diagnostics)
            ref.category = info.category
            if info.category is Category.ENUM and ref.underlying is None:
                ref.underlying = info.underlying or "INT32"
        if ref.has(TypeFlags.SRC_PTR) and ref.category in (
            Category.CLASS,
            Category.REFLECTABLE_CLASS,
            Category.GUI_ELEMENT,
        ):
            ref.flags &= ~TypeFlags.OUTPUT

    def _valid_signature(self, class_info: ClassInfo, method: MethodInfo) -> bool:
        owner = f'method "{method.source_name}" in "{class_info.name}"'
        for param in method.params:
            ref = param.type
            if ref.has(TypeFlags.ASYNC_OP):
                self._diagnostics.error(
                    f'AsyncOp types are not supported as input. Parameter "{param.name}" of {owner}.'
                )
                return False
            if ref.has(TypeFlags.MONO_OBJECT) and not ref.is_output:
                self._diagnostics.error(
                    f'MonoObject types are not supported as input. Parameter "{param.name}" of {owner}.'
                )
                return False
            if ref.has(TypeFlags.SCRIPT_OBJECT) and not ref.is_output:
                self._diagnostics.error(
                    f'ScriptObjectBase types are not supported as input. Parameter "{param.name}" of {owner}.'
                )
                return False
            if ref.category is Category.GUI_ELEMENT and ref.is_output:
                self._diagnostics.error(
                    f'GUIElement types are only supported as input. Parameter "{param.name}" of {owner}.'
                )
                return False
        if method.return_info is not None and not method.has(MethodFlags.CONSTRUCTOR):
            if method.return_info.type.category is Category.GUI_ELEMENT:
                self._diagnostics.error(f"GUIElement types are only supported as input. Return value of {owner}.")
                return False
        if method.has(MethodFlags.CONSTRUCTOR) and not _constructible(class_info, method):
            self._diagnostics.error(f'Cannot generate a constructor for "{class_info.name}". Unsupported class type.')
            return False
        return True

    def _valid_event(self, class_info: ClassInfo, event: EventInfo) -> bool:
        for param in event.params:
            if param.type.category is Category.GUI_ELEMENT or param.type.has(TypeFlags.ASYNC_OP):
                self._diagnostics.error(
                    f'Unsupported parameter type "{param.type.name}" for event "{event.source_name}" '
                    f'in "{class_info.name}".'
                )
                return False
        return True

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def derive_properties(self) -> None:
        for _, class_info in self._context.iter_classes():
            properties: dict[str, PropertyInfo] = {}
            dropped: set[str] = set()
            for method in class_info.methods:
                if method.has(MethodFlags.PROPERTY_GETTER):
                    if method.return_info is None:
                        self._diagnostics.error(
                            f'Property getter "{method.source_name}" in "{class_info.name}" must return a value.'
                        )
                        continue
                    ref = method.return_info.type
                elif method.has(MethodFlags.PROPERTY_SETTER):
                    ref = method.params[0].type
                else:
                    continue
                name = method.script_name
                if name in dropped:
                    continue
                is_static = method.has(MethodFlags.STATIC) or class_info.has(ClassFlags.IS_MODULE)
                prop = properties.get(name)
                if prop is None:
                    prop = PropertyInfo(
                        name=name,
                        type=ref.model_copy(update={"flags": ref.flags & ~_PASSING_FLAGS}),
                        is_static=is_static,
                        visibility=method.visibility,
                    )
                    properties[name] = prop
                elif _passing_independent(prop.type) != _passing_independent(ref) or prop.is_static != is_static:
                    self._diagnostics.error(f'Getter and setter types for property "{name}" don\'t match.')
                    dropped.add(name)
                    del properties[name]
                    continue

                if method.has(MethodFlags.PROPERTY_GETTER):
                    prop.getter = method.interop_name
                    if prop.documentation.is_empty():
                        prop.documentation = method.documentation
                    if prop.style.is_empty():
                        prop.style = method.style
                else:
                    prop.setter = method.interop_name
                    if not method.documentation.is_empty():
                        prop.documentation = method.documentation
                    if not method.style.is_empty():
                        prop.style = method.style
            class_info.properties = list(properties.values())

    # ------------------------------------------------------------------
    # Base classes
    # ------------------------------------------------------------------

    def mark_base_classes(self) -> None:
        self._context.base_children.clear()
        for _, class_info in self._context.iter_classes():
            if class_info.base_class is None:
                continue
            base = self._context.find_class(class_info.base_class, in_editor=class_info.has(ClassFlags.EDITOR))
            if base is None:
                continue
            base.flags |= ClassFlags.IS_BASE
            self._context.base_children.setdefault(base.name, []).append(class_info.name)

    # ------------------------------------------------------------------
    # Enum defaults
    # ------------------------------------------------------------------

    def resolve_enum_defaults(self) -> None:
        for _, class_info in self._context.iter_classes():
            for method in [*class_info.ctors, *class_info.methods]:
                for param in method.params:
                    self._resolve_enum_default(param)
        for _, struct_info in self._context.iter_structs():
            for field in struct_info.fields:
                self._resolve_enum_default(field)
            for ctor in struct_info.ctors:
                for param in ctor.params:
                    self._resolve_enum_default(param)

    def _resolve_enum_default(self, param: ParamInfo) -> None:
        ref = param.type
        value = param.default_value
        if ref.category is not Category.ENUM or ref.is_array or value is None:
            return
        if not _INTEGER_LITERAL.match(value):
            return
        enum_info = self._context.find_enum(ref.name)
        script_name = self._context.type_map[ref.name].script_name if ref.name in self._context.type_map else ref.name
        if enum_info is None or ref.has(TypeFlags.FLAGS_ENUM):
            param.default_value = f"({script_name}){value}"
            return
        entry = enum_info.entries.get(int(value))
        if entry is None:
            self._diagnostics.error(f'Cannot map default value to enum entry for parameter "{param.name}".')
            param.default_value = None
            return
        param.default_value = f"{enum_info.script_name}.{entry.script_name}"

    # ------------------------------------------------------------------
    # Complex structs and base references
    # ------------------------------------------------------------------

    def mark_complex_structs(self) -> None:
        structs = {struct_info.name: struct_info for _, struct_info in self._context.iter_structs()}
        for struct_info in structs.values():
            struct_info.requires_interop = any(
                field.type.is_array or field.type.category not in (Category.BUILTIN, Category.ENUM, Category.STRUCT)
                for field in struct_info.fields
            )
        changed = True
        while changed:
            changed = False
            for struct_info in structs.values():
                if struct_info.requires_interop:
                    continue
                if any(
                    field.type.category is Category.STRUCT
                    and field.type.name in structs
                    and structs[field.type.name].requires_interop
                    for field in struct_info.fields
                ):
                    struct_info.requires_interop = True
                    changed = True

        complex_names = {name for name, info in structs.items() if info.requires_interop}
        for ref in self._iter_all_refs():
            if ref.category is Category.STRUCT and ref.name in complex_names:
                ref.flags |= TypeFlags.COMPLEX_STRUCT
            if ref.category in CLASS_CATEGORIES | HANDLE_CATEGORIES | {Category.GUI_ELEMENT}:
                referent = self._context.find_class(ref.name)
                if referent is not None and referent.has(ClassFlags.IS_BASE):
                    ref.flags |= TypeFlags.REFERENCES_BASE

    def _iter_all_refs(self) -> Iterator[TypeRef]:
        for _, class_info in self._context.iter_classes():
            yield from iter_class_refs(class_info)
        for _, struct_info in self._context.iter_structs():
            yield from iter_struct_refs(struct_info)

    # ------------------------------------------------------------------
    # Default parameter expansion
    # ------------------------------------------------------------------

    def expand_default_parameters(self) -> None:
        for _, class_info in self._context.iter_classes():
            class_info.ctors = self._expand(class_info.ctors)
            class_info.methods = self._expand(class_info.methods)
        for _, struct_info in self._context.iter_structs():
            for ctor in struct_info.ctors:
                _strip_misplaced_defaults(ctor.params)

    def _expand(self, methods: list[MethodInfo]) -> list[MethodInfo]:
        result: list[MethodInfo] = []
        for method in methods:
            result.append(method)
            if method.has(MethodFlags.FIELD_WRAPPER):
                continue
            trailing_start = len(method.params)
            while trailing_start > 0 and method.params[trailing_start - 1].default_value is not None:
                trailing_start -= 1
            positions = [
                index
                for index in range(trailing_start, len(method.params))
                if method.params[index].default_value_type is not None
            ]
            copies: list[MethodInfo] = []
            for index in positions:
                copy = method.model_copy(deep=True)
                copy.forwarded_params = copy.params[index:]
                copy.params = copy.params[:index]
                copy.flags |= MethodFlags.CS_ONLY
                copy.interop_name = None
                _strip_misplaced_defaults(copy.params)
                copies.append(copy)
            _strip_misplaced_defaults(method.params)
            result.extend(copies)
        return result

    # ------------------------------------------------------------------
    # Includes
    # ------------------------------------------------------------------

    def compute_includes(self) -> None:
        for group in self._context.file_groups.values():
            for class_info in group.classes:
                self._class_includes(group, class_info)
            for struct_info in group.structs:
                self._struct_includes(group, struct_info)
            for enum_info in group.enums:
                self._add_decl_header(group, enum_info.name)

    def _add_decl_header(self, group: FileGroup, type_name: str) -> None:
        info = self._context.type_map.get(type_name)
        if info is not None and info.decl_file:
            group.add_header_include(info.decl_file)

    def _add_companion(self, group: FileGroup, type_name: str, *, in_header: bool) -> None:
        info = self._context.type_map.get(type_name)
        if info is None:
            return
        if info.dest_file:
            if info.dest_file == group.name:
                return
            include = companion_header(info.dest_file)
        elif type_name in _BUILTIN_COMPANIONS:
            include = _BUILTIN_COMPANIONS[type_name]
        elif info.category is Category.STRUCT:
            include = f"Wrappers/BsScript{info.script_name}.h"
        else:
            return
        if in_header:
            group.add_header_include(include)
        else:
            group.add_source_include(include)

    def _class_includes(self, group: FileGroup, class_info: ClassInfo) -> None:
        self._add_decl_header(group, class_info.name)
        template_header = _TEMPLATE_HEADERS.get(class_info.category)
        if template_header is not None:
            group.add_header_include(template_header)
        if class_info.base_class is not None:
            self._add_companion(group, class_info.base_class, in_header=True)
        for child in self._context.base_children.get(class_info.name, []):
            self._add_decl_header(group, child)
            self._add_companion(group, child, in_header=False)
        for method in [*class_info.ctors, *class_info.methods]:
            if method.has(MethodFlags.EXTERNAL):
                external_file = self._context.external_files.get(method.external_class or method.source_name)
                if external_file:
                    group.add_source_include(external_file)
        for ref in iter_class_refs(class_info):
            self._ref_includes(group, ref)

    def _struct_includes(self, group: FileGroup, struct_info: StructInfo) -> None:
        self._add_decl_header(group, struct_info.name)
        if struct_info.base_class is not None:
            self._add_decl_header(group, struct_info.base_class)
        for field in struct_info.fields:
            ref = field.type
            if ref.category in (Category.STRUCT, Category.ENUM):
                self._add_decl_header(group, ref.name)
                if ref.has(TypeFlags.COMPLEX_STRUCT):
                    self._add_companion(group, ref.name, in_header=True)
            else:
                self._ref_includes(group, ref)
        for ctor in struct_info.ctors:
            for param in ctor.params:
                self._ref_includes(group, param.type)

    def _ref_includes(self, group: FileGroup, ref: TypeRef) -> None:
        category = ref.category
        if ref.is_array:
            group.add_source_include("BsScriptArray.h")
        if ref.has(TypeFlags.ASYNC_OP):
            group.add_source_include("Wrappers/BsScriptAsyncOp.h")
        if category in (Category.STRING, Category.WSTRING, Category.PATH):
            group.add_source_include("BsMonoUtil.h")
            return
        if category in (Category.BUILTIN, Category.SCRIPT_OBJECT, Category.MONO_OBJECT) or category is None:
            return
        if category is Category.ENUM:
            self._add_decl_header(group, ref.name)
            return
        if category is Category.STRUCT:
            self._add_decl_header(group, ref.name)
            self._add_companion(group, ref.name, in_header=False)
            if ref.has(TypeFlags.COMPLEX_STRUCT):
                struct_info = self._context.find_struct(ref.name)
                if struct_info is not None:
                    group.add_forward_declaration(f"struct {interop_struct_name(struct_info)};")
            return

        info = self._context.type_map.get(ref.name)
        if info is not None and info.decl_file:
            if "<" in ref.name:
                group.add_header_include(info.decl_file)
            else:
                group.add_source_include(info.decl_file)
        self._add_companion(group, ref.name, in_header=False)
        support = _SUPPORT_HEADERS.get(category)
        if support is not None:
            group.add_source_include(support)
        if ref.has(TypeFlags.REFERENCES_BASE):
            for child in self._context.base_children.get(ref.name, []):
                self._add_companion(group, child, in_header=False)


def _constructible(class_info: ClassInfo, method: MethodInfo) -> bool:
    if class_info.category in CLASS_CATEGORIES:
        return True
    return class_info.category is Category.RESOURCE and method.has(MethodFlags.EXTERNAL)


def _interop_seed(method: MethodInfo) -> str:
    if not method.has(MethodFlags.FIELD_WRAPPER):
        return method.source_name
    prefix = "get" if method.has(MethodFlags.PROPERTY_GETTER) else "set"
    return f"{prefix}{method.source_name[:1].upper()}{method.source_name[1:]}"


def _unique_name(seed: str, used: set[str]) -> str:
    name = seed
    suffix = 0
    while name in used:
        name = f"{seed}{suffix}"
        suffix += 1
    used.add(name)
    return name

