# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Naming and type-mapping helpers shared by the native, managed and mapping emitters.

All helpers are pure: they read the post-processed :class:`BindingContext` and
return text. Type references are expected to have their category resolved.
"""

from __future__ import annotations

from dataclasses import dataclass

from scriptbind.analysis.classifier import managed_builtin
from scriptbind.model.comments import CommentEntry
from scriptbind.model.context import BindingContext
from scriptbind.model.entities import ClassFlags, ClassInfo, MethodFlags, MethodInfo, StyleInfo, Visibility
from scriptbind.model.types import CLASS_CATEGORIES, HANDLE_CATEGORIES, STRING_CATEGORIES, Category, TypeFlags, TypeRef

# ###############
# Public Interface
# ###############

XML_COLUMN_LIMIT = 124


@dataclass
class EmitOptions:
    """Names baked into the generated text.

    Attributes:
        native_namespace: C++ namespace of engine companions.
        native_editor_namespace: C++ namespace of editor companions.
        managed_namespace: C# namespace of engine wrappers.
        managed_editor_namespace: C# namespace of editor wrappers.
        export_macro: Export macro on engine companion classes.
        editor_export_macro: Export macro on editor companion classes.
        generate_editor: Whether editor file groups and lookups are produced.
    """

    native_namespace: str = "bs"
    native_editor_namespace: str = "bs"
    managed_namespace: str = "BansheeEngine"
    managed_editor_namespace: str = "BansheeEditor"
    export_macro: str = "BS_SCR_BE_EXPORT"
    editor_export_macro: str = "BS_SCR_BED_EXPORT"
    generate_editor: bool = True

    def native_ns(self, in_editor: bool) -> str:
        return self.native_editor_namespace if in_editor else self.native_namespace

    def managed_ns(self, in_editor: bool) -> str:
        return self.managed_editor_namespace if in_editor else self.managed_namespace

    def export(self, in_editor: bool) -> str:
        return self.editor_export_macro if in_editor else self.export_macro

    def script_obj(self, in_editor: bool, script_name: str) -> str:
        """The ``SCRIPT_OBJ`` macro line binding a companion to its managed type."""
        assembly = "EDITOR_ASSEMBLY" if in_editor else "ENGINE_ASSEMBLY"
        return f'SCRIPT_OBJ({assembly}, "{self.managed_ns(in_editor)}", "{script_name}")'


def word_wrap(text: str, prefix: str, limit: int = XML_COLUMN_LIMIT) -> list[str]:
    """Wrap *text* into lines of at most *limit* columns, each starting with *prefix*.

    Lines break after the last space that fits; a word longer than a line is
    split.
    """
    width = max(limit - len(prefix), 1)
    if len(text) + len(prefix) <= limit:
        return [prefix + text]
    lines: list[str] = []
    index = 0
    while index < len(text):
        if len(text) - index <= width:
            lines.append(prefix + text[index:])
            break
        space = text.rfind(" ", index, index + width + 1)
        if space <= index:
            lines.append(prefix + text[index : index + width])
            index += width
        else:
            lines.append(prefix + text[index : space + 1])
            index = space + 1
    return lines


def xml_doc_comment(comment: CommentEntry, indent: str, *, param_names: list[str] | None = None) -> list[str]:
    """Render *comment* as C# XML documentation lines.

    Args:
        comment: Parsed comment.
        indent: Indentation prepended to every line.
        param_names: When given, ``<param>`` entries for other names are left
            out.
    """
    prefix = f"{indent}/// "
    lines: list[str] = []
    if comment.brief:
        lines.append(f"{prefix}<summary>")
        lines.extend(_paragraphs(comment.brief, prefix))
        lines.append(f"{prefix}</summary>")
    for param in comment.params:
        if not param.comment or (param_names is not None and param.name not in param_names):
            continue
        lines.append(f'{prefix}<param name="{param.name}">')
        lines.extend(_paragraphs(param.comment, prefix))
        lines.append(f"{prefix}</param>")
    if comment.returns:
        lines.append(f"{prefix}<returns>")
        lines.extend(_paragraphs(comment.returns, prefix))
        lines.append(f"{prefix}</returns>")
    return lines


def visibility_keyword(visibility: Visibility) -> str:
    return visibility.value


def script_name(context: BindingContext, type_name: str) -> str:
    """Managed name of a user type; unknown types keep their source name."""
    info = context.type_map.get(type_name)
    return info.script_name if info is not None else type_name


def managed_type_name(ref: TypeRef, context: BindingContext) -> str:
    """C# type of a typed position, including the array suffix."""
    if ref.has(TypeFlags.ASYNC_OP):
        return "AsyncOp"
    category = ref.category
    if category is Category.BUILTIN:
        name = managed_builtin(ref.name)
    elif category in STRING_CATEGORIES:
        name = "string"
    elif category in (Category.MONO_OBJECT, Category.SCRIPT_OBJECT):
        name = "object"
    else:
        name = script_name(context, ref.name)
    return f"{name}[]" if ref.is_array else name


def is_plain_struct(ref: TypeRef) -> bool:
    """True for a non-array struct passed by ``ref`` across the interop boundary."""
    return ref.category is Category.STRUCT and not ref.is_array


def is_complex_struct(ref: TypeRef) -> bool:
    return is_plain_struct(ref) and ref.has(TypeFlags.COMPLEX_STRUCT)


def can_be_returned(ref: TypeRef) -> bool:
    """Whether a native hook can return *ref* directly instead of through ``__output``."""
    if ref.is_output:
        return False
    if ref.is_array or ref.has(TypeFlags.ASYNC_OP):
        return True
    return ref.category is not Category.STRUCT


def companion_name(context: BindingContext, type_name: str) -> str:
    """Name of the native companion class wrapping *type_name*."""
    class_info = context.find_class(type_name)
    if class_info is not None:
        return f"Script{class_info.clean_name}"
    struct_info = context.find_struct(type_name)
    if struct_info is not None:
        return f"Script{struct_info.clean_name}"
    return f"Script{script_name(context, type_name)}"


def base_companion_name(context: BindingContext, type_name: str) -> str:
    return f"{companion_name(context, type_name)}Base"


def interop_struct_type(context: BindingContext, type_name: str) -> str:
    """Name of the C++ mirror of a complex struct's managed layout."""
    struct_info = context.find_struct(type_name)
    clean = struct_info.clean_name if struct_info is not None else type_name
    return f"__{clean}Interop"


def cpp_var_type(ref: TypeRef, context: BindingContext) -> str:
    """Native type of a local holding one (non-array) value of *ref*."""
    category = ref.category
    if ref.has(TypeFlags.ASYNC_OP):
        inner = ref.model_copy(update={"flags": ref.flags & ~TypeFlags.ASYNC_OP})
        return f"TAsyncOp<{cpp_element_type(inner, context)}>"
    if category is Category.RESOURCE:
        return f"ResourceHandle<{ref.name}>"
    if category in (Category.SCENE_OBJECT, Category.COMPONENT):
        return f"GameObjectHandle<{ref.name}>"
    if category in CLASS_CATEGORIES:
        return f"SPtr<{ref.name}>"
    if category is Category.GUI_ELEMENT:
        return f"{ref.name}*"
    if category is Category.SCRIPT_OBJECT:
        return "ScriptObjectBase*"
    if category is Category.MONO_OBJECT:
        return "MonoObject*"
    return ref.name


def cpp_element_type(ref: TypeRef, context: BindingContext) -> str:
    """Native type of a full value of *ref*, wrapping arrays in ``Vector``."""
    element = cpp_var_type(ref, context)
    return f"Vector<{element}>" if ref.is_array else element


def native_param_type(ref: TypeRef, context: BindingContext) -> str:
    """Native type a C++ signature uses to receive *ref* (event raisers)."""
    if ref.is_array:
        return f"const {cpp_element_type(ref, context)}&"
    if ref.has(TypeFlags.SRC_PTR):
        return f"{ref.name}*"
    if ref.category in (Category.BUILTIN, Category.ENUM) and not ref.has(TypeFlags.SRC_REF):
        return ref.name
    if ref.has(TypeFlags.SRC_REF) and ref.category in CLASS_CATEGORIES | HANDLE_CATEGORIES:
        return f"const {ref.name}&"
    return f"const {cpp_var_type(ref, context)}&"


def interop_value_type(ref: TypeRef, context: BindingContext) -> str:
    """Native type of the managed representation of one value (interop struct fields)."""
    if ref.has(TypeFlags.ASYNC_OP):
        return "MonoObject*"
    if ref.is_array:
        return "MonoArray*"
    category = ref.category
    if category in (Category.BUILTIN, Category.ENUM):
        return ref.name
    if category is Category.STRUCT:
        return interop_struct_type(context, ref.name) if ref.has(TypeFlags.COMPLEX_STRUCT) else ref.name
    if category in STRING_CATEGORIES:
        return "MonoString*"
    return "MonoObject*"


def interop_cpp_type(ref: TypeRef, context: BindingContext) -> str:
    """Native type of a hook parameter or return value carrying *ref*."""
    suffix = "*" if ref.is_output else ""
    if ref.is_array and not ref.has(TypeFlags.ASYNC_OP):
        return f"MonoArray*{suffix}"
    if ref.category is Category.STRUCT and not ref.has(TypeFlags.ASYNC_OP):
        return f"{interop_value_type(ref, context)}*"
    return f"{interop_value_type(ref, context)}{suffix}"


def thunk_param_type(ref: TypeRef, context: BindingContext) -> str:
    """Native type of an event argument passed to a managed thunk; structs travel boxed."""
    if not ref.is_array and ref.category in (Category.BUILTIN, Category.ENUM):
        return ref.name
    if ref.category is Category.STRUCT and not ref.is_array:
        return "MonoObject*"
    return interop_value_type(ref, context)


def array_entry_type(ref: TypeRef, context: BindingContext) -> str:
    """Template argument of ``ScriptArray::create``/``get`` for elements of *ref*."""
    category = ref.category
    if category is Category.BUILTIN:
        return ref.name
    if category is Category.ENUM:
        return ref.underlying or "INT32"
    if category in (Category.STRING, Category.PATH):
        return "String"
    if category is Category.WSTRING:
        return "WString"
    if category in (Category.SCRIPT_OBJECT, Category.MONO_OBJECT):
        return "MonoObject*"
    return companion_name(context, ref.name)


def unused_ctor_arity(class_info: ClassInfo) -> int:
    """Smallest bool-only parameter count no constructor of *class_info* uses."""
    count = 1
    while any(_is_bool_signature(ctor, count) for ctor in class_info.ctors):
        count += 1
    return count


def managed_default(ref: TypeRef, context: BindingContext) -> str:
    """Default value for a struct field that has no initializer."""
    if ref.is_array:
        return "null"
    category = ref.category
    if category is Category.BUILTIN:
        return "false" if ref.name == "bool" else "0"
    if category is Category.ENUM:
        return f"({script_name(context, ref.name)})0"
    if category is Category.STRUCT:
        return f"new {script_name(context, ref.name)}()"
    return "null"


def managed_literal(value: str, ref: TypeRef) -> str:
    """Adapt a rendered default literal to the managed type of *ref*."""
    if ref.category is Category.BUILTIN and ref.name == "float" and not ref.is_array:
        if any(ch in value for ch in ".eE") and not value.endswith("f"):
            return f"{value}f"
    return value


def style_attributes(style: StyleInfo) -> list[str]:
    """Inspector attributes for a field or property, in a fixed order."""
    attributes: list[str] = []
    if style.hide:
        attributes.append("HideInInspector")
    if style.show:
        attributes.append("ShowInInspector")
    if style.range_min is not None and style.range_max is not None:
        slider = "true" if style.slider else "false"
        attributes.append(f"Range({style.range_min}, {style.range_max}, {slider})")
    if style.step is not None:
        attributes.append(f"Step({style.step})")
    if style.layer_mask:
        attributes.append("LayerMask")
    if style.order is not None:
        attributes.append(f"Order({style.order})")
    if style.category is not None:
        attributes.append(f'Category("{style.category}")')
    for enabled, name in (
        (style.inline, "Inline"),
        (style.not_null, "NotNull"),
        (style.pass_by_copy, "PassByCopy"),
        (style.apply_on_dirty, "ApplyOnDirty"),
        (style.as_quaternion, "AsQuaternion"),
        (style.load_on_assign, "LoadOnAssign"),
        (style.hdr, "HDR"),
    ):
        if enabled:
            attributes.append(name)
    return [f"[{attribute}]" for attribute in attributes]


def module_wrap(lines: list[str], module: str | None, indent: str = "\t") -> list[str]:
    """Surround a managed type with a doxygen ``@addtogroup`` block."""
    if module is None:
        return lines
    return [
        f"{indent}/** @addtogroup {module}",
        f"{indent} *  @{{",
        f"{indent} */",
        "",
        *lines,
        "",
        f"{indent}/** @}} */",
    ]


def is_static_method(class_info: ClassInfo, method: MethodInfo) -> bool:
    """Static on the managed side: static methods and every method of a module."""
    return method.has(MethodFlags.STATIC) or class_info.has(ClassFlags.IS_MODULE)


# ################
# Implementation
# ################


def _paragraphs(paragraphs: list[str], prefix: str) -> list[str]:
    lines: list[str] = []
    for index, paragraph in enumerate(paragraphs):
        if index > 0:
            lines.append(prefix.rstrip())
        lines.extend(word_wrap(paragraph, prefix))
    return lines


def _is_bool_signature(ctor: MethodInfo, count: int) -> bool:
    if len(ctor.params) != count:
        return False
    return all(param.type.name == "bool" and not param.type.is_array for param in ctor.params)
