# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Managed C# wrapper emission.

One ``{group}.generated.cs`` file is produced per file group, holding the
group's classes, structs and enums in that order. Classes are ``partial`` so
hand-written code can extend them; native hooks surface as private
``InternalCall`` externs.
"""

from __future__ import annotations

from scriptbind.analysis.classifier import managed_builtin
from scriptbind.emit.common import (
    EmitOptions,
    can_be_returned,
    is_plain_struct,
    is_static_method,
    managed_default,
    managed_literal,
    managed_type_name,
    module_wrap,
    script_name,
    style_attributes,
    unused_ctor_arity,
    visibility_keyword,
    xml_doc_comment,
)
from scriptbind.model.context import BindingContext, FileGroup
from scriptbind.model.entities import (
    ClassFlags,
    ClassInfo,
    EnumInfo,
    EventInfo,
    MethodFlags,
    MethodInfo,
    ParamInfo,
    PropertyInfo,
    StructCtorInfo,
    StructInfo,
)
from scriptbind.model.types import Category, TypeRef

# ###############
# Public Interface
# ###############


def render_managed_file(group: FileGroup, context: BindingContext, options: EmitOptions) -> str:
    """Render ``{group}.generated.cs``."""
    lines = [
        "using System;",
        "using System.Runtime.CompilerServices;",
        "using System.Runtime.InteropServices;",
    ]
    if group.in_editor:
        lines.append(f"using {options.managed_ns(False)};")
    lines.extend(["", f"namespace {options.managed_ns(group.in_editor)}", "{"])

    blocks: list[list[str]] = []
    for class_info in group.classes:
        blocks.append(module_wrap(_ClassWriter(class_info, context).render(), class_info.module))
    for struct_info in group.structs:
        blocks.append(module_wrap(_render_struct(struct_info, context), struct_info.module))
    for enum_info in group.enums:
        blocks.append(module_wrap(_render_enum(enum_info), enum_info.module))
    for index, block in enumerate(blocks):
        if index > 0:
            lines.append("")
        lines.extend(block)
    lines.append("}")
    return "\n".join(lines) + "\n"


def managed_default_expression(param: ParamInfo, context: BindingContext) -> str | None:
    """Managed expression for the default value of *param*, or None if it has none.

    Constructor-call defaults become ``new T(args)``; a call without arguments
    on an exported struct uses its ``Default()`` factory.
    """
    if param.default_value is None:
        return None
    if param.default_value_type is None:
        return managed_literal(param.default_value, param.type)
    type_name = script_name(context, param.default_value_type)
    if not param.default_value and context.find_struct(param.default_value_type) is not None:
        return f"{type_name}.Default()"
    return f"new {type_name}({param.default_value})"


# ################
# Implementation
# ################

_BASE_TYPES: dict[Category, str] = {
    Category.RESOURCE: "Resource",
    Category.COMPONENT: "Component",
    Category.GUI_ELEMENT: "GUIElement",
}


def _param_type(ref: TypeRef, context: BindingContext, *, for_interop: bool) -> str:
    name = managed_type_name(ref, context)
    if ref.is_output:
        return f"out {name}"
    if for_interop and is_plain_struct(ref):
        return f"ref {name}"
    return name


def _params(params: list[ParamInfo], context: BindingContext, *, for_interop: bool) -> list[str]:
    result = []
    for param in params:
        text = f"{_param_type(param.type, context, for_interop=for_interop)} {param.name}"
        if not for_interop and param.default_value is not None:
            text += f" = {managed_literal(param.default_value, param.type)}"
        result.append(text)
    return result


def _args(params: list[ParamInfo]) -> list[str]:
    result = []
    for param in params:
        if param.type.is_output:
            result.append(f"out {param.name}")
        elif is_plain_struct(param.type):
            result.append(f"ref {param.name}")
        else:
            result.append(param.name)
    return result


def _forward_args(method: MethodInfo, context: BindingContext) -> list[str]:
    args = [f"out {p.name}" if p.type.is_output else p.name for p in method.params]
    for param in method.forwarded_params:
        value = managed_default_expression(param, context)
        args.append(value if value is not None else managed_default(param.type, context))
    return args


class _ClassWriter:
    """Builds the managed text of one exported class."""

    def __init__(self, class_info: ClassInfo, context: BindingContext) -> None:
        self._info = class_info
        self._context = context
        self._name = script_name(context, class_info.name)
        self._is_module = class_info.has(ClassFlags.IS_MODULE)

    def render(self) -> list[str]:
        info = self._info
        sections = [
            self._runtime_ctor(),
            *[self._ctor(ctor) for ctor in info.ctors if not ctor.has(MethodFlags.INTEROP_ONLY)],
            *[self._property(prop) for prop in info.properties],
            *[self._event(event) for event in info.events],
            *[self._method(method) for method in info.methods if self._has_wrapper(method)],
        ]
        lines = xml_doc_comment(info.documentation, "\t")
        lines.append(f"\t{visibility_keyword(info.visibility)} partial class {self._name} : {self._base_type()}")
        lines.append("\t{")
        for section in sections:
            lines.extend(section)
            lines.append("")
        lines.extend(self._interops())
        lines.append("\t}")
        return lines

    def _base_type(self) -> str:
        if self._info.base_class is not None:
            return script_name(self._context, self._info.base_class)
        return _BASE_TYPES.get(self._info.category, "ScriptObject")

    def _static(self, is_static: bool) -> str:
        return "static " if is_static or self._is_module else ""

    def _has_wrapper(self, method: MethodInfo) -> bool:
        if method.has(MethodFlags.INTEROP_ONLY):
            return False
        return not method.has(MethodFlags.PROPERTY_GETTER | MethodFlags.PROPERTY_SETTER)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    def _runtime_ctor(self) -> list[str]:
        params = ", ".join(f"bool __dummy{index}" for index in range(unused_ctor_arity(self._info)))
        return [f"\t\tprivate {self._name}({params}) {{ }}"]

    def _ctor(self, ctor: MethodInfo) -> list[str]:
        param_names = [p.name for p in ctor.params] if ctor.has(MethodFlags.CS_ONLY) else None
        lines = xml_doc_comment(ctor.documentation, "\t\t", param_names=param_names)
        params = ", ".join(_params(ctor.params, self._context, for_interop=False))
        lines.append(f"\t\t{visibility_keyword(ctor.visibility)} {self._name}({params})")
        if ctor.has(MethodFlags.CS_ONLY):
            lines.append(f"\t\t\t: this({', '.join(_forward_args(ctor, self._context))})")
            lines.append("\t\t{ }")
            return lines
        args = ", ".join(["this", *_args(ctor.params)])
        lines.extend(["\t\t{", f"\t\t\tInternal_{ctor.interop_name}({args});", "\t\t}"])
        return lines

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def _property(self, prop: PropertyInfo) -> list[str]:
        type_name = managed_type_name(prop.type, self._context)
        this_args = [] if prop.is_static or self._is_module else ["mCachedPtr"]
        lines = xml_doc_comment(prop.documentation, "\t\t")
        lines.extend(f"\t\t{attribute}" for attribute in style_attributes(prop.style))
        lines.append(f"\t\t{visibility_keyword(prop.visibility)} {self._static(prop.is_static)}{type_name} {prop.name}")
        lines.append("\t\t{")
        if prop.getter is not None:
            if can_be_returned(prop.type):
                lines.append(f"\t\t\tget {{ return Internal_{prop.getter}({', '.join(this_args)}); }}")
            else:
                lines.extend(
                    [
                        "\t\t\tget",
                        "\t\t\t{",
                        f"\t\t\t\t{type_name} temp;",
                        f"\t\t\t\tInternal_{prop.getter}({', '.join([*this_args, 'out temp'])});",
                        "\t\t\t\treturn temp;",
                        "\t\t\t}",
                    ]
                )
        if prop.setter is not None:
            value = "ref value" if is_plain_struct(prop.type) else "value"
            lines.append(f"\t\t\tset {{ Internal_{prop.setter}({', '.join([*this_args, value])}); }}")
        lines.append("\t\t}")
        return lines

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _event(self, event: EventInfo) -> list[str]:
        static = self._static(event.has(MethodFlags.STATIC))
        types = [managed_type_name(p.type, self._context) for p in event.params]
        params = ", ".join(f"{t} {p.name}" for t, p in zip(types, event.params))
        args = ", ".join(p.name for p in event.params)
        action = f"Action<{', '.join(types)}>" if types else "Action"
        raiser = f"Internal_{event.interop_name}"

        lines: list[str] = []
        if event.has(MethodFlags.CALLBACK | MethodFlags.INTEROP_ONLY):
            lines.extend(xml_doc_comment(event.documentation, "\t\t"))
            lines.append(f"\t\t{static}partial void Callback_{event.interop_name}({params});")
            lines.append("")
            call = f"Callback_{event.interop_name}({args});"
        else:
            lines.extend(xml_doc_comment(event.documentation, "\t\t"))
            lines.append(f"\t\t{visibility_keyword(event.visibility)} {static}event {action} {event.script_name};")
            lines.append("")
            call = f"{event.script_name}?.Invoke({args});"
        lines.extend(
            [
                f"\t\tprivate {static}void {raiser}({params})",
                "\t\t{",
                f"\t\t\t{call}",
                "\t\t}",
            ]
        )
        return lines

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def _return_type(self, method: MethodInfo) -> str:
        if method.return_info is None:
            return "void"
        return managed_type_name(method.return_info.type, self._context)

    def _method(self, method: MethodInfo) -> list[str]:
        is_static = is_static_method(self._info, method)
        return_type = self._return_type(method)
        param_names = [p.name for p in method.params] if method.has(MethodFlags.CS_ONLY) else None
        lines = xml_doc_comment(method.documentation, "\t\t", param_names=param_names)
        params = ", ".join(_params(method.params, self._context, for_interop=False))
        lines.append(
            f"\t\t{visibility_keyword(method.visibility)} {self._static(is_static)}"
            f"{return_type} {method.script_name}({params})"
        )
        lines.append("\t\t{")
        lines.extend(self._method_body(method, is_static, return_type))
        lines.append("\t\t}")
        return lines

    def _method_body(self, method: MethodInfo, is_static: bool, return_type: str) -> list[str]:
        returns = "return " if method.return_info is not None else ""
        if method.has(MethodFlags.CS_ONLY):
            forward = ", ".join(_forward_args(method, self._context))
            return [f"\t\t\t{returns}{method.script_name}({forward});"]

        args = [] if is_static else ["mCachedPtr"]
        args.extend(_args(method.params))
        hook = f"Internal_{method.interop_name}"
        if method.return_info is not None and not can_be_returned(method.return_info.type):
            return [
                f"\t\t\t{return_type} temp;",
                f"\t\t\t{hook}({', '.join([*args, 'out temp'])});",
                "\t\t\treturn temp;",
            ]
        return [f"\t\t\t{returns}{hook}({', '.join(args)});"]

    # ------------------------------------------------------------------
    # Interop declarations
    # ------------------------------------------------------------------

    def _interops(self) -> list[str]:
        lines: list[str] = []
        for method in [*self._info.ctors, *self._info.methods]:
            if method.has(MethodFlags.CS_ONLY):
                continue
            lines.append("\t\t[MethodImpl(MethodImplOptions.InternalCall)]")
            lines.append(f"\t\tprivate static extern {self._interop_signature(method)};")
        return lines

    def _interop_signature(self, method: MethodInfo) -> str:
        params = _params(method.params, self._context, for_interop=True)
        if method.has(MethodFlags.CONSTRUCTOR):
            return f"void Internal_{method.interop_name}({', '.join([f'{self._name} managedInstance', *params])})"

        return_type = "void"
        if method.return_info is not None:
            ref = method.return_info.type
            if can_be_returned(ref):
                return_type = managed_type_name(ref, self._context)
            else:
                params.append(f"out {managed_type_name(ref, self._context)} __output")
        if not is_static_method(self._info, method):
            params.insert(0, "IntPtr thisPtr")
        return f"{return_type} Internal_{method.interop_name}({', '.join(params)})"


def _render_struct(struct_info: StructInfo, context: BindingContext) -> list[str]:
    name = script_name(context, struct_info.name)
    lines = xml_doc_comment(struct_info.documentation, "\t")
    lines.append("\t[StructLayout(LayoutKind.Sequential)]")
    lines.append(f"\t{visibility_keyword(struct_info.visibility)} partial struct {name}")
    lines.append("\t{")
    for ctor in struct_info.ctors:
        lines.extend(_struct_ctor(struct_info, ctor, name, context))
        lines.append("")

    base = context.find_struct(struct_info.base_class) if struct_info.base_class is not None else None
    if base is not None:
        lines.extend(_struct_base_accessors(base, context))
        lines.append("")

    for field in struct_info.fields:
        if not field.documentation.is_empty():
            lines.extend(xml_doc_comment(field.documentation, "\t\t"))
        lines.extend(f"\t\t{attribute}" for attribute in style_attributes(field.style))
        lines.append(f"\t\tpublic {managed_type_name(field.type, context)} {field.name};")
    lines.append("\t}")
    return lines


def _struct_ctor(struct_info: StructInfo, ctor: StructCtorInfo, name: str, context: BindingContext) -> list[str]:
    parameterless = not ctor.params
    lines: list[str] = []
    if parameterless:
        lines.append("\t\t/// <summary>Initializes the struct with default values.</summary>")
        lines.append(f"\t\tpublic static {name} Default()")
        target = "value"
    else:
        lines.extend(xml_doc_comment(ctor.documentation, "\t\t"))
        params = ", ".join(_params(ctor.params, context, for_interop=False))
        lines.append(f"\t\tpublic {name}({params})")
        target = "this"
    lines.append("\t\t{")
    if parameterless:
        lines.append(f"\t\t\t{name} value = new {name}();")
    for field in struct_info.fields:
        value = ctor.field_assignments.get(field.name)
        if value is None:
            value = managed_default_expression(field, context) or managed_default(field.type, context)
        lines.append(f"\t\t\t{target}.{field.name} = {value};")
    if parameterless:
        lines.append("")
        lines.append("\t\t\treturn value;")
    lines.append("\t\t}")
    return lines


def _struct_base_accessors(base: StructInfo, context: BindingContext) -> list[str]:
    base_name = script_name(context, base.name)
    lines = [
        "\t\t/// <summary>Returns a subset of this struct. This subset usually contains common fields shared with "
        "another struct.</summary>",
        f"\t\tpublic {base_name} GetBase()",
        "\t\t{",
        f"\t\t\t{base_name} value = new {base_name}();",
    ]
    lines.extend(f"\t\t\tvalue.{field.name} = {field.name};" for field in base.fields)
    lines.extend(["\t\t\treturn value;", "\t\t}", ""])
    lines.extend(
        [
            "\t\t/// <summary>Assigns values to a subset of fields of this struct. This subset usually contains common "
            "field shared with another struct.</summary>",
            f"\t\tpublic void SetBase({base_name} value)",
            "\t\t{",
        ]
    )
    lines.extend(f"\t\t\t{field.name} = value.{field.name};" for field in base.fields)
    lines.append("\t\t}")
    return lines


def _render_enum(enum_info: EnumInfo) -> list[str]:
    lines = xml_doc_comment(enum_info.documentation, "\t")
    header = f"\t{visibility_keyword(enum_info.visibility)} enum {enum_info.script_name}"
    if enum_info.explicit_type is not None:
        backing = managed_builtin(enum_info.explicit_type)
        if backing != "int":
            header += f" : {backing}"
    lines.append(header)
    lines.append("\t{")
    entries = [enum_info.entries[value] for value in sorted(enum_info.entries)]
    for index, entry in enumerate(entries):
        if not entry.documentation.is_empty():
            lines.extend(xml_doc_comment(entry.documentation, "\t\t"))
        separator = "," if index < len(entries) - 1 else ""
        lines.append(f"\t\t{entry.script_name} = {entry.value}{separator}")
    lines.append("\t}")
    return lines
