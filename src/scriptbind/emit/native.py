# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Native C++ companion emission.

For every file group with classes or structs, one header and one source file
are produced. Each exported class gets a companion (``Script{Name}``) deriving
from the runtime template matching its category, plus a base companion when
other exported classes derive from it. Each exported struct gets a companion
that boxes and unboxes it, and complex structs additionally get a C++ mirror
of their managed layout with ``fromInterop``/``toInterop`` conversions.
"""

from __future__ import annotations

from scriptbind.analysis.postprocess import companion_header
from scriptbind.emit.common import (
    EmitOptions,
    can_be_returned,
    cpp_var_type,
    interop_cpp_type,
    interop_value_type,
    is_static_method,
    managed_type_name,
    native_param_type,
    thunk_param_type,
    unused_ctor_arity,
)
from scriptbind.emit.marshal import INDENT, CallStreams, ReturnPlan, add_param, add_return, to_managed, to_native
from scriptbind.model.context import BindingContext, FileGroup
from scriptbind.model.entities import ClassFlags, ClassInfo, EventInfo, MethodFlags, MethodInfo, StructInfo
from scriptbind.model.types import CLASS_CATEGORIES, Category, TypeRef

# ###############
# Public Interface
# ###############

COMPONENT_LOOKUP_FILE = "BsBuiltinComponentLookup.generated.h"
REFLECTABLE_LOOKUP_FILE = "BsBuiltinReflectableTypesLookup.generated.h"
EDITOR_COMPONENT_LOOKUP_FILE = "BsEditorBuiltinComponentLookup.generated.h"
EDITOR_REFLECTABLE_LOOKUP_FILE = "BsEditorBuiltinReflectableTypesLookup.generated.h"


def has_native_output(group: FileGroup) -> bool:
    """Enum-only groups produce no native files."""
    return bool(group.classes or group.structs)


def render_native_header(group: FileGroup, context: BindingContext, options: EmitOptions) -> str:
    """Render ``BsScript{group}.generated.h``."""
    prerequisites = "BsScriptEditorPrerequisites.h" if group.in_editor else "BsScriptEnginePrerequisites.h"
    lines = ["#pragma once", "", f'#include "{prerequisites}"', '#include "BsScriptObject.h"']
    lines.extend(f'#include "{include}"' for include in group.header_includes)
    lines.extend(["", f"namespace {options.native_ns(group.in_editor)}", "{"])
    for declaration in group.forward_declarations:
        lines.append(f"\t{declaration}")
    if group.forward_declarations:
        lines.append("")

    blocks: list[list[str]] = []
    for class_info in group.classes:
        blocks.append(_ClassWriter(class_info, context, options).header())
    for struct_info in group.structs:
        blocks.append(_StructWriter(struct_info, context, options).header())
    lines.extend(_join_blocks(blocks))
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_native_source(group: FileGroup, context: BindingContext, options: EmitOptions) -> str:
    """Render ``BsScript{group}.generated.cpp``."""
    lines = [
        f'#include "{companion_header(group.name)}"',
        '#include "BsMonoMethod.h"',
        '#include "BsMonoClass.h"',
        '#include "BsMonoUtil.h"',
    ]
    lines.extend(f'#include "{include}"' for include in group.source_includes if include != "BsMonoUtil.h")
    lines.extend(["", f"namespace {options.native_ns(group.in_editor)}", "{"])

    blocks: list[list[str]] = []
    for class_info in group.classes:
        blocks.append(_ClassWriter(class_info, context, options).source())
    for struct_info in group.structs:
        blocks.append(_StructWriter(struct_info, context, options).source())
    lines.extend(_join_blocks(blocks))
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_component_lookup(context: BindingContext, options: EmitOptions, *, in_editor: bool = False) -> str:
    """Render the lookup header mapping component RTTI ids to their companions."""
    entries = [
        f"\t\tADD_ENTRY({_rtti_id(context, class_info)}, Script{class_info.clean_name})"
        for class_info in _lookup_classes(context, Category.COMPONENT, in_editor)
    ]
    return _render_lookup("BuiltinComponentLookup.h", entries, options.native_ns(in_editor))


def render_reflectable_lookup(context: BindingContext, options: EmitOptions, *, in_editor: bool = False) -> str:
    """Render the lookup header mapping reflectable types to their companions."""
    entries = [
        f"\t\tADD_ENTRY({class_info.name}, Script{class_info.clean_name}, {_rtti_id(context, class_info)})"
        for class_info in _lookup_classes(context, Category.REFLECTABLE_CLASS, in_editor)
    ]
    return _render_lookup("BuiltinReflectableTypesLookup.h", entries, options.native_ns(in_editor))


# ################
# Implementation
# ################

_TEMPLATES: dict[Category, str] = {
    Category.RESOURCE: "TScriptResource",
    Category.COMPONENT: "TScriptComponent",
    Category.REFLECTABLE_CLASS: "TScriptReflectable",
}

_ROOT_BASES: dict[Category, str] = {
    Category.CLASS: "ScriptObjectBase",
    Category.REFLECTABLE_CLASS: "ScriptReflectableBase",
    Category.COMPONENT: "ScriptComponentBase",
    Category.RESOURCE: "ScriptResourceBase",
    Category.SCENE_OBJECT: "ScriptObjectBase",
}


def _join_blocks(blocks: list[list[str]]) -> list[str]:
    lines: list[str] = []
    for index, block in enumerate(blocks):
        if index > 0:
            lines.append("")
        lines.extend(block)
    return lines


def _lookup_classes(context: BindingContext, category: Category, in_editor: bool) -> list[ClassInfo]:
    return [
        class_info
        for group, class_info in context.iter_classes()
        if class_info.category is category and group.in_editor == in_editor
    ]


def _rtti_id(context: BindingContext, class_info: ClassInfo) -> str:
    info = context.type_map.get(class_info.name)
    if info is not None and info.rtti_type_id:
        return info.rtti_type_id
    return f"{class_info.name}::getRTTIStatic()->getRTTIId()"


def _render_lookup(include: str, entries: list[str], namespace: str) -> str:
    lines = [
        f'#include "{include}"',
        "",
        f"namespace {namespace}",
        "{",
        "\tLOOKUP_BEGIN",
        *entries,
        "\tLOOKUP_END",
        "}",
        "#undef LOOKUP_BEGIN",
        "#undef ADD_ENTRY",
        "#undef LOOKUP_END",
    ]
    return "\n".join(lines) + "\n"


def _placeholders(count: int) -> str:
    return "".join(f", std::placeholders::_{index + 1}" for index in range(count))


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


class _ClassWriter:
    """Emits the companion (and base companion) of one exported class."""

    def __init__(self, class_info: ClassInfo, context: BindingContext, options: EmitOptions) -> None:
        self._info = class_info
        self._context = context
        self._options = options
        self._in_editor = class_info.has(ClassFlags.EDITOR)
        self._category = class_info.category
        self._is_module = class_info.has(ClassFlags.IS_MODULE)
        self._companion = f"Script{class_info.clean_name}"
        self._wrapped = cpp_var_type(TypeRef(name=class_info.name, category=class_info.category), context)
        self._is_base = class_info.has(ClassFlags.IS_BASE) and self._category is not Category.GUI_ELEMENT

        self._base_companion: str | None = None
        self._parent_base: str | None = None
        parent = None
        if class_info.base_class is not None:
            parent = context.find_class(class_info.base_class, in_editor=self._in_editor)
        if parent is not None and parent.category is not Category.GUI_ELEMENT:
            self._parent_base = f"Script{parent.clean_name}Base"
        if self._is_base:
            self._base_companion = f"{self._companion}Base"
        elif self._parent_base is not None:
            self._base_companion = self._parent_base
        self._has_chain = self._base_companion is not None
        self._this_type = f"{self._companion}Base" if self._is_base else self._companion

        self._instance_events = [event for event in class_info.events if not self._static_event(event)]
        self._static_events = [event for event in class_info.events if self._static_event(event)]
        self._hooks = [m for m in [*class_info.ctors, *class_info.methods] if not m.has(MethodFlags.CS_ONLY)]

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def header(self) -> list[str]:
        lines: list[str] = []
        if self._is_base:
            lines.extend(self._base_header())
            lines.append("")
        lines.extend(self._main_header())
        return lines

    def _base_header(self) -> list[str]:
        parent = self._parent_base or _ROOT_BASES.get(self._category, "ScriptObjectBase")
        name = f"{self._companion}Base"
        lines = [
            f"\tclass {self._options.export(self._in_editor)} {name} : public {parent}",
            "\t{",
            "\tpublic:",
            f"\t\t{name}(MonoObject* instance);",
            f"\t\tvirtual ~{name}() {{}}",
        ]
        if self._category in CLASS_CATEGORIES:
            is_root = self._parent_base is None and self._category is Category.CLASS
            lines.append("")
            lines.append(f"\t\t{self._wrapped} getInternal() const {{ return {self._internal_cast()}; }}")
            if is_root:
                lines.append("\tprotected:")
                lines.append(f"\t\t{self._wrapped} mInternal;")
        lines.append("\t};")
        return lines

    def _main_header(self) -> list[str]:
        info = self._info
        lines = [
            f"\tclass {self._options.export(self._in_editor)} {self._companion} : public {self._template()}",
            "\t{",
            "\tpublic:",
            f"\t\t{self._options.script_obj(self._in_editor, info.clean_name)}",
            "",
        ]
        if self._is_module:
            lines.append(f"\t\t{self._companion}(MonoObject* managedInstance);")
        else:
            lines.append(f"\t\t{self._companion}(MonoObject* managedInstance, {self._ctor_value_param()});")
        if self._instance_events:
            lines.append(f"\t\t~{self._companion}();")
        lines.append("")

        if self._category in CLASS_CATEGORIES and not self._is_module:
            lines.append(f"\t\t{self._wrapped} getInternal() const {{ return {self._internal_cast()}; }}")
            lines.append(f"\t\tstatic MonoObject* create(const {self._wrapped}& value);")
            lines.append("")
        elif self._category is Category.RESOURCE:
            lines.append("\t\tstatic MonoObject* createInstance();")
            lines.append("")
        if self._static_events:
            lines.append("\t\tstatic void startUp();")
            lines.append("\t\tstatic void shutDown();")
            lines.append("")

        lines.append("\tprivate:")
        if self._owns_internal():
            lines.append(f"\t\t{self._wrapped} mInternal;")
            lines.append("")
        for event in info.events:
            lines.extend(self._event_declarations(event))
            lines.append("")
        for method in self._hooks:
            lines.append(f"\t\tstatic {self._hook_signature(method, nested=False)};")
        lines.append("\t};")
        return lines

    def _template(self) -> str:
        if self._category is Category.GUI_ELEMENT:
            return f"TScriptGUIElement<{self._companion}>"
        base = f", {self._base_companion}" if self._base_companion else ""
        template = _TEMPLATES.get(self._category)
        if template is not None and not self._is_module:
            return f"{template}<{self._companion}, {self._info.name}{base}>"
        return f"ScriptObject<{self._companion}{base}>"

    def _ctor_value_param(self) -> str:
        if self._category is Category.GUI_ELEMENT:
            return f"{self._wrapped} value"
        return f"const {self._wrapped}& value"

    def _owns_internal(self) -> bool:
        return self._category is Category.CLASS and not self._is_module and not self._has_chain

    def _internal_cast(self) -> str:
        if self._owns_internal() or (self._is_base and self._parent_base is None and self._category is Category.CLASS):
            return "mInternal"
        return f"std::static_pointer_cast<{self._info.name}>(mInternal)"

    def _static_event(self, event: EventInfo) -> bool:
        return event.has(MethodFlags.STATIC) or self._is_module

    def _event_declarations(self, event: EventInfo) -> list[str]:
        name = event.interop_name or event.source_name
        params = ", ".join(f"{native_param_type(p.type, self._context)} {p.name}" for p in event.params)
        thunk_params = [f"{thunk_param_type(p.type, self._context)} {p.name}" for p in event.params]
        if not self._static_event(event):
            thunk_params.insert(0, "MonoObject*")
        thunk_params.append("MonoException**")
        lines = [
            f"\t\t{'static ' if self._static_event(event) else ''}void {name}({params});",
            f"\t\ttypedef void(BS_THUNKCALL *{name}ThunkDef) ({', '.join(thunk_params)});",
            f"\t\tstatic {name}ThunkDef {name}Thunk;",
        ]
        if self._static_event(event):
            lines.append(f"\t\tstatic HEvent {name}Conn;")
        else:
            lines.append(f"\t\tHEvent m{_capitalize(name)}Conn;")
        return lines

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    def source(self) -> list[str]:
        lines: list[str] = []
        if self._is_base:
            lines.extend(self._base_source())
            lines.append("")
        for event in self._info.events:
            name = event.interop_name or event.source_name
            lines.append(f"\t{self._companion}::{name}ThunkDef {self._companion}::{name}Thunk;")
            if self._static_event(event):
                lines.append(f"\tHEvent {self._companion}::{name}Conn;")
        if self._info.events:
            lines.append("")

        lines.extend(self._ctor_source())
        lines.append("")
        if self._instance_events:
            lines.extend(self._dtor_source())
            lines.append("")
        lines.extend(self._init_runtime_data())
        lines.append("")
        if self._static_events:
            lines.extend(self._startup_shutdown())
            lines.append("")
        for event in self._info.events:
            lines.extend(self._event_raiser(event))
            lines.append("")
        factory = self._factory_source()
        if factory:
            lines.extend(factory)
            lines.append("")
        for method in self._hooks:
            lines.append(f"\t{self._hook_signature(method, nested=True)}")
            lines.extend(self._hook_body(method))
            lines.append("")
        while lines and lines[-1] == "":
            lines.pop()
        return lines

    def _base_source(self) -> list[str]:
        name = f"{self._companion}Base"
        parent = self._parent_base or _ROOT_BASES.get(self._category, "ScriptObjectBase")
        return [
            f"\t{name}::{name}(MonoObject* managedInstance)",
            f"\t\t:{parent}(managedInstance)",
            "\t{ }",
        ]

    def _ctor_source(self) -> list[str]:
        companion = self._companion
        if self._is_module:
            return [
                f"\t{companion}::{companion}(MonoObject* managedInstance)",
                "\t\t:ScriptObject(managedInstance)",
                "\t{ }",
            ]
        if self._category is Category.GUI_ELEMENT:
            init = "TScriptGUIElement(managedInstance, value)"
        elif self._category in _TEMPLATES:
            init = f"{_TEMPLATES[self._category]}(managedInstance, value)"
        elif self._has_chain:
            init = "ScriptObject(managedInstance)"
        else:
            init = "ScriptObject(managedInstance), mInternal(value)"

        body: list[str] = []
        if self._has_chain and self._category is Category.CLASS:
            body.append("\t\tmInternal = value;")
        for event in self._instance_events:
            name = event.interop_name or event.source_name
            body.append(
                f"\t\tm{_capitalize(name)}Conn = value->{event.source_name}.connect("
                f"std::bind(&{companion}::{name}, this{_placeholders(len(event.params))}));"
            )
        lines = [f"\t{companion}::{companion}(MonoObject* managedInstance, {self._ctor_value_param()})", f"\t\t:{init}"]
        if not body:
            lines.append("\t{ }")
        else:
            lines.extend(["\t{", *body, "\t}"])
        return lines

    def _dtor_source(self) -> list[str]:
        lines = [f"\t{self._companion}::~{self._companion}()", "\t{"]
        for event in self._instance_events:
            name = event.interop_name or event.source_name
            lines.append(f"\t\tm{_capitalize(name)}Conn.disconnect();")
        lines.append("\t}")
        return lines

    def _init_runtime_data(self) -> list[str]:
        lines = [f"\tvoid {self._companion}::initRuntimeData()", "\t{"]
        for method in self._hooks:
            hook = f"Internal_{method.interop_name}"
            lines.append(f'\t\tmetaData.scriptClass->addInternalCall("{hook}", &{self._companion}::{hook});')
        if self._hooks and self._info.events:
            lines.append("")
        for event in self._info.events:
            name = event.interop_name or event.source_name
            signature = ",".join(managed_type_name(p.type, self._context) for p in event.params)
            lines.append(
                f"\t\t{name}Thunk = ({name}ThunkDef)metaData.scriptClass->getMethodExact("
                f'"Internal_{name}", "{signature}")->getThunk();'
            )
        lines.append("\t}")
        return lines

    def _startup_shutdown(self) -> list[str]:
        owner = f"{self._info.name}::instance()." if self._is_module else f"{self._info.name}::"
        startup = [f"\tvoid {self._companion}::startUp()", "\t{"]
        shutdown = [f"\tvoid {self._companion}::shutDown()", "\t{"]
        for event in self._static_events:
            name = event.interop_name or event.source_name
            startup.append(f"\t\t{name}Conn = {owner}{event.source_name}.connect(&{self._companion}::{name});")
            shutdown.append(f"\t\t{name}Conn.disconnect();")
        return [*startup, "\t}", *shutdown, "\t}"]

    def _event_raiser(self, event: EventInfo) -> list[str]:
        name = event.interop_name or event.source_name
        params = ", ".join(f"{native_param_type(p.type, self._context)} {p.name}" for p in event.params)
        lines = [f"\tvoid {self._companion}::{name}({params})", "\t{"]
        args = [] if self._static_event(event) else ["getManagedInstance()"]
        for param in event.params:
            value_lines, value = to_managed(param.type, param.name, param.name, self._context, boxed=True)
            lines.extend(value_lines)
            if value == param.name:
                args.append(param.name)
                continue
            tmp = f"tmp{param.name}"
            lines.append(f"{INDENT}{thunk_param_type(param.type, self._context)} {tmp};")
            lines.append(f"{INDENT}{tmp} = {value};")
            args.append(tmp)
        lines.append(f"{INDENT}MonoUtil::invokeThunk({', '.join([f'{name}Thunk', *args])});")
        lines.append("\t}")
        return lines

    def _factory_source(self) -> list[str]:
        if self._is_module or (self._category not in CLASS_CATEGORIES and self._category is not Category.RESOURCE):
            return []
        count = unused_ctor_arity(self._info)
        dummies = ", ".join("&dummy" for _ in range(count))
        signature = ",".join("bool" for _ in range(count))
        params_init = ["\t\tbool dummy = false;", f"\t\tvoid* ctorParams[{count}] = {{ {dummies} }};", ""]
        companion = self._companion
        if self._category is Category.RESOURCE:
            return [
                f"\tMonoObject* {companion}::createInstance()",
                "\t{",
                *params_init,
                f'\t\treturn metaData.scriptClass->createInstance("{signature}", ctorParams);',
                "\t}",
            ]
        return [
            f"\tMonoObject* {companion}::create(const {self._wrapped}& value)",
            "\t{",
            *params_init,
            f'\t\tMonoObject* managedInstance = metaData.scriptClass->createInstance("{signature}", ctorParams);',
            f"\t\tnew (bs_alloc<{companion}>()) {companion}(managedInstance, value);",
            "\t\treturn managedInstance;",
            "\t}",
        ]

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _hook_signature(self, method: MethodInfo, *, nested: bool) -> str:
        is_ctor = method.has(MethodFlags.CONSTRUCTOR)
        return_type = "void"
        output_param: str | None = None
        if method.return_info is not None and not is_ctor:
            ref = method.return_info.type
            if can_be_returned(ref):
                return_type = interop_cpp_type(ref, self._context)
            else:
                output_param = f"{interop_cpp_type(ref, self._context)} __output"

        params: list[str] = []
        if is_ctor:
            params.append("MonoObject* managedInstance")
        elif not is_static_method(self._info, method):
            params.append(f"{self._this_type}* thisPtr")
        params.extend(f"{interop_cpp_type(p.type, self._context)} {p.name}" for p in method.params)
        if output_param is not None:
            params.append(output_param)
        prefix = f"{self._companion}::" if nested else ""
        return f"{return_type} {prefix}Internal_{method.interop_name}({', '.join(params)})"

    def _hook_body(self, method: MethodInfo) -> list[str]:
        streams = CallStreams()
        plan = ReturnPlan()
        is_ctor = method.has(MethodFlags.CONSTRUCTOR)
        return_ref = method.return_info.type if method.return_info is not None and not is_ctor else None
        if return_ref is not None and can_be_returned(return_ref):
            plan = add_return(streams, return_ref, self._context)
        for param in method.params:
            add_param(streams, param.name, param.type, self._context)
        if return_ref is not None and not can_be_returned(return_ref):
            plan = add_return(streams, return_ref, self._context)

        lines = ["\t{", *streams.pre]
        args = ", ".join(streams.args)
        if is_ctor:
            lines.extend(self._ctor_call(method, args))
        else:
            lines.append(f"{INDENT}{plan.assignment}{self._method_call(method, streams.args)};")
        if streams.post:
            lines.append("")
            lines.extend(streams.post)
        if plan.returns_value:
            lines.append("")
            lines.append(f"{INDENT}return __output;")
        lines.append("\t}")
        return lines

    def _ctor_call(self, method: MethodInfo, args: str) -> list[str]:
        name = self._info.name
        if method.has(MethodFlags.EXTERNAL):
            call = f"{self._external_function(method)}({args})"
        else:
            call = f"bs_shared_ptr_new<{name}>({args})"
        companion = self._companion
        return [
            f"{INDENT}{self._wrapped} instance = {call};",
            f"{INDENT}{companion}* scriptInstance = "
            f"new (bs_alloc<{companion}>()){companion}(managedInstance, instance);",
        ]

    def _method_call(self, method: MethodInfo, args: list[str]) -> str:
        joined = ", ".join(args)
        if method.has(MethodFlags.EXTERNAL):
            target = self._instance_expr(pointer=False)
            return f"{self._external_function(method)}({', '.join([target, *args])})"
        if method.has(MethodFlags.STATIC):
            member = f"{self._info.name}::{method.source_name}"
        elif self._is_module:
            member = f"{self._info.name}::instance().{method.source_name}"
        else:
            member = f"{self._instance_expr(pointer=True)}->{method.source_name}"
        if method.has(MethodFlags.FIELD_WRAPPER):
            return f"{member} = {joined}" if method.has(MethodFlags.PROPERTY_SETTER) else member
        return f"{member}({joined})"

    def _external_function(self, method: MethodInfo) -> str:
        if method.external_class:
            return f"{method.external_class}::{method.source_name}"
        return method.source_name

    def _instance_expr(self, *, pointer: bool) -> str:
        category = self._category
        name = self._info.name
        if self._is_module:
            return f"{name}::instance()"
        if category in CLASS_CATEGORIES:
            return "thisPtr->getInternal()"
        if category is Category.GUI_ELEMENT:
            return f"static_cast<{name}*>(thisPtr->getGUIElement())"
        if self._is_base and category is Category.RESOURCE:
            return f"static_resource_cast<{name}>(thisPtr->getGenericHandle())"
        if self._is_base and category is Category.COMPONENT:
            return f"static_object_cast<{name}>(thisPtr->getComponent())"
        return "thisPtr->getHandle()"


class _StructWriter:
    """Emits the companion of one exported struct."""

    def __init__(self, struct_info: StructInfo, context: BindingContext, options: EmitOptions) -> None:
        self._info = struct_info
        self._context = context
        self._options = options
        self._companion = f"Script{struct_info.clean_name}"
        self._complex = struct_info.requires_interop
        self._boxed_type = struct_info.interop_name if self._complex else struct_info.name

    def header(self) -> list[str]:
        info = self._info
        lines: list[str] = []
        if self._complex:
            lines.append(f"\tstruct {info.interop_name}")
            lines.append("\t{")
            for field in info.fields:
                lines.append(f"\t\t{interop_value_type(field.type, self._context)} {field.name};")
            lines.append("\t};")
            lines.append("")

        lines.extend(
            [
                f"\tclass {self._options.export(info.in_editor)} {self._companion} "
                f": public ScriptObject<{self._companion}>",
                "\t{",
                "\tpublic:",
                f"\t\t{self._options.script_obj(info.in_editor, info.clean_name)}",
                "",
                f"\t\tstatic MonoObject* box(const {self._boxed_type}& value);",
                f"\t\tstatic {self._boxed_type} unbox(MonoObject* value);",
            ]
        )
        if self._complex:
            lines.append(f"\t\tstatic {info.name} fromInterop(const {info.interop_name}& value);")
            lines.append(f"\t\tstatic {info.interop_name} toInterop(const {info.name}& value);")
        lines.extend(
            [
                "",
                "\tprivate:",
                f"\t\t{self._companion}(MonoObject* managedInstance);",
                "",
                "\t};",
            ]
        )
        return lines

    def source(self) -> list[str]:
        companion = self._companion
        boxed = self._boxed_type
        lines = [
            f"\t{companion}::{companion}(MonoObject* managedInstance)",
            "\t\t:ScriptObject(managedInstance)",
            "\t{ }",
            "",
            f"\tvoid {companion}::initRuntimeData()",
            "\t{ }",
            "",
            f"\tMonoObject* {companion}::box(const {boxed}& value)",
            "\t{",
            "\t\treturn MonoUtil::box(metaData.scriptClass->_getInternalClass(), (void*)&value);",
            "\t}",
            "",
            f"\t{boxed} {companion}::unbox(MonoObject* value)",
            "\t{",
            f"\t\treturn *({boxed}*)MonoUtil::unbox(value);",
            "\t}",
        ]
        if self._complex:
            lines.append("")
            lines.extend(self._from_interop())
            lines.append("")
            lines.extend(self._to_interop())
        return lines

    def _from_interop(self) -> list[str]:
        info = self._info
        lines = [f"\t{info.name} {self._companion}::fromInterop(const {info.interop_name}& value)", "\t{"]
        lines.append(f"{INDENT}{info.name} output;")
        for field in info.fields:
            value_lines, value = to_native(field.type, f"value.{field.name}", field.name, self._context)
            lines.extend(value_lines)
            lines.append(f"{INDENT}output.{field.name} = {value};")
        lines.append("")
        lines.append(f"{INDENT}return output;")
        lines.append("\t}")
        return lines

    def _to_interop(self) -> list[str]:
        info = self._info
        lines = [f"\t{info.interop_name} {self._companion}::toInterop(const {info.name}& value)", "\t{"]
        lines.append(f"{INDENT}{info.interop_name} output;")
        for field in info.fields:
            value_lines, value = to_managed(field.type, f"value.{field.name}", field.name, self._context)
            lines.extend(value_lines)
            lines.append(f"{INDENT}output.{field.name} = {value};")
        lines.append("")
        lines.append(f"{INDENT}return output;")
        lines.append("\t}")
        return lines
