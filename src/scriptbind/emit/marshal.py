# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Marshalling blocks converting values between managed and native representations.

A native hook body is assembled from three streams: statements that run
before the wrapped call (``pre``), the call arguments (``args``) and
statements that run after it (``post``). Each parameter and the return value
contribute one block, chosen by the category, flags and direction of its type
reference.

The two conversion primitives :func:`to_native` and :func:`to_managed` are
shared with struct ``fromInterop``/``toInterop`` bodies, event raisers and
async-operation result callbacks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from scriptbind.emit.common import (
    array_entry_type,
    base_companion_name,
    can_be_returned,
    companion_name,
    cpp_element_type,
    cpp_var_type,
    interop_cpp_type,
    interop_struct_type,
    is_complex_struct,
)
from scriptbind.model.context import BindingContext
from scriptbind.model.types import (
    CLASS_CATEGORIES,
    HANDLE_CATEGORIES,
    STRING_CATEGORIES,
    Category,
    SourceKind,
    TypeFlags,
    TypeRef,
)

# ###############
# Public Interface
# ###############

INDENT = "\t\t"

OUTPUT_NAME = "__output"


@dataclass
class CallStreams:
    """Statement and argument streams of one hook body."""

    pre: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    post: list[str] = field(default_factory=list)


@dataclass
class ReturnPlan:
    """How a hook hands its result back.

    Attributes:
        assignment: Prefix placed before the wrapped call (``tmp__output = ``),
            empty when nothing is returned.
        as_parameter: True when the result travels through a trailing
            ``__output`` pointer parameter.
        returns_value: True when the hook ends with ``return __output;``.
    """

    assignment: str = ""
    as_parameter: bool = False
    returns_value: bool = False


class MarshalError(Exception):
    """Raised when a type reference reaches the emitter in a shape it cannot convert."""


def add_param(streams: CallStreams, name: str, ref: TypeRef, context: BindingContext) -> None:
    """Add the block for hook parameter *name* and append its call argument."""
    if ref.is_output:
        local = _output_local(streams, name, ref, context)
        _write_back(streams.post, name, ref, local, context, through_pointer=True)
        streams.args.append(as_cpp_argument(local, ref))
        return

    if not ref.is_array and ref.category in (Category.BUILTIN, Category.ENUM):
        streams.args.append(as_cpp_argument(name, ref))
        return
    if not ref.is_array and ref.category is Category.STRUCT and not is_complex_struct(ref):
        streams.args.append(as_cpp_argument(name, ref, is_pointer=True))
        return

    source = f"*{name}" if is_complex_struct(ref) else name
    lines, native = to_native(ref, source, name, context)
    streams.pre.extend(lines)
    streams.args.append(as_cpp_argument(native, ref))


def add_return(streams: CallStreams, ref: TypeRef, context: BindingContext) -> ReturnPlan:
    """Add the block converting the wrapped call's result into ``__output``."""
    if can_be_returned(ref):
        streams.post.append(f"{INDENT}{interop_cpp_type(ref, context)} {OUTPUT_NAME};")
        local = _output_local(streams, OUTPUT_NAME, ref, context)
        _write_back(streams.post, OUTPUT_NAME, ref, local, context, through_pointer=False)
        return ReturnPlan(assignment=f"{local} = ", returns_value=True)
    local = _output_local(streams, OUTPUT_NAME, ref, context)
    _write_back(streams.post, OUTPUT_NAME, ref, local, context, through_pointer=True)
    return ReturnPlan(assignment=f"{local} = ", as_parameter=True)


def as_cpp_argument(expr: str, ref: TypeRef, *, is_pointer: bool = False) -> str:
    """Adapt the native local *expr* to the way the wrapped function receives *ref*.

    Args:
        expr: Expression holding the value; a pointer when *is_pointer*.
        ref: Type reference of the parameter.
        is_pointer: True when *expr* is a pointer to the value rather than
            the value itself.
    """
    kind = ref.source_kind
    category = ref.category
    if ref.is_array or category in (Category.BUILTIN, Category.ENUM, Category.STRUCT) or category in STRING_CATEGORIES:
        if kind is SourceKind.POINTER:
            return expr if is_pointer else f"&{expr}"
        return f"*{expr}" if is_pointer else expr
    if category in (Category.SCRIPT_OBJECT, Category.MONO_OBJECT):
        return f"&{expr}" if ref.is_output else expr
    if category in HANDLE_CATEGORIES:
        if kind is SourceKind.POINTER:
            return f"{expr}.get()"
        if kind is SourceKind.SHARED_PTR:
            return f"{expr}.getInternalPtr()"
        if kind in (SourceKind.RESOURCE_HANDLE, SourceKind.GAME_OBJECT_HANDLE):
            return expr
        return f"*{expr}"
    if category in CLASS_CATEGORIES:
        if kind is SourceKind.POINTER:
            return f"{expr}.get()"
        if kind is SourceKind.SHARED_PTR:
            return expr
        return f"*{expr}"
    if category is Category.GUI_ELEMENT:
        return expr if kind is SourceKind.POINTER else f"*{expr}"
    raise MarshalError(f'Unsure how to pass a value of type "{ref.name}".')


def to_native(
    ref: TypeRef,
    src: str,
    ident: str,
    context: BindingContext,
    indent: str = INDENT,
) -> tuple[list[str], str]:
    """Convert the managed value *src* into a native value.

    Returns:
        Statements to run and the expression holding the native value. Locals
        are named after *ident*.
    """
    ident = _ident(ident)
    if ref.is_array:
        return _array_to_native(ref, src, ident, context, indent)

    category = ref.category
    tmp = f"tmp{ident}"
    if category in (Category.BUILTIN, Category.ENUM, Category.MONO_OBJECT):
        return [], src
    if category is Category.STRUCT:
        if not ref.has(TypeFlags.COMPLEX_STRUCT):
            return [], src
        companion = companion_name(context, ref.name)
        return [f"{indent}{ref.name} {tmp};", f"{indent}{tmp} = {companion}::fromInterop({src});"], tmp
    if category in STRING_CATEGORIES:
        convert = "MonoUtil::monoToWString" if category is Category.WSTRING else "MonoUtil::monoToString"
        return [f"{indent}{cpp_var_type(ref, context)} {tmp};", f"{indent}{tmp} = {convert}({src});"], tmp
    if category in CLASS_CATEGORIES | HANDLE_CATEGORIES or category is Category.GUI_ELEMENT:
        script = f"script{ident}"
        lines = [f"{indent}{cpp_var_type(ref, context)} {tmp};"]
        lines.extend(_script_lookup(ref, src, script, context, indent))
        lines.append(f"{indent}if({script} != nullptr)")
        lines.append(f"{indent}\t{tmp} = {_native_from_script(ref, script)};")
        return lines, tmp
    raise MarshalError(f'Values of type "{ref.name}" are not supported as input.')


def to_managed(
    ref: TypeRef,
    src: str,
    ident: str,
    context: BindingContext,
    indent: str = INDENT,
    *,
    boxed: bool = False,
) -> tuple[list[str], str]:
    """Convert the native value *src* into its managed representation.

    Args:
        boxed: Box struct values into ``MonoObject*`` (array elements, event
            arguments and async results).

    Returns:
        Statements to run and the expression holding the managed value.
    """
    ident = _ident(ident)
    if ref.has(TypeFlags.ASYNC_OP):
        return _async_to_managed(ref, src, ident, context, indent)
    if ref.is_array:
        return _array_to_managed(ref, src, ident, context, indent)

    category = ref.category
    if category in (Category.BUILTIN, Category.ENUM, Category.MONO_OBJECT):
        return [], src
    if category is Category.STRUCT:
        companion = companion_name(context, ref.name)
        value = f"{companion}::toInterop({src})" if ref.has(TypeFlags.COMPLEX_STRUCT) else src
        return [], f"{companion}::box({value})" if boxed else value
    if category is Category.STRING:
        return [], f"MonoUtil::stringToMono({src})"
    if category is Category.WSTRING:
        return [], f"MonoUtil::wstringToMono({src})"
    if category is Category.PATH:
        return [], f"MonoUtil::stringToMono({src}.toString())"
    if category is Category.SCRIPT_OBJECT:
        return [], f"{src}->getManagedInstance()"
    if category in CLASS_CATEGORIES:
        return _class_to_managed(ref, src, ident, context, indent)
    if category in HANDLE_CATEGORIES:
        script = f"script{ident}"
        lines = _handle_lookup(ref, src, script, context, indent)
        return lines, f"{script} != nullptr ? {script}->getManagedInstance() : nullptr"
    raise MarshalError(f'Values of type "{ref.name}" cannot be passed to managed code.')


# ################
# Implementation
# ################

_IDENT_CHARS = re.compile(r"\W")

_BUILTIN_CLASSES: dict[str, str] = {
    "bool": "getBoolClass",
    "INT8": "getSByteClass",
    "UINT8": "getByteClass",
    "INT16": "getINT16Class",
    "UINT16": "getUINT16Class",
    "INT32": "getINT32Class",
    "UINT32": "getUINT32Class",
    "INT64": "getINT64Class",
    "UINT64": "getUINT64Class",
    "float": "getFloatClass",
    "double": "getDoubleClass",
    "wchar_t": "getCharClass",
}


def _ident(name: str) -> str:
    return _IDENT_CHARS.sub("_", name)


def _output_local(streams: CallStreams, name: str, ref: TypeRef, context: BindingContext) -> str:
    if ref.has(TypeFlags.ASYNC_OP):
        local = f"tmp{name}"
        streams.pre.append(f"{INDENT}{cpp_var_type(ref, context)} {local};")
        return local
    local = f"vec{name}" if ref.is_array else f"tmp{name}"
    streams.pre.append(f"{INDENT}{cpp_element_type(ref, context)} {local};")
    return local


def _write_back(
    post: list[str],
    target: str,
    ref: TypeRef,
    local: str,
    context: BindingContext,
    *,
    through_pointer: bool,
) -> None:
    lines, expr = to_managed(ref, local, target, context)
    post.extend(lines)
    if not through_pointer:
        post.append(f"{INDENT}{target} = {expr};")
        return
    if is_complex_struct(ref):
        companion = companion_name(context, ref.name)
        interop = f"interop{_ident(target)}"
        post.append(f"{INDENT}{interop_struct_type(context, ref.name)} {interop} = {expr};")
        post.append(
            f"{INDENT}MonoUtil::valueCopy({target}, &{interop}, "
            f"{companion}::getMetaData()->scriptClass->_getInternalClass());"
        )
    elif not ref.is_array and ref.category in (Category.BUILTIN, Category.ENUM, Category.STRUCT):
        post.append(f"{INDENT}*{target} = {expr};")
    else:
        post.append(f"{INDENT}MonoUtil::referenceCopy({target}, (MonoObject*){expr});")


def _script_lookup(ref: TypeRef, src: str, script: str, context: BindingContext, indent: str) -> list[str]:
    companion = companion_name(context, ref.name)
    if ref.has(TypeFlags.REFERENCES_BASE) and ref.category is not Category.GUI_ELEMENT:
        script_type = base_companion_name(context, ref.name)
        return [
            f"{indent}{script_type}* {script};",
            f"{indent}{script} = ({script_type}*){companion}::toNative({src});",
        ]
    if ref.category is Category.GUI_ELEMENT:
        return [f"{indent}{companion}* {script};", f"{indent}{script} = ({companion}*){companion}::toNative({src});"]
    return [f"{indent}{companion}* {script};", f"{indent}{script} = {companion}::toNative({src});"]


def _native_from_script(ref: TypeRef, script: str) -> str:
    category = ref.category
    based = ref.has(TypeFlags.REFERENCES_BASE)
    if category in CLASS_CATEGORIES:
        return f"{script}->getInternal()"
    if category is Category.RESOURCE and based:
        return f"static_resource_cast<{ref.name}>({script}->getGenericHandle())"
    if category is Category.COMPONENT and based:
        return f"static_object_cast<{ref.name}>({script}->getComponent())"
    if category is Category.GUI_ELEMENT:
        return f"static_cast<{ref.name}*>({script}->getGUIElement())"
    return f"{script}->getHandle()"


def _handle_lookup(ref: TypeRef, src: str, script: str, context: BindingContext, indent: str) -> list[str]:
    companion = companion_name(context, ref.name)
    lines = [f"{indent}{companion}* {script};"]
    if ref.category is Category.RESOURCE:
        lines.append(f"{indent}ScriptResourceManager::instance().getScriptResource({src}, &{script}, true);")
    elif ref.category is Category.COMPONENT:
        lines.append(
            f"{indent}{script} = ({companion}*)ScriptGameObjectManager::instance().getBuiltinScriptComponent({src});"
        )
    else:
        lines.append(f"{indent}{script} = ScriptGameObjectManager::instance().getOrCreateScriptSceneObject({src});")
    return lines


def _class_to_managed(
    ref: TypeRef,
    src: str,
    ident: str,
    context: BindingContext,
    indent: str,
) -> tuple[list[str], str]:
    companion = companion_name(context, ref.name)
    children = context.base_children.get(ref.name, []) if ref.has(TypeFlags.REFERENCES_BASE) else []
    if not children:
        return [], f"{companion}::create({src})"

    managed = f"managed{ident}"
    lines = [f"{indent}MonoObject* {managed} = nullptr;", f"{indent}if({src} != nullptr)", f"{indent}{{"]
    for index, child in enumerate(children):
        keyword = "if" if index == 0 else "else if"
        cast = f"cast{ident}"
        lines.append(f"{indent}\t{keyword}(auto {cast} = std::dynamic_pointer_cast<{child}>({src}))")
        lines.append(f"{indent}\t\t{managed} = {companion_name(context, child)}::create({cast});")
    lines.append(f"{indent}\telse")
    lines.append(f"{indent}\t\t{managed} = {companion}::create({src});")
    lines.append(f"{indent}}}")
    return lines, managed


def _element(ref: TypeRef) -> TypeRef:
    return ref.model_copy(update={"flags": ref.flags & ~(TypeFlags.ARRAY | TypeFlags.OUTPUT)})


def _array_to_native(
    ref: TypeRef,
    src: str,
    ident: str,
    context: BindingContext,
    indent: str,
) -> tuple[list[str], str]:
    element = _element(ref)
    entry = array_entry_type(element, context)
    array = f"array{ident}"
    vec = f"vec{ident}"
    inner = indent + "\t"
    category = element.category
    lines = [
        f"{indent}ScriptArray {array}({src});",
        f"{indent}{cpp_element_type(ref, context)} {vec}({array}.size());",
        f"{indent}for(int i = 0; i < (int){array}.size(); i++)",
        f"{indent}{{",
    ]
    if category is Category.ENUM:
        lines.append(f"{inner}{vec}[i] = ({element.name}){array}.get<{entry}>(i);")
    elif category is Category.BUILTIN or category in STRING_CATEGORIES:
        lines.append(f"{inner}{vec}[i] = {array}.get<{entry}>(i);")
    elif category is Category.MONO_OBJECT:
        lines.append(f"{inner}{vec}[i] = {array}.get<MonoObject*>(i);")
    elif category is Category.STRUCT:
        value = f"{entry}::unbox({array}.get<MonoObject*>(i))"
        if element.has(TypeFlags.COMPLEX_STRUCT):
            value = f"{entry}::fromInterop({value})"
        lines.append(f"{inner}{vec}[i] = {value};")
    elif category in CLASS_CATEGORIES | HANDLE_CATEGORIES or category is Category.GUI_ELEMENT:
        script = f"script{ident}"
        lines.extend(_script_lookup(element, f"{array}.get<MonoObject*>(i)", script, context, inner))
        lines.append(f"{inner}if({script} != nullptr)")
        lines.append(f"{inner}\t{vec}[i] = {_native_from_script(element, script)};")
    else:
        raise MarshalError(f'Arrays of "{ref.name}" are not supported as input.')
    lines.append(f"{indent}}}")
    return lines, vec


def _array_to_managed(
    ref: TypeRef,
    src: str,
    ident: str,
    context: BindingContext,
    indent: str,
) -> tuple[list[str], str]:
    element = _element(ref)
    entry = array_entry_type(element, context)
    array = f"array{ident}"
    inner = indent + "\t"
    category = element.category
    lines = [
        f"{indent}ScriptArray {array} = ScriptArray::create<{entry}>((int){src}.size());",
        f"{indent}for(int i = 0; i < (int){src}.size(); i++)",
        f"{indent}{{",
    ]
    if category is Category.ENUM:
        lines.append(f"{inner}{array}.set(i, ({entry}){src}[i]);")
    elif category in (Category.BUILTIN, Category.STRING, Category.WSTRING):
        lines.append(f"{inner}{array}.set(i, {src}[i]);")
    elif category is Category.PATH:
        lines.append(f"{inner}{array}.set(i, {src}[i].toString());")
    else:
        value_lines, value = to_managed(element, f"{src}[i]", ident, context, inner, boxed=True)
        lines.extend(value_lines)
        lines.append(f"{inner}{array}.set(i, {value});")
    lines.append(f"{indent}}}")
    return lines, f"{array}.getInternal()"


def _async_to_managed(
    ref: TypeRef,
    src: str,
    ident: str,
    context: BindingContext,
    indent: str,
) -> tuple[list[str], str]:
    inner_ref = ref.model_copy(update={"flags": ref.flags & ~(TypeFlags.ASYNC_OP | TypeFlags.OUTPUT)})
    inner_type = cpp_element_type(inner_ref, context)
    inner = indent + "\t"
    lines = [
        f"{indent}auto convertCallback = [](const Any& returnVal)",
        f"{indent}{{",
        f"{inner}{inner_type} nativeObj = any_cast<{inner_type}>(returnVal);",
    ]
    if not inner_ref.is_array and inner_ref.category in (Category.BUILTIN, Category.ENUM):
        typedef = (inner_ref.underlying or "INT32") if inner_ref.category is Category.ENUM else inner_ref.name
        getter = _BUILTIN_CLASSES.get(typedef, "getINT32Class")
        lines.append(f"{inner}return MonoUtil::box(MonoUtil::{getter}(), (void*)&nativeObj);")
    else:
        value_lines, value = to_managed(inner_ref, "nativeObj", "nativeObj", context, inner, boxed=True)
        lines.extend(value_lines)
        if inner_ref.is_array or inner_ref.category in STRING_CATEGORIES:
            value = f"(MonoObject*){value}"
        lines.append(f"{inner}return {value};")
    lines.append(f"{indent}}};")
    return lines, f"ScriptAsyncOpBase::create({src}, convertCallback)"
