# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Classification of C++ type expressions into binding type references.

The classifier strips one outer pointer or reference, follows aliases and
recognizes the container and ownership wrappers the native API uses (vectors,
strings, shared pointers, resource and game-object handles, async operations).
The result is a :class:`~scriptbind.model.types.TypeRef` whose category stays
unset for user types until the post-processor resolves it against the type map.
"""

from __future__ import annotations

from scriptbind.diagnostics import Diagnostics
from scriptbind.frontend.declarations import SymbolTable
from scriptbind.frontend.typeparser import (
    BuiltinType,
    FunctionType,
    NamedType,
    PointerType,
    ReferenceType,
    TypeNode,
    TypeSyntaxError,
    parse_type,
    render_argument,
    render_type,
)
from scriptbind.model.context import BindingContext
from scriptbind.model.entities import UserTypeInfo
from scriptbind.model.types import Category, TypeFlags, TypeRef

# ###############
# Public Interface
# ###############

SENTINEL_CATEGORIES: dict[str, Category] = {
    "Component": Category.COMPONENT,
    "SceneObject": Category.SCENE_OBJECT,
    "Resource": Category.RESOURCE,
    "GUIElement": Category.GUI_ELEMENT,
    "IReflectable": Category.REFLECTABLE_CLASS,
}

MODULE_SENTINEL = "Module"

MANAGED_BUILTINS: dict[str, str] = {
    "void": "void",
    "bool": "bool",
    "INT8": "sbyte",
    "UINT8": "byte",
    "INT16": "short",
    "UINT16": "ushort",
    "INT32": "int",
    "UINT32": "uint",
    "INT64": "long",
    "UINT64": "ulong",
    "float": "float",
    "double": "double",
    "wchar_t": "char",
}


class ClassificationError(Exception):
    """Raised internally when a type cannot be classified; reported as a diagnostic."""


def builtin_typedef(kind: str) -> str | None:
    """Map a builtin word sequence (``unsigned int``) to its canonical typedef (``UINT32``)."""
    words = kind.split()
    is_unsigned = "unsigned" in words
    core = sorted(word for word in words if word not in ("signed", "unsigned"))
    if core in ([], ["int"]):
        return "UINT32" if is_unsigned else "INT32"
    if core == ["char"]:
        return "UINT8" if is_unsigned else "INT8"
    if core in (["short"], ["int", "short"]):
        return "UINT16" if is_unsigned else "INT16"
    if core in (["long"], ["int", "long"]):
        return "UINT32" if is_unsigned else "INT32"
    if core in (["long", "long"], ["int", "long", "long"]):
        return "UINT64" if is_unsigned else "INT64"
    if is_unsigned:
        return None
    return _SIMPLE_BUILTINS.get(" ".join(core))


def managed_builtin(typedef: str) -> str:
    """Return the C# primitive for a canonical builtin typedef."""
    return MANAGED_BUILTINS.get(typedef, typedef)


def is_void(type_text: str) -> bool:
    """Return True if *type_text* spells ``void`` (possibly const-qualified)."""
    try:
        node = parse_type(type_text)
    except TypeSyntaxError:
        return False
    return isinstance(node, BuiltinType) and node.kind == "void"


def find_sentinel(symbols: SymbolTable, record_name: str) -> tuple[Category | None, bool]:
    """Ascend the bases of *record_name* looking for a scripting sentinel.

    Returns:
        The sentinel category found (or None) and whether a ``Module`` base was
        seen on the way.
    """
    return _ascend(symbols, record_name, set())


def classify(
    type_text: str,
    symbols: SymbolTable,
    diagnostics: Diagnostics,
    *,
    is_parameter: bool,
    owner: str,
) -> TypeRef | None:
    """Classify the C++ type *type_text* at one signature position.

    Args:
        type_text: C++ type text, e.g. ``const Vector<HMesh>&``.
        symbols: Symbol table used for aliases, enums and base ascent.
        diagnostics: Collector receiving an error on failure.
        is_parameter: True for parameter positions; only parameters can be
            outputs.
        owner: Source name of the declaration, used in diagnostics.

    Returns:
        The classified type reference, or None after reporting an error.
    """
    try:
        node = parse_type(type_text)
        return _Classifier(symbols).classify(node, is_parameter=is_parameter)
    except TypeSyntaxError as exc:
        diagnostics.error(f'Cannot parse type "{type_text}" of "{owner}": {exc}')
    except ClassificationError as exc:
        diagnostics.error(f'{exc} Type "{type_text}" in "{owner}".')
    return None


def classify_node(node: TypeNode, symbols: SymbolTable, *, is_parameter: bool) -> TypeRef:
    """Classify an already parsed type node.

    Raises:
        ClassificationError: If the type is not supported.
    """
    return _Classifier(symbols).classify(node, is_parameter=is_parameter)


def event_signature(node: TypeNode, symbols: SymbolTable) -> FunctionType | None:
    """Return the signature of an ``Event<R(Args...)>`` type, or None for other types."""
    node = _resolve_aliases(node, symbols)
    if isinstance(node, NamedType) and node.simple_name in ("Event", "TEvent") and node.args:
        signature = node.args[0]
        if isinstance(signature, FunctionType):
            return signature
    return None


def resolve_type_info(ref: TypeRef, context: BindingContext, diagnostics: Diagnostics) -> UserTypeInfo:
    """Look up the type map entry for a user type.

    Unknown types are reported and treated as builtins with their source name,
    and the mapping is recorded so the warning is given once per type.
    """
    info = context.type_map.get(ref.name)
    if info is None:
        diagnostics.warning(f'Unable to map type "{ref.name}". Assuming same name as source.')
        info = UserTypeInfo(script_name=ref.name, category=Category.BUILTIN)
        context.type_map[ref.name] = info
    return info


# ################
# Implementation
# ################

_SIMPLE_BUILTINS: dict[str, str] = {
    "void": "void",
    "bool": "bool",
    "float": "float",
    "double": "double",
    "double long": "double",
    "wchar_t": "wchar_t",
    "char16_t": "UINT16",
    "char32_t": "UINT32",
}

_ARRAY_WRAPPERS = frozenset({"vector", "Vector"})
_SHARED_PTR_WRAPPERS = frozenset({"shared_ptr", "SPtr"})
_RESOURCE_HANDLE_WRAPPERS = frozenset({"ResourceHandle", "TResourceHandle"})
_GAME_OBJECT_HANDLE_WRAPPERS = frozenset({"GameObjectHandle"})
_MAX_ALIAS_DEPTH = 16


def _ascend(symbols: SymbolTable, record_name: str, visited: set[str]) -> tuple[Category | None, bool]:
    record = symbols.find_record(record_name)
    if record is None or record_name in visited:
        return None, False
    visited.add(record_name)
    is_module = False
    for base_text in record.bases:
        base_name = _base_name(base_text)
        if base_name == MODULE_SENTINEL:
            is_module = True
            continue
        if base_name in SENTINEL_CATEGORIES:
            return SENTINEL_CATEGORIES[base_name], is_module
        category, base_is_module = _ascend(symbols, base_name, visited)
        is_module = is_module or base_is_module
        if category is not None:
            return category, is_module
    return None, is_module


def _base_name(base_text: str) -> str:
    try:
        node = parse_type(base_text)
    except TypeSyntaxError:
        return base_text.strip()
    if isinstance(node, NamedType):
        return node.simple_name
    return render_type(node)


def _resolve_aliases(node: TypeNode, symbols: SymbolTable) -> TypeNode:
    for _ in range(_MAX_ALIAS_DEPTH):
        if not isinstance(node, NamedType) or node.args:
            return node
        alias = symbols.resolve_alias(node.name)
        if alias is None:
            return node
        try:
            resolved = parse_type(alias)
        except TypeSyntaxError as exc:
            raise ClassificationError(f'Invalid alias "{node.name}": {exc}.') from exc
        if node.const and isinstance(resolved, BuiltinType):
            resolved = BuiltinType(resolved.kind, const=True)
        elif node.const and isinstance(resolved, NamedType):
            resolved = NamedType(resolved.name, resolved.args, const=True)
        node = resolved
    raise ClassificationError(f'Alias chain for "{render_type(node)}" is too deep.')


def _is_const(node: TypeNode) -> bool:
    return isinstance(node, BuiltinType | NamedType) and node.const


class _Classifier:
    """Classifies one type node; wrappers are handled recursively."""

    def __init__(self, symbols: SymbolTable) -> None:
        self._symbols = symbols

    def classify(self, node: TypeNode, *, is_parameter: bool) -> TypeRef:
        flags = 0
        inner = node
        if isinstance(node, ReferenceType | PointerType):
            inner = node.referent if isinstance(node, ReferenceType) else node.pointee
            inner = _resolve_aliases(inner, self._symbols)
            if isinstance(node, PointerType) and isinstance(inner, NamedType) and not inner.args:
                special = self._special_pointer(inner)
                if special is not None:
                    return special
            if isinstance(inner, PointerType | ReferenceType):
                raise ClassificationError("Only normal pointers are supported.")
            flags |= TypeFlags.SRC_REF if isinstance(node, ReferenceType) else TypeFlags.SRC_PTR
            if is_parameter and not _is_const(inner):
                flags |= TypeFlags.OUTPUT
        elif isinstance(node, FunctionType):
            raise ClassificationError("Function types are only supported as event signatures.")

        inner = _resolve_aliases(inner, self._symbols)
        if isinstance(inner, NamedType) and inner.simple_name in _ARRAY_WRAPPERS and inner.args:
            element = _resolve_aliases(self._type_arg(inner), self._symbols)
            if isinstance(element, PointerType | ReferenceType):
                raise ClassificationError("Only normal pointers are supported.")
            if isinstance(element, NamedType) and element.simple_name in _ARRAY_WRAPPERS:
                raise ClassificationError("Nested containers are not supported.")
            ref = self._classify_value(element)
            element_flags = ref.flags
            if element_flags & (TypeFlags.SRC_SPTR | TypeFlags.SRC_RHANDLE | TypeFlags.SRC_GHANDLE):
                flags &= ~(TypeFlags.SRC_PTR | TypeFlags.SRC_REF)
            return ref.model_copy(update={"flags": flags | element_flags | TypeFlags.ARRAY})

        ref = self._classify_value(inner)
        if ref.flags & (TypeFlags.SRC_SPTR | TypeFlags.SRC_RHANDLE | TypeFlags.SRC_GHANDLE):
            flags &= ~(TypeFlags.SRC_PTR | TypeFlags.SRC_REF)
        return ref.model_copy(update={"flags": flags | ref.flags})

    def _special_pointer(self, pointee: NamedType) -> TypeRef | None:
        if pointee.simple_name == "ScriptObjectBase":
            return TypeRef(
                name="ScriptObjectBase",
                flags=TypeFlags.SCRIPT_OBJECT | TypeFlags.SRC_PTR,
                category=Category.SCRIPT_OBJECT,
            )
        if pointee.simple_name == "MonoObject":
            return TypeRef(
                name="MonoObject",
                flags=TypeFlags.MONO_OBJECT | TypeFlags.SRC_PTR,
                category=Category.MONO_OBJECT,
            )
        return None

    def _type_arg(self, node: NamedType) -> TypeNode:
        arg = node.args[0]
        if not isinstance(arg, BuiltinType | NamedType | PointerType | ReferenceType | FunctionType):
            raise ClassificationError(f'Template "{node.name}" expects a type argument.')
        return arg

    # ------------------------------------------------------------------
    # Value types (wrappers stripped of one pointer/reference)
    # ------------------------------------------------------------------

    def _classify_value(self, node: TypeNode) -> TypeRef:
        node = _resolve_aliases(node, self._symbols)
        if isinstance(node, BuiltinType):
            typedef = builtin_typedef(node.kind)
            if typedef is None:
                raise ClassificationError(f'Unrecognized builtin type "{node.kind}".')
            return TypeRef(name=typedef, flags=TypeFlags.BUILTIN, category=Category.BUILTIN)
        if isinstance(node, PointerType | ReferenceType):
            raise ClassificationError("Only normal pointers are supported.")
        if isinstance(node, FunctionType):
            raise ClassificationError("Function types are only supported as event signatures.")

        name = node.simple_name
        if name == "basic_string" and node.args:
            arg = self._type_arg(node)
            if isinstance(arg, BuiltinType) and arg.kind == "wchar_t":
                return TypeRef(name="WString", flags=TypeFlags.WSTRING, category=Category.WSTRING)
            return TypeRef(name="String", flags=TypeFlags.STRING, category=Category.STRING)
        if name == "Path" and not node.args:
            return TypeRef(name="Path", flags=TypeFlags.PATH, category=Category.PATH)
        if name in _ARRAY_WRAPPERS and node.args:
            raise ClassificationError("Nested containers are not supported.")
        if name in _SHARED_PTR_WRAPPERS and node.args:
            return self._wrapped(node, TypeFlags.SRC_SPTR)
        if name in _RESOURCE_HANDLE_WRAPPERS and node.args:
            return self._wrapped(node, TypeFlags.SRC_RHANDLE)
        if name in _GAME_OBJECT_HANDLE_WRAPPERS and node.args:
            return self._wrapped(node, TypeFlags.SRC_GHANDLE)
        if name == "TAsyncOp" and node.args:
            result = self.classify(self._type_arg(node), is_parameter=False)
            return result.model_copy(update={"flags": result.flags | TypeFlags.ASYNC_OP})
        if name == "Flags" and node.args:
            result = self._classify_value(self._type_arg(node))
            if result.category is not Category.ENUM:
                raise ClassificationError("Flags<T> requires an enum argument.")
            return result.model_copy(update={"flags": result.flags | TypeFlags.FLAGS_ENUM})
        if name in ("Event", "TEvent"):
            raise ClassificationError("Event types are only supported as event fields.")

        enum_decl = self._symbols.find_enum(node.name)
        if enum_decl is not None:
            underlying = "INT32"
            if enum_decl.underlying_type:
                underlying_ref = self._classify_value(parse_type(enum_decl.underlying_type))
                underlying = underlying_ref.name
            return TypeRef(name=enum_decl.name, category=Category.ENUM, underlying=underlying)

        if node.args:
            args = ", ".join(render_argument(arg) for arg in node.args)
            return TypeRef(name=f"{name}<{args}>")
        return TypeRef(name=name)

    def _wrapped(self, node: NamedType, kind: TypeFlags) -> TypeRef:
        element = _resolve_aliases(self._type_arg(node), self._symbols)
        if not isinstance(element, NamedType):
            raise ClassificationError(f'"{node.name}" must wrap a class type.')
        if kind == TypeFlags.SRC_SPTR:
            category, _ = find_sentinel(self._symbols, element.simple_name)
            if category in (Category.COMPONENT, Category.SCENE_OBJECT, Category.RESOURCE) or (
                element.simple_name in ("Component", "SceneObject", "Resource")
            ):
                raise ClassificationError(
                    "Game object and resource types are only allowed to be referenced through handles"
                    " for scripting purposes."
                )
        inner = self._classify_value(element)
        return inner.model_copy(update={"flags": inner.flags | kind})
