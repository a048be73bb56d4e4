# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Collection of exported declarations into binding records.

The collector walks every declaration of the symbol table once. Annotated enums,
plain structs and classes become records in their file group; external methods
are parked in the context's external-method buffer until post-processing merges
them into their target class. Every declaration, exported or not, feeds the
comment index so ``@copydoc`` can reference it.
"""

from __future__ import annotations

from scriptbind.analysis.annotations import parse_export_annotation
from scriptbind.analysis.classifier import (
    ClassificationError,
    builtin_typedef,
    classify,
    classify_node,
    event_signature,
    find_sentinel,
    is_void,
)
from scriptbind.analysis.comments import parse_doc_comment
from scriptbind.diagnostics import Diagnostics
from scriptbind.frontend.declarations import (
    ConstructorDecl,
    EnumDecl,
    FieldDecl,
    FunctionDecl,
    MethodDecl,
    ParamDecl,
    RecordDecl,
    SymbolTable,
)
from scriptbind.frontend.typeparser import (
    BuiltinType,
    CallExpr,
    Expression,
    LiteralExpr,
    NamedType,
    NameExpr,
    TypeNode,
    TypeSyntaxError,
    UnaryExpr,
    parse_expression,
    parse_type,
    render_expression,
)
from scriptbind.logging import get_logger
from scriptbind.model.context import BindingContext
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
    ReturnInfo,
    StructCtorInfo,
    StructInfo,
    UserTypeInfo,
)
from scriptbind.model.types import Category

_LOGGER = get_logger("collector")

# ###############
# Public Interface
# ###############

PRESEEDED_STRUCTS: tuple[str, ...] = (
    "Vector2",
    "Vector3",
    "Vector4",
    "Matrix3",
    "Matrix4",
    "Quaternion",
    "Radian",
    "Degree",
    "Color",
    "AABox",
    "Sphere",
    "Capsule",
    "Ray",
    "Vector2I",
    "Rect2",
    "Rect2I",
)


def seed_type_map(context: BindingContext, extra_structs: dict[str, str] | None = None) -> None:
    """Register the engine types every binding run knows without declarations.

    Args:
        context: Context whose type map is seeded.
        extra_structs: Additional plain struct types, name to declaring header.
    """
    for name in PRESEEDED_STRUCTS:
        context.type_map[name] = UserTypeInfo(script_name=name, category=Category.STRUCT, decl_file=f"Bs{name}.h")
    context.type_map["SceneObject"] = UserTypeInfo(
        script_name="SceneObject", category=Category.SCENE_OBJECT, decl_file="Scene/BsSceneObject.h"
    )
    for name, decl_file in (extra_structs or {}).items():
        context.type_map[name] = UserTypeInfo(script_name=name, category=Category.STRUCT, decl_file=decl_file)


def collect(symbols: SymbolTable, context: BindingContext, diagnostics: Diagnostics) -> None:
    """Collect every exported declaration of *symbols* into *context*.

    A declaration that fails to collect (for instance because one of its types
    cannot be classified) is reported and skipped; collection continues with
    the next declaration.
    """
    _Collector(symbols, context, diagnostics).run()


def evaluate_default(
    text: str,
    symbols: SymbolTable,
    *,
    param_names: frozenset[str] = frozenset(),
) -> tuple[str, str | None] | None:
    """Evaluate a default-value expression.

    Args:
        text: C++ expression text.
        symbols: Symbol table used to resolve enum constants and casts.
        param_names: Names that refer to constructor parameters; such
            references cannot be evaluated.

    Returns:
        ``(value, None)`` for a constant, ``(args, type)`` for a constructor
        call ``type(args)``, or None when the expression is not evaluable.
    """
    try:
        expr = parse_expression(text)
    except TypeSyntaxError:
        return None
    return _Evaluator(symbols, param_names).evaluate(expr)


# ################
# Implementation
# ################


class _Evaluator:
    """Constant evaluation of default-value expressions."""

    def __init__(self, symbols: SymbolTable, param_names: frozenset[str]) -> None:
        self._symbols = symbols
        self._param_names = param_names

    def evaluate(self, expr: Expression) -> tuple[str, str | None] | None:
        if isinstance(expr, CallExpr):
            if len(expr.args) == 1 and (self._is_builtin_cast(expr.callee) or self._is_enum_cast(expr.callee)):
                return self.evaluate(expr.args[0])
            args = ", ".join(render_expression(arg, managed=True) for arg in expr.args)
            return args, expr.callee.rpartition("::")[2]
        value = self.constant(expr)
        return (value, None) if value is not None else None

    def constant(self, expr: Expression) -> str | None:
        if isinstance(expr, LiteralExpr):
            return _literal_value(expr)
        if isinstance(expr, UnaryExpr):
            operand = self.constant(expr.operand)
            if operand is None or expr.op != "-":
                return None
            return operand[1:] if operand.startswith("-") else f"-{operand}"
        if isinstance(expr, NameExpr):
            if expr.name in self._param_names:
                return None
            entry_value = self._enum_constant(expr.name)
            return str(entry_value) if entry_value is not None else None
        return None

    def _is_builtin_cast(self, callee: str) -> bool:
        try:
            node = parse_type(self._symbols.resolve_alias(callee) or callee)
        except TypeSyntaxError:
            return False
        return isinstance(node, BuiltinType) and builtin_typedef(node.kind) is not None

    def _is_enum_cast(self, callee: str) -> bool:
        return self._symbols.find_enum(self._symbols.resolve_alias(callee) or callee) is not None

    def _enum_constant(self, name: str) -> int | None:
        enum_name, _, entry_name = name.rpartition("::")
        candidates: list[EnumDecl] = []
        if enum_name:
            enum_decl = self._symbols.find_enum(enum_name)
            if enum_decl is not None:
                candidates.append(enum_decl)
        else:
            candidates.extend(
                decl for key, decl in self._symbols.enums.items() if key == decl.name
            )
        for enum_decl in candidates:
            for entry_name_, value in _enum_values(enum_decl):
                if entry_name_ == entry_name:
                    return value
        return None


def _literal_value(expr: LiteralExpr) -> str | None:
    if expr.kind == "int":
        return str(_parse_int(expr.value))
    if expr.kind == "float":
        text = repr(float(expr.value))
        return text[:-2] if text.endswith(".0") else text
    if expr.kind == "bool":
        return expr.value
    if expr.kind == "string":
        return render_expression(expr)
    if expr.kind == "char":
        return render_expression(expr)
    if expr.kind == "null":
        return "null"
    return None


def _parse_int(text: str) -> int:
    lowered = text.lower()
    if lowered.startswith("-"):
        return -_parse_int(text[1:])
    if lowered.startswith("0x"):
        return int(lowered, 16)
    if len(lowered) > 1 and lowered.startswith("0"):
        return int(lowered, 8)
    return int(lowered)


def _enum_values(enum_decl: EnumDecl) -> list[tuple[str, int]]:
    """Return ``(name, value)`` for every entry, continuing implicit values."""
    values: list[tuple[str, int]] = []
    next_value = 0
    for entry in enum_decl.entries:
        if entry.value is None:
            value = next_value
        elif isinstance(entry.value, int):
            value = entry.value
        else:
            value = _entry_value(entry.value, values, next_value)
        values.append((entry.name, value))
        next_value = value + 1
    return values


def _entry_value(text: str, previous: list[tuple[str, int]], fallback: int) -> int:
    try:
        expr = parse_expression(text)
    except TypeSyntaxError:
        return fallback
    negate = False
    if isinstance(expr, UnaryExpr) and expr.op == "-":
        negate = True
        expr = expr.operand
    if isinstance(expr, LiteralExpr) and expr.kind == "int":
        value = _parse_int(expr.value)
        return -value if negate else value
    if isinstance(expr, NameExpr):
        for name, value in previous:
            if name == expr.simple_name:
                return -value if negate else value
    return fallback


class _Collector:
    """Walks declarations and builds records."""

    def __init__(self, symbols: SymbolTable, context: BindingContext, diagnostics: Diagnostics) -> None:
        self._symbols = symbols
        self._context = context
        self._diagnostics = diagnostics

    def run(self) -> None:
        for declaration in self._symbols.declarations:
            self._register_comments(declaration)
        for declaration in self._symbols.declarations:
            if isinstance(declaration, EnumDecl):
                self._collect_enum(declaration)
            elif isinstance(declaration, RecordDecl):
                self._collect_record(declaration)
            else:
                self._collect_function(declaration)
        _LOGGER.debug(
            "Collected %d file group(s) and %d pending external class(es)",
            len(self._context.file_groups),
            len(self._context.external_methods),
        )

    # ------------------------------------------------------------------
    # Comment index
    # ------------------------------------------------------------------

    def _register_comments(self, declaration: EnumDecl | RecordDecl | FunctionDecl) -> None:
        index = self._context.comments
        namespaces = declaration.namespaces
        if isinstance(declaration, FunctionDecl):
            index.add(
                declaration.name,
                namespaces,
                parse_doc_comment(declaration.comment),
                param_types=[param.type for param in declaration.params],
            )
            return

        index.add(declaration.name, namespaces, parse_doc_comment(declaration.comment))
        if isinstance(declaration, EnumDecl):
            for entry in declaration.entries:
                index.add(f"{declaration.name}::{entry.name}", namespaces, parse_doc_comment(entry.comment))
            return

        for ctor in declaration.constructors:
            index.add(
                f"{declaration.name}::{declaration.name}",
                namespaces,
                parse_doc_comment(ctor.comment),
                param_types=[param.type for param in ctor.params],
            )
        for method in declaration.methods:
            index.add(
                f"{declaration.name}::{method.name}",
                namespaces,
                parse_doc_comment(method.comment),
                param_types=[param.type for param in method.params],
            )
        for field in declaration.fields:
            index.add(f"{declaration.name}::{field.name}", namespaces, parse_doc_comment(field.comment))

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _register_type(self, name: str, info: UserTypeInfo) -> bool:
        if name in self._context.type_map and self._context.type_map[name].dest_file:
            self._diagnostics.error(f'Type "{name}" is exported more than once. Skipping the duplicate.')
            return False
        self._context.type_map[name] = info
        return True

    def _build_params(
        self, params: list[ParamDecl], owner: str, *, is_parameter: bool = True
    ) -> list[ParamInfo] | None:
        result: list[ParamInfo] = []
        taking_defaults = True
        for param in params:
            ref = classify(param.type, self._symbols, self._diagnostics, is_parameter=is_parameter, owner=owner)
            if ref is None:
                return None
            info = ParamInfo(name=param.name, type=ref)
            if param.default is not None and taking_defaults:
                evaluated = evaluate_default(param.default, self._symbols)
                if evaluated is None:
                    self._diagnostics.warning(
                        f'Method "{owner}" has a default argument that cannot be constantly evaluated, ignoring it.'
                    )
                    taking_defaults = False
                    for earlier in result:
                        earlier.default_value = None
                        earlier.default_value_type = None
                else:
                    info.default_value, info.default_value_type = evaluated
            result.append(info)
        return result

    def _build_return(self, return_type: str, owner: str) -> tuple[bool, ReturnInfo | None]:
        if is_void(return_type):
            return True, None
        ref = classify(return_type, self._symbols, self._diagnostics, is_parameter=False, owner=owner)
        if ref is None:
            return False, None
        return True, ReturnInfo(type=ref)

    # ------------------------------------------------------------------
    # Enums
    # ------------------------------------------------------------------

    def _collect_enum(self, decl: EnumDecl) -> None:
        directive = parse_export_annotation(decl.annotation, decl.name, self._diagnostics)
        if directive is None or directive.has(ExportFlags.EXCLUDE):
            return

        explicit_type: str | None = None
        if decl.underlying_type:
            try:
                explicit_type = classify_node(parse_type(decl.underlying_type), self._symbols, is_parameter=False).name
            except (TypeSyntaxError, ClassificationError) as exc:
                self._diagnostics.error(f'Invalid underlying type for enum "{decl.name}": {exc}')
                return

        in_editor = directive.has(ExportFlags.EDITOR)
        info = EnumInfo(
            name=decl.name,
            script_name=directive.export_name,
            visibility=directive.visibility,
            namespaces=list(decl.namespaces),
            explicit_type=explicit_type,
            in_editor=in_editor,
            module=directive.module,
            documentation=parse_doc_comment(decl.comment),
        )
        for entry, (entry_name, value) in zip(decl.entries, _enum_values(decl), strict=True):
            script_name = entry_name
            if entry.annotation:
                entry_directive = parse_export_annotation(entry.annotation, entry_name, self._diagnostics)
                if entry_directive is not None:
                    if entry_directive.has(ExportFlags.EXCLUDE):
                        continue
                    script_name = entry_directive.export_name
            info.entries[value] = EnumEntryInfo(
                name=entry_name,
                script_name=script_name,
                value=value,
                documentation=parse_doc_comment(entry.comment),
            )

        type_info = UserTypeInfo(
            script_name=directive.export_name,
            category=Category.ENUM,
            decl_file=decl.file,
            dest_file=directive.file_group,
            underlying=explicit_type or "INT32",
        )
        if not self._register_type(decl.name, type_info):
            return
        group = self._context.group(directive.file_group)
        group.enums.append(info)
        group.in_editor = group.in_editor or in_editor

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _collect_record(self, decl: RecordDecl) -> None:
        directive = parse_export_annotation(decl.annotation, decl.name, self._diagnostics)
        if directive is None:
            self._collect_container_methods(decl, None)
            return
        if directive.has(ExportFlags.EXCLUDE):
            return
        if directive.has(ExportFlags.EXTERNAL):
            self._collect_container_methods(decl, directive)
            return
        if directive.has(ExportFlags.PLAIN):
            self._collect_struct(decl, directive)
        else:
            self._collect_class(decl, directive)

    def _collect_container_methods(self, decl: RecordDecl, directive: ExportDirective | None) -> None:
        """Route external methods declared on a non-exported container record."""
        for method in decl.methods:
            method_directive = parse_export_annotation(method.annotation, method.name, self._diagnostics)
            if method_directive is None or method_directive.has(ExportFlags.EXCLUDE):
                continue
            if not method_directive.has(ExportFlags.EXTERNAL) and directive is not None:
                method_directive.flags |= directive.flags & (ExportFlags.EXTERNAL | ExportFlags.EXTERNAL_CONSTRUCTOR)
                method_directive.external_class = directive.external_class
            if not method_directive.has(ExportFlags.EXTERNAL):
                self._diagnostics.warning(
                    f'Method "{method.name}" is exported but "{decl.name}" is not an exported class. Ignoring.'
                )
                continue
            self._collect_external(method, method_directive, container=decl.name, decl_file=decl.file)

    def _collect_function(self, decl: FunctionDecl) -> None:
        directive = parse_export_annotation(decl.annotation, decl.name, self._diagnostics)
        if directive is None or directive.has(ExportFlags.EXCLUDE):
            return
        if not directive.has(ExportFlags.EXTERNAL):
            self._diagnostics.warning(
                f'Free function "{decl.name}" must be annotated as an external method or constructor. Ignoring.'
            )
            return
        method = MethodDecl(
            name=decl.name,
            annotation=decl.annotation,
            static=True,
            return_type=decl.return_type,
            params=decl.params,
            comment=decl.comment,
        )
        self._collect_external(method, directive, container=None, decl_file=decl.file)

    def _collect_external(
        self,
        method: MethodDecl,
        directive: ExportDirective,
        *,
        container: str | None,
        decl_file: str,
    ) -> None:
        target = directive.external_class
        if not target:
            self._diagnostics.error(f'External method "{method.name}" does not name its target class.')
            return
        info = self._build_method(method, directive)
        if info is None:
            return
        info.flags |= MethodFlags.EXTERNAL
        info.flags &= ~MethodFlags.STATIC
        if directive.has(ExportFlags.EXTERNAL_CONSTRUCTOR):
            info.flags |= MethodFlags.CONSTRUCTOR
        if directive.has(ExportFlags.EDITOR):
            info.flags |= MethodFlags.EDITOR
        info.external_class = container
        if decl_file:
            self._context.external_files.setdefault(container or method.name, decl_file)
        self._context.external_methods.setdefault(target, []).append(info)

    def _build_method(self, method: MethodDecl, directive: ExportDirective) -> MethodInfo | None:
        ok, return_info = self._build_return(method.return_type, method.name)
        if not ok:
            return None
        params = self._build_params(method.params, method.name)
        if params is None:
            return None

        flags = MethodFlags.NONE
        if method.static:
            flags |= MethodFlags.STATIC
        if directive.has(ExportFlags.INTEROP_ONLY):
            flags |= MethodFlags.INTEROP_ONLY
        if directive.has(ExportFlags.CALLBACK):
            flags |= MethodFlags.CALLBACK
        if directive.has(ExportFlags.PROPERTY_GETTER):
            if return_info is None or params:
                self._diagnostics.error(
                    f'Property getter method "{method.name}" must return a value and accept no parameters. Skipping.'
                )
                return None
            flags |= MethodFlags.PROPERTY_GETTER
        if directive.has(ExportFlags.PROPERTY_SETTER):
            if return_info is not None or len(params) != 1:
                self._diagnostics.error(
                    f'Property setter method "{method.name}" must return void and accept exactly one parameter. '
                    "Skipping."
                )
                return None
            flags |= MethodFlags.PROPERTY_SETTER

        return MethodInfo(
            source_name=method.name,
            script_name=directive.export_name,
            visibility=directive.visibility,
            flags=flags,
            return_info=return_info,
            params=params,
            documentation=parse_doc_comment(method.comment),
            style=directive.style,
        )

    # ------------------------------------------------------------------
    # Plain structs
    # ------------------------------------------------------------------

    def _collect_struct(self, decl: RecordDecl, directive: ExportDirective) -> None:
        in_editor = directive.has(ExportFlags.EDITOR)
        info = StructInfo(
            name=decl.name,
            clean_name=directive.export_name,
            visibility=directive.visibility,
            namespaces=list(decl.namespaces),
            in_editor=in_editor,
            module=directive.module,
            documentation=parse_doc_comment(decl.comment),
        )
        info.base_class = self._struct_base(decl)

        field_decls = [*self._inherited_fields(decl, set()), *(f for f in decl.fields if not f.static)]
        in_class_defaults: dict[str, str] = {}
        for field in field_decls:
            ref = classify(field.type, self._symbols, self._diagnostics, is_parameter=False, owner=decl.name)
            if ref is None:
                self._diagnostics.error(
                    f'Invalid field type found in struct "{decl.name}" for field "{field.name}". Skipping.'
                )
                continue
            field_info = FieldInfo(name=field.name, type=ref, documentation=parse_doc_comment(field.comment))
            if field.annotation:
                field_directive = parse_export_annotation(field.annotation, field.name, self._diagnostics)
                if field_directive is not None:
                    field_info.style = field_directive.style
            if field.initializer is not None:
                evaluated = evaluate_default(field.initializer, self._symbols)
                if evaluated is None:
                    self._diagnostics.warning(
                        f'Initializer of field "{field.name}" in struct "{decl.name}" cannot be constantly '
                        "evaluated, ignoring it."
                    )
                else:
                    field_info.default_value, field_info.default_value_type = evaluated
                    in_class_defaults[field.name] = evaluated[0]
            info.fields.append(field_info)

        field_names = {field.name for field in info.fields}
        for ctor in decl.constructors:
            if ctor.is_copy or ctor.access != "public":
                continue
            ctor_info = self._collect_struct_ctor(decl, ctor, info, field_names, in_class_defaults)
            if ctor_info is not None:
                info.ctors.append(ctor_info)
        if not any(not ctor.is_copy for ctor in decl.constructors):
            info.ctors.append(StructCtorInfo())

        type_info = UserTypeInfo(
            script_name=directive.export_name,
            category=Category.STRUCT,
            decl_file=decl.file,
            dest_file=directive.file_group,
        )
        if not self._register_type(decl.name, type_info):
            return
        group = self._context.group(directive.file_group)
        group.structs.append(info)
        group.in_editor = group.in_editor or in_editor

    def _collect_struct_ctor(
        self,
        decl: RecordDecl,
        ctor: ConstructorDecl,
        info: StructInfo,
        field_names: set[str],
        in_class_defaults: dict[str, str],
    ) -> StructCtorInfo | None:
        params = self._build_params(ctor.params, decl.name, is_parameter=False)
        if params is None:
            return None
        ctor_info = StructCtorInfo(params=params, documentation=parse_doc_comment(ctor.comment))
        param_names = frozenset(param.name for param in ctor.params)
        fields_by_name = {field.name: field for field in info.fields}

        for initializer in ctor.initializers:
            if initializer.field not in field_names:
                continue
            try:
                expr = parse_expression(initializer.value)
            except TypeSyntaxError:
                expr = None
            if isinstance(expr, NameExpr) and expr.name in param_names:
                ctor_info.field_assignments[initializer.field] = expr.name
                continue
            evaluated = evaluate_default(initializer.value, self._symbols, param_names=param_names)
            if evaluated is None:
                self._non_trivial_assignment(initializer.field, decl.name)
                continue
            field = fields_by_name[initializer.field]
            if initializer.field not in in_class_defaults and field.default_value is None:
                field.default_value, field.default_value_type = evaluated

        for assignment in ctor.assignments:
            if assignment.field not in field_names:
                continue
            try:
                expr = parse_expression(assignment.value)
            except TypeSyntaxError:
                expr = None
            if isinstance(expr, NameExpr) and expr.name in param_names:
                ctor_info.field_assignments[assignment.field] = expr.name
            else:
                self._non_trivial_assignment(assignment.field, decl.name)
        return ctor_info

    def _non_trivial_assignment(self, field_name: str, struct_name: str) -> None:
        self._diagnostics.warning(
            f'Found a non-trivial field assignment for field "{field_name}" in constructor of "{struct_name}". '
            "Ignoring assignment."
        )

    def _struct_base(self, decl: RecordDecl) -> str | None:
        for base_text in decl.bases:
            base = self._symbols.find_record(_type_name(base_text))
            if base is None:
                continue
            base_directive = parse_export_annotation(base.annotation, base.name, Diagnostics())
            if base_directive is not None and base_directive.has(ExportFlags.PLAIN):
                return base.name
            nested = self._struct_base(base)
            if nested is not None:
                return nested
        return None

    def _inherited_fields(self, decl: RecordDecl, visited: set[str]) -> list[FieldDecl]:
        fields: list[FieldDecl] = []
        visited.add(decl.name)
        for base_text in decl.bases:
            base = self._symbols.find_record(_type_name(base_text))
            if base is None or base.name in visited:
                continue
            fields.extend(self._inherited_fields(base, visited))
            fields.extend(field for field in base.fields if not field.static and field.access == "public")
        return fields

    # ------------------------------------------------------------------
    # Classes
    # ------------------------------------------------------------------

    def _collect_class(self, decl: RecordDecl, directive: ExportDirective) -> None:
        category, is_module = find_sentinel(self._symbols, decl.name)
        in_editor = directive.has(ExportFlags.EDITOR)
        flags = ClassFlags.NONE
        if in_editor:
            flags |= ClassFlags.EDITOR
        if is_module:
            flags |= ClassFlags.IS_MODULE
        if decl.template_args:
            flags |= ClassFlags.IS_TEMPLATE_INST
        if decl.is_struct:
            flags |= ClassFlags.IS_STRUCT

        info = ClassInfo(
            name=decl.name,
            clean_name=directive.export_name,
            category=category or Category.CLASS,
            visibility=directive.visibility,
            flags=flags,
            namespaces=list(decl.namespaces),
            template_params=list(decl.template_args),
            base_class=self._class_base(decl, set()),
            module=directive.module,
            documentation=parse_doc_comment(decl.comment),
        )

        if not is_module:
            for ctor in decl.constructors:
                self._collect_class_ctor(decl, ctor, info)
        for method in decl.methods:
            self._collect_class_method(decl, method, info)
        for field in decl.fields:
            self._collect_class_field(decl, field, info)

        type_info = UserTypeInfo(
            script_name=directive.export_name,
            category=info.category,
            decl_file=decl.file,
            dest_file=directive.file_group,
            rtti_type_id=decl.rtti_type_id,
        )
        if not self._register_type(decl.name, type_info):
            return
        group = self._context.group(directive.file_group)
        group.classes.append(info)
        group.in_editor = group.in_editor or in_editor

    def _class_base(self, decl: RecordDecl, visited: set[str]) -> str | None:
        visited.add(decl.name)
        for base_text in decl.bases:
            base = self._symbols.find_record(_type_name(base_text))
            if base is None or base.name in visited:
                continue
            base_directive = parse_export_annotation(base.annotation, base.name, Diagnostics())
            if (
                base_directive is not None
                and not base_directive.has(ExportFlags.EXCLUDE)
                and not base_directive.has(ExportFlags.PLAIN)
                and not base_directive.has(ExportFlags.EXTERNAL)
            ):
                return base.name
            nested = self._class_base(base, visited)
            if nested is not None:
                return nested
        return None

    def _warn_not_public(self, access: str, member: str, class_name: str) -> None:
        if access != "public":
            self._diagnostics.warning(
                f'Exported method "{member}" in class "{class_name}" is not public. '
                "The generated code will not compile."
            )

    def _collect_class_ctor(self, decl: RecordDecl, ctor: ConstructorDecl, info: ClassInfo) -> None:
        directive = parse_export_annotation(ctor.annotation, decl.name, self._diagnostics)
        if directive is None or directive.has(ExportFlags.EXCLUDE):
            return
        self._warn_not_public(ctor.access, decl.name, decl.name)
        params = self._build_params(ctor.params, decl.name)
        if params is None:
            return
        flags = MethodFlags.CONSTRUCTOR
        if directive.has(ExportFlags.INTEROP_ONLY):
            flags |= MethodFlags.INTEROP_ONLY
        info.ctors.append(
            MethodInfo(
                source_name=decl.name,
                script_name=info.clean_name,
                visibility=directive.visibility,
                flags=flags,
                params=params,
                documentation=parse_doc_comment(ctor.comment),
            )
        )

    def _collect_class_method(self, decl: RecordDecl, method: MethodDecl, info: ClassInfo) -> None:
        directive = parse_export_annotation(method.annotation, method.name, self._diagnostics)
        if directive is None or directive.has(ExportFlags.EXCLUDE):
            return
        self._warn_not_public(method.access, method.name, decl.name)
        if directive.has(ExportFlags.EXTERNAL):
            self._collect_external(method, directive, container=decl.name, decl_file=decl.file)
            return
        method_info = self._build_method(method, directive)
        if method_info is not None:
            info.methods.append(method_info)

    def _collect_class_field(self, decl: RecordDecl, field: FieldDecl, info: ClassInfo) -> None:
        directive = parse_export_annotation(field.annotation, field.name, self._diagnostics)
        if directive is None or directive.has(ExportFlags.EXCLUDE):
            return
        try:
            signature = event_signature(parse_type(field.type), self._symbols)
        except (TypeSyntaxError, ClassificationError) as exc:
            self._diagnostics.error(f'Cannot parse type of field "{field.name}" in "{decl.name}": {exc}')
            return

        if signature is not None:
            self._collect_event(decl, field, directive, signature.result, list(signature.params), info)
            return
        if field.static:
            self._diagnostics.error(f'Static field "{field.name}" in "{decl.name}" cannot be exported. Skipping.')
            return

        ref = classify(field.type, self._symbols, self._diagnostics, is_parameter=False, owner=field.name)
        if ref is None:
            return
        documentation = parse_doc_comment(field.comment)
        common = {
            "source_name": field.name,
            "script_name": directive.export_name,
            "visibility": directive.visibility,
            "documentation": documentation,
            "style": directive.style,
        }
        info.methods.append(
            MethodInfo(
                **common,
                flags=MethodFlags.FIELD_WRAPPER | MethodFlags.PROPERTY_GETTER,
                return_info=ReturnInfo(type=ref),
            )
        )
        info.methods.append(
            MethodInfo(
                **common,
                flags=MethodFlags.FIELD_WRAPPER | MethodFlags.PROPERTY_SETTER,
                params=[ParamInfo(name="value", type=ref)],
            )
        )

    def _collect_event(
        self,
        decl: RecordDecl,
        field: FieldDecl,
        directive: ExportDirective,
        result: TypeNode,
        params: list[TypeNode],
        info: ClassInfo,
    ) -> None:
        if not (isinstance(result, BuiltinType) and result.kind == "void"):
            self._diagnostics.error(f'Event "{field.name}" in "{decl.name}" must return void. Skipping.')
            return
        param_infos: list[ParamInfo] = []
        for index, node in enumerate(params):
            try:
                ref = classify_node(node, self._symbols, is_parameter=False)
            except ClassificationError as exc:
                self._diagnostics.error(f'{exc} Parameter {index} of event "{field.name}" in "{decl.name}".')
                return
            param_infos.append(ParamInfo(name=f"p{index}", type=ref))

        flags = MethodFlags.NONE
        if field.static:
            flags |= MethodFlags.STATIC
        if directive.has(ExportFlags.CALLBACK):
            flags |= MethodFlags.CALLBACK
        if directive.has(ExportFlags.INTEROP_ONLY):
            flags |= MethodFlags.INTEROP_ONLY
        info.events.append(
            EventInfo(
                source_name=field.name,
                script_name=directive.export_name,
                visibility=directive.visibility,
                flags=flags,
                params=param_infos,
                documentation=parse_doc_comment(field.comment),
            )
        )


def _type_name(text: str) -> str:
    try:
        node = parse_type(text)
    except TypeSyntaxError:
        return text.strip()
    if isinstance(node, NamedType):
        return node.simple_name
    return text.strip()

