# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Binding records built by the collector and rewritten by the post-processor."""

from __future__ import annotations

from enum import Enum, IntFlag

from pydantic import BaseModel
from pydantic import Field as _Field

from scriptbind.model.comments import CommentEntry
from scriptbind.model.types import Category, TypeRef

# ###############
# Public Interface
# ###############


class Visibility(Enum):
    """Visibility of an exported declaration on the managed side."""

    PUBLIC = "public"
    INTERNAL = "internal"
    PRIVATE = "private"


class ExportFlags(IntFlag):
    """Flags decoded from an export annotation."""

    NONE = 0
    PLAIN = 1 << 0
    PROPERTY_GETTER = 1 << 1
    PROPERTY_SETTER = 1 << 2
    EXTERNAL = 1 << 3
    EXTERNAL_CONSTRUCTOR = 1 << 4
    EDITOR = 1 << 5
    EXCLUDE = 1 << 6
    INTEROP_ONLY = 1 << 7
    CALLBACK = 1 << 8


class MethodFlags(IntFlag):
    """Flags carried by a method record."""

    NONE = 0
    STATIC = 1 << 0
    EXTERNAL = 1 << 1
    CONSTRUCTOR = 1 << 2
    PROPERTY_GETTER = 1 << 3
    PROPERTY_SETTER = 1 << 4
    INTEROP_ONLY = 1 << 5
    CALLBACK = 1 << 6
    FIELD_WRAPPER = 1 << 7
    CS_ONLY = 1 << 8
    EDITOR = 1 << 9


class ClassFlags(IntFlag):
    """Flags carried by a class record."""

    NONE = 0
    EDITOR = 1 << 0
    IS_BASE = 1 << 1
    IS_MODULE = 1 << 2
    IS_TEMPLATE_INST = 1 << 3
    IS_STRUCT = 1 << 4


class StyleInfo(BaseModel):
    """Inspector style hints attached to a field or property."""

    range_min: str | None = None
    range_max: str | None = None
    slider: bool = False
    step: str | None = None
    layer_mask: bool = False
    hide: bool = False
    show: bool = False
    order: int | None = None
    category: str | None = None
    inline: bool = False
    not_null: bool = False
    pass_by_copy: bool = False
    apply_on_dirty: bool = False
    as_quaternion: bool = False
    load_on_assign: bool = False
    hdr: bool = False

    def is_empty(self) -> bool:
        return self == StyleInfo()


class ExportDirective(BaseModel):
    """The decoded form of an ``se,...`` annotation."""

    source_name: str
    export_name: str
    file_group: str
    visibility: Visibility = Visibility.PUBLIC
    flags: int = ExportFlags.NONE
    module: str | None = None
    external_class: str | None = None
    style: StyleInfo = _Field(default_factory=StyleInfo)

    def has(self, flag: ExportFlags) -> bool:
        return bool(self.flags & flag)


class ParamInfo(BaseModel):
    """A parameter of an exported method, constructor or event.

    Attributes:
        name: Parameter name.
        type: Classified type of the parameter.
        default_value: Rendered default value. For a non-trivial default this is
            the argument list of the constructor call.
        default_value_type: Type constructed by a non-trivial default.
    """

    name: str
    type: TypeRef
    default_value: str | None = None
    default_value_type: str | None = None


class ReturnInfo(BaseModel):
    type: TypeRef


class MethodInfo(BaseModel):
    """An exported method, constructor or field accessor.

    Attributes:
        interop_name: Name of the native hook; unique within the class. None
            for managed-only overloads.
        external_class: Class (or None for a free function) declaring the
            native function an external method calls.
        forwarded_params: For a managed-only overload produced by default
            expansion, the trailing parameters it fills in with their defaults
            when forwarding to the full method.
    """

    source_name: str
    script_name: str
    interop_name: str | None = None
    visibility: Visibility = Visibility.PUBLIC
    flags: int = MethodFlags.NONE
    return_info: ReturnInfo | None = None
    params: list[ParamInfo] = _Field(default_factory=list)
    external_class: str | None = None
    forwarded_params: list[ParamInfo] = _Field(default_factory=list)
    documentation: CommentEntry = _Field(default_factory=CommentEntry)
    style: StyleInfo = _Field(default_factory=StyleInfo)

    def has(self, flag: MethodFlags) -> bool:
        return bool(self.flags & flag)


class FieldInfo(ParamInfo):
    documentation: CommentEntry = _Field(default_factory=CommentEntry)
    style: StyleInfo = _Field(default_factory=StyleInfo)


class PropertyInfo(BaseModel):
    """A managed property synthesized from a getter and/or setter.

    ``getter`` and ``setter`` hold the interop names of the native hooks.
    """

    name: str
    type: TypeRef
    getter: str | None = None
    setter: str | None = None
    is_static: bool = False
    visibility: Visibility = Visibility.PUBLIC
    documentation: CommentEntry = _Field(default_factory=CommentEntry)
    style: StyleInfo = _Field(default_factory=StyleInfo)


class EventInfo(BaseModel):
    """An exported native event, raised into managed code through a thunk."""

    source_name: str
    script_name: str
    interop_name: str | None = None
    visibility: Visibility = Visibility.PUBLIC
    flags: int = MethodFlags.NONE
    params: list[ParamInfo] = _Field(default_factory=list)
    documentation: CommentEntry = _Field(default_factory=CommentEntry)

    def has(self, flag: MethodFlags) -> bool:
        return bool(self.flags & flag)


class ClassInfo(BaseModel):
    """An exported class.

    Attributes:
        name: Source name of the class.
        clean_name: Export name used for the companion and managed class.
        category: Category determined by the base-class ascent.
        base_class: Source name of the closest exported base class.
    """

    name: str
    clean_name: str
    category: Category = Category.CLASS
    visibility: Visibility = Visibility.PUBLIC
    flags: int = ClassFlags.NONE
    namespaces: list[str] = _Field(default_factory=list)
    template_params: list[str] = _Field(default_factory=list)
    base_class: str | None = None
    ctors: list[MethodInfo] = _Field(default_factory=list)
    methods: list[MethodInfo] = _Field(default_factory=list)
    events: list[EventInfo] = _Field(default_factory=list)
    properties: list[PropertyInfo] = _Field(default_factory=list)
    module: str | None = None
    documentation: CommentEntry = _Field(default_factory=CommentEntry)

    def has(self, flag: ClassFlags) -> bool:
        return bool(self.flags & flag)


class StructCtorInfo(BaseModel):
    """A struct constructor; ``field_assignments`` maps field name to parameter name."""

    params: list[ParamInfo] = _Field(default_factory=list)
    field_assignments: dict[str, str] = _Field(default_factory=dict)
    documentation: CommentEntry = _Field(default_factory=CommentEntry)


class StructInfo(BaseModel):
    name: str
    clean_name: str
    visibility: Visibility = Visibility.PUBLIC
    namespaces: list[str] = _Field(default_factory=list)
    ctors: list[StructCtorInfo] = _Field(default_factory=list)
    fields: list[FieldInfo] = _Field(default_factory=list)
    requires_interop: bool = False
    interop_name: str = ""
    base_class: str | None = None
    in_editor: bool = False
    module: str | None = None
    documentation: CommentEntry = _Field(default_factory=CommentEntry)


class EnumEntryInfo(BaseModel):
    name: str
    script_name: str
    value: int
    documentation: CommentEntry = _Field(default_factory=CommentEntry)


class EnumInfo(BaseModel):
    """An exported enum; ``entries`` is keyed by the integer entry value."""

    name: str
    script_name: str
    visibility: Visibility = Visibility.PUBLIC
    namespaces: list[str] = _Field(default_factory=list)
    explicit_type: str | None = None
    entries: dict[int, EnumEntryInfo] = _Field(default_factory=dict)
    in_editor: bool = False
    module: str | None = None
    documentation: CommentEntry = _Field(default_factory=CommentEntry)


class UserTypeInfo(BaseModel):
    """Type map entry for a user type seen or exported during collection."""

    script_name: str
    category: Category
    decl_file: str = ""
    dest_file: str = ""
    underlying: str | None = None
    rtti_type_id: str | None = None
