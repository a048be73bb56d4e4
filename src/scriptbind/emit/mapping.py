# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""The ``info.xml`` descriptor mapping native names to managed names."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from scriptbind.emit.common import EmitOptions
from scriptbind.model.comments import CommentEntry
from scriptbind.model.context import BindingContext, FileGroup
from scriptbind.model.entities import ClassInfo, EnumInfo, MethodFlags, StructInfo

# ###############
# Public Interface
# ###############

MAPPING_FILE = "info.xml"


def build_mapping(context: BindingContext, options: EmitOptions) -> ET.Element:
    """Build the ``<Bindings>`` tree of every exported class, struct and enum."""
    root = ET.Element("Bindings")
    for group in _included_groups(context, options):
        for class_info in group.classes:
            root.append(_class_element(class_info, context))
        for struct_info in group.structs:
            root.append(_struct_element(struct_info, context))
        for enum_info in group.enums:
            root.append(_enum_element(enum_info))
    return root


def render_mapping(context: BindingContext, options: EmitOptions) -> str:
    """Render the mapping document as indented XML text."""
    root = build_mapping(context, options)
    ET.indent(root, space="\t")
    return ET.tostring(root, encoding="unicode", xml_declaration=True) + "\n"


# ################
# Implementation
# ################


def _included_groups(context: BindingContext, options: EmitOptions) -> list[FileGroup]:
    return [group for group in context.file_groups.values() if options.generate_editor or not group.in_editor]


def _script_name(context: BindingContext, name: str) -> str:
    info = context.type_map.get(name)
    return info.script_name if info is not None else name


def _element(tag: str, native: str, script: str, documentation: CommentEntry | None = None, **extra: str) -> ET.Element:
    element = ET.Element(tag, {"native": native, "script": script, **extra})
    if documentation is not None and documentation.brief:
        ET.SubElement(element, "doc").text = " ".join(documentation.brief)
    return element


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _class_element(class_info: ClassInfo, context: BindingContext) -> ET.Element:
    extra = {"module": class_info.module} if class_info.module else {}
    element = _element(
        "class", class_info.name, _script_name(context, class_info.name), class_info.documentation, **extra
    )
    for ctor in class_info.ctors:
        if ctor.has(MethodFlags.CS_ONLY):
            continue
        element.append(_element("ctor", ctor.source_name, ctor.script_name, ctor.documentation))
    for method in class_info.methods:
        if method.has(MethodFlags.CS_ONLY | MethodFlags.PROPERTY_GETTER | MethodFlags.PROPERTY_SETTER):
            continue
        element.append(_element("method", method.source_name, method.script_name, method.documentation))

    accessors = {method.interop_name: method.source_name for method in class_info.methods}
    for prop in class_info.properties:
        extra = {"static": _flag(prop.is_static)}
        if prop.getter is not None:
            extra["getter"] = accessors.get(prop.getter, prop.getter)
        if prop.setter is not None:
            extra["setter"] = accessors.get(prop.setter, prop.setter)
        native = extra.get("getter") or extra.get("setter") or prop.name
        element.append(_element("property", native, prop.name, prop.documentation, **extra))
    for event in class_info.events:
        static = {"static": _flag(event.has(MethodFlags.STATIC))}
        element.append(_element("event", event.source_name, event.script_name, event.documentation, **static))
    return element


def _struct_element(struct_info: StructInfo, context: BindingContext) -> ET.Element:
    extra = {"module": struct_info.module} if struct_info.module else {}
    element = _element(
        "struct", struct_info.name, _script_name(context, struct_info.name), struct_info.documentation, **extra
    )
    for field in struct_info.fields:
        element.append(_element("field", field.name, field.name, field.documentation))
    return element


def _enum_element(enum_info: EnumInfo) -> ET.Element:
    extra = {"module": enum_info.module} if enum_info.module else {}
    element = _element("enum", enum_info.name, enum_info.script_name, enum_info.documentation, **extra)
    for value in sorted(enum_info.entries):
        entry = enum_info.entries[value]
        element.append(_element("enumentry", entry.name, entry.script_name, entry.documentation))
    return element
