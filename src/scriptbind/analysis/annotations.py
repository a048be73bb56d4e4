# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Decoding of ``se,...`` export annotations.

An annotation is a comma-separated list whose first entry is the export marker
``se``. Every following entry is a ``key:value`` pair. Unknown keys and values
produce a warning and are otherwise ignored; decoding never fails.
"""

from __future__ import annotations

from scriptbind.diagnostics import Diagnostics
from scriptbind.model.entities import ExportDirective, ExportFlags, StyleInfo, Visibility

# ###############
# Public Interface
# ###############

EXPORT_MARKER = "se"


def parse_export_annotation(
    text: str | None,
    source_name: str,
    diagnostics: Diagnostics,
) -> ExportDirective | None:
    """Decode an annotation attached to the declaration *source_name*.

    Args:
        text: Raw annotation text, e.g. ``se,n:Mesh,f:Mesh,pr:getter``.
        source_name: Source name of the annotated declaration; used as the
            default export name and file group and in diagnostics.
        diagnostics: Collector for unknown-key and unknown-value warnings.

    Returns:
        The export directive, or None if the annotation is missing or does not
        start with the export marker.
    """
    if not text:
        return None
    entries = split_annotation(text)
    if not entries or entries[0].strip() != EXPORT_MARKER:
        return None

    directive = ExportDirective(source_name=source_name, export_name=source_name, file_group=source_name)
    decoder = _EntryDecoder(directive, source_name, diagnostics)
    for entry in entries[1:]:
        entry = entry.strip()
        if not entry:
            continue
        key, separator, value = entry.partition(":")
        if not separator:
            diagnostics.warning(f'Unrecognized annotation attribute option: "{key}" for type "{source_name}".')
            continue
        decoder.apply(key.strip(), value.strip())
    return directive


def split_annotation(text: str) -> list[str]:
    """Split on commas that are not nested inside ``[...]``."""
    entries: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "[":
            depth += 1
        elif ch == "]" and depth > 0:
            depth -= 1
        if ch == "," and depth == 0:
            entries.append("".join(current))
            current = []
        else:
            current.append(ch)
    entries.append("".join(current))
    return entries


# ################
# Implementation
# ################

_VISIBILITIES: dict[str, Visibility] = {
    "public": Visibility.PUBLIC,
    "internal": Visibility.INTERNAL,
    "private": Visibility.PRIVATE,
}

_BOOLEAN_FLAGS: dict[str, ExportFlags] = {
    "pl": ExportFlags.PLAIN,
    "ed": ExportFlags.EDITOR,
    "ex": ExportFlags.EXCLUDE,
    "in": ExportFlags.INTEROP_ONLY,
    "cb": ExportFlags.CALLBACK,
}

_BOOLEAN_STYLES: dict[str, str] = {
    "slider": "slider",
    "layerMask": "layer_mask",
    "hide": "hide",
    "show": "show",
    "inline": "inline",
    "notNull": "not_null",
    "passByCopy": "pass_by_copy",
    "applyOnDirty": "apply_on_dirty",
    "asQuaternion": "as_quaternion",
    "loadOnAssign": "load_on_assign",
    "hdr": "hdr",
}


class _EntryDecoder:
    """Applies decoded ``key:value`` entries to a directive."""

    def __init__(self, directive: ExportDirective, source_name: str, diagnostics: Diagnostics) -> None:
        self._directive = directive
        self._source_name = source_name
        self._diagnostics = diagnostics

    def apply(self, key: str, value: str) -> None:
        directive = self._directive
        if key == "n":
            directive.export_name = value
        elif key == "f":
            directive.file_group = value
        elif key == "v":
            visibility = _VISIBILITIES.get(value)
            if visibility is None:
                self._unrecognized_value(key, value)
            else:
                directive.visibility = visibility
        elif key == "pr":
            if value == "getter":
                directive.flags |= ExportFlags.PROPERTY_GETTER
            elif value == "setter":
                directive.flags |= ExportFlags.PROPERTY_SETTER
            else:
                self._unrecognized_value(key, value)
        elif key == "e":
            directive.flags |= ExportFlags.EXTERNAL
            directive.external_class = value
        elif key == "ec":
            directive.flags |= ExportFlags.EXTERNAL | ExportFlags.EXTERNAL_CONSTRUCTOR
            directive.external_class = value
        elif key == "m":
            directive.module = value
        elif key in _BOOLEAN_FLAGS:
            enabled = self._parse_bool(key, value)
            if enabled:
                directive.flags |= _BOOLEAN_FLAGS[key]
        else:
            self._apply_style(key, value)

    # ------------------------------------------------------------------
    # Style keys
    # ------------------------------------------------------------------

    def _apply_style(self, key: str, value: str) -> None:
        style: StyleInfo = self._directive.style
        if key in _BOOLEAN_STYLES:
            enabled = self._parse_bool(key, value)
            if enabled is not None:
                setattr(style, _BOOLEAN_STYLES[key], enabled)
        elif key == "range":
            bounds = value.strip("[]").replace("|", ",").split(",")
            if len(bounds) != 2 or not all(bound.strip() for bound in bounds):
                self._unrecognized_value(key, value)
                return
            style.range_min = bounds[0].strip()
            style.range_max = bounds[1].strip()
        elif key == "step":
            style.step = value
        elif key == "order":
            try:
                style.order = int(value)
            except ValueError:
                self._unrecognized_value(key, value)
        elif key == "category":
            style.category = value
        else:
            self._diagnostics.warning(
                f'Unrecognized annotation attribute option: "{key}" for type "{self._source_name}".'
            )

    def _parse_bool(self, key: str, value: str) -> bool | None:
        if value == "true":
            return True
        if value == "false":
            return False
        self._unrecognized_value(key, value)
        return None

    def _unrecognized_value(self, key: str, value: str) -> None:
        self._diagnostics.warning(
            f'Unrecognized value for annotation attribute "{key}": "{value}" on type "{self._source_name}".'
        )
