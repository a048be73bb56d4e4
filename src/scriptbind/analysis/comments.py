# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Documentation comment parsing and ``@copydoc`` resolution."""

from __future__ import annotations

import re

from scriptbind.diagnostics import Diagnostics
from scriptbind.model.comments import CommentEntry, CommentParam, CommentRecord
from scriptbind.model.context import BindingContext

# ###############
# Public Interface
# ###############


def parse_doc_comment(text: str | None) -> CommentEntry:
    """Parse a documentation block into a :class:`CommentEntry`.

    Accepts ``/** ... */`` blocks, ``///`` line comments or bare text. Blank
    lines separate paragraphs. ``@param name``, ``@return``/``@returns`` and
    ``@copydoc`` start new sections; ``@brief`` is dropped;
    ``@native ... @endnative`` spans are removed.

    Args:
        text: Raw comment text, or None.

    Returns:
        The parsed comment. Empty input yields an empty comment.
    """
    if not text:
        return CommentEntry()
    return _CommentParser(_strip_comment_markers(text)).parse()


def resolve_copydocs(context: BindingContext, diagnostics: Diagnostics) -> None:
    """Replace every ``@copydoc`` comment in *context* by the comment it references.

    Resolution is transitive: a reference to a comment that is itself a
    ``@copydoc`` resolves to the final target. A missing target produces a
    warning and clears the comment. Running this twice yields the same result.
    """
    _CopydocResolver(context, diagnostics).resolve_all()


def normalize_signature_text(text: str) -> str:
    """Collapse whitespace in a C++ type string so signatures compare textually."""
    text = " ".join(text.split())
    return re.sub(r"\s*([<>,*&()])\s*", r"\1", text)


# ################
# Implementation
# ################

_NATIVE_SPAN = re.compile(r"@native\b.*?@endnative\b", re.DOTALL)


def _strip_comment_markers(text: str) -> str:
    text = text.strip()
    if text.startswith("/**") or text.startswith("/*!"):
        text = text[3:]
    if text.endswith("*/"):
        text = text[:-2]
    lines: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        for prefix in ("///<", "///", "//!<", "//!", "*"):
            if line.startswith(prefix):
                line = line[len(prefix) :].strip()
                break
        lines.append(line)
    return _NATIVE_SPAN.sub("", "\n".join(lines))


class _CommentParser:
    """Line-driven parser splitting comment text into sections."""

    def __init__(self, text: str) -> None:
        self._lines = text.splitlines()
        self._entry = CommentEntry()
        self._target: list[str] = self._entry.brief
        self._paragraph: list[str] = []

    def parse(self) -> CommentEntry:
        for line in self._lines:
            if not line:
                self._flush()
                self._target = self._entry.brief
                continue
            if line.startswith("@"):
                command, _, rest = line.partition(" ")
                if self._handle_command(command, rest.strip()):
                    continue
            self._paragraph.append(line)
        self._flush()
        return self._entry

    def _handle_command(self, command: str, rest: str) -> bool:
        if command == "@brief":
            self._flush()
            self._target = self._entry.brief
            if rest:
                self._paragraph.append(rest)
            return True
        if command == "@copydoc":
            self._flush()
            self._entry.brief.append(f"@copydoc {rest}")
            self._target = self._entry.brief
            return True
        if command in ("@return", "@returns"):
            self._flush()
            self._target = self._entry.returns
            if rest:
                self._paragraph.append(rest)
            return True
        if command.startswith("@param"):
            self._flush()
            name, _, description = rest.partition(" ")
            param = CommentParam(name=name)
            self._entry.params.append(param)
            self._target = param.comment
            if description.strip():
                self._paragraph.append(description.strip())
            return True
        return False

    def _flush(self) -> None:
        if self._paragraph:
            self._target.append(" ".join(self._paragraph))
            self._paragraph = []


class _CopydocResolver:
    """Resolves copydoc references against the comment index of a context."""

    def __init__(self, context: BindingContext, diagnostics: Diagnostics) -> None:
        self._context = context
        self._index = context.comments
        self._diagnostics = diagnostics

    def resolve_all(self) -> None:
        for record in self._index.records:
            record.comment = self._resolve(record.comment, record.namespaces, frozenset())
            for overload in record.overloads:
                overload.comment = self._resolve(overload.comment, record.namespaces, frozenset())

        for _, class_info in self._context.iter_classes():
            namespaces = class_info.namespaces
            class_info.documentation = self._resolve(class_info.documentation, namespaces, frozenset())
            for method in [*class_info.ctors, *class_info.methods]:
                method.documentation = self._resolve(method.documentation, namespaces, frozenset(), class_info.name)
            for event in class_info.events:
                event.documentation = self._resolve(event.documentation, namespaces, frozenset(), class_info.name)
            for prop in class_info.properties:
                prop.documentation = self._resolve(prop.documentation, namespaces, frozenset(), class_info.name)

        for _, struct_info in self._context.iter_structs():
            namespaces = struct_info.namespaces
            struct_info.documentation = self._resolve(struct_info.documentation, namespaces, frozenset())
            for ctor in struct_info.ctors:
                ctor.documentation = self._resolve(ctor.documentation, namespaces, frozenset(), struct_info.name)
            for field in struct_info.fields:
                field.documentation = self._resolve(field.documentation, namespaces, frozenset(), struct_info.name)

        for _, enum_info in self._context.iter_enums():
            namespaces = enum_info.namespaces
            enum_info.documentation = self._resolve(enum_info.documentation, namespaces, frozenset())
            for entry in enum_info.entries.values():
                entry.documentation = self._resolve(entry.documentation, namespaces, frozenset(), enum_info.name)

    def _resolve(
        self,
        entry: CommentEntry,
        namespaces: list[str],
        seen: frozenset[str],
        owner: str | None = None,
    ) -> CommentEntry:
        target = entry.copydoc_target()
        if target is None:
            return entry
        found = None if target in seen else self._lookup(target, namespaces, owner)
        if found is None:
            self._diagnostics.warning(f'Cannot find identifier referenced by the @copydoc command: "{target}".')
            return CommentEntry()
        comment, target_namespaces = found
        return self._resolve(comment, target_namespaces, seen | {target}).model_copy(deep=True)

    def _lookup(self, text: str, namespaces: list[str], owner: str | None) -> tuple[CommentEntry, list[str]] | None:
        text = text.strip()
        params: list[str] | None = None
        name = text
        if "(" in text and text.endswith(")"):
            name, _, param_text = text[:-1].partition("(")
            name = name.strip()
            params = [normalize_signature_text(p) for p in _split_params(param_text)]

        parts = name.split("::")
        candidates: list[tuple[str, list[str]]] = []
        if len(parts) >= 2:
            candidates.append(("::".join(parts[-2:]), parts[:-2]))
        candidates.append((parts[-1], parts[:-1]))
        if len(parts) == 1 and owner is not None:
            candidates.append((f"{owner}::{parts[0]}", []))

        for key, copydoc_namespaces in candidates:
            record = self._index.find(key, [*namespaces, *copydoc_namespaces]) or self._index.find(
                key, copydoc_namespaces
            )
            if record is not None:
                comment = _select_comment(record, params)
                return (comment, record.namespaces) if comment is not None else None
        return None


def _split_params(text: str) -> list[str]:
    params: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in "<(":
            depth += 1
        elif ch in ">)":
            depth -= 1
        if ch == "," and depth == 0:
            params.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    last = "".join(current).strip()
    if last or params:
        params.append(last)
    return params


def _select_comment(record: CommentRecord, params: list[str] | None) -> CommentEntry | None:
    if params is not None:
        if not record.is_function:
            return None
        for overload in record.overloads:
            if [normalize_signature_text(p) for p in overload.param_types] == params:
                return overload.comment
        if not params and record.overloads:
            return record.overloads[0].comment
        return None
    if record.is_function:
        return record.overloads[0].comment if record.overloads else None
    return record.comment
