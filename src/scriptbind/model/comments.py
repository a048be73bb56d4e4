# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Documentation comment records and the comment index."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class CommentParam(BaseModel):
    name: str
    comment: list[str] = _Field(default_factory=list)


class CommentEntry(BaseModel):
    """A parsed documentation block.

    Attributes:
        brief: Paragraphs of the main description. A paragraph starting with
            ``@copydoc`` marks a cross-reference still to be resolved.
        params: Per-parameter paragraphs.
        returns: Paragraphs of the return value description.
    """

    brief: list[str] = _Field(default_factory=list)
    params: list[CommentParam] = _Field(default_factory=list)
    returns: list[str] = _Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.brief and not self.params and not self.returns

    def copydoc_target(self) -> str | None:
        """Return the argument of a leading ``@copydoc`` paragraph, if any."""
        for paragraph in self.brief:
            if paragraph.startswith("@copydoc"):
                _, _, argument = paragraph.partition(" ")
                return argument.strip()
        return None


class CommentOverload(BaseModel):
    param_types: list[str] = _Field(default_factory=list)
    comment: CommentEntry = _Field(default_factory=CommentEntry)


class CommentRecord(BaseModel):
    """One named comment in the index; functions collect one overload per signature."""

    name: str
    full_name: str
    namespaces: list[str] = _Field(default_factory=list)
    is_function: bool = False
    comment: CommentEntry = _Field(default_factory=CommentEntry)
    overloads: list[CommentOverload] = _Field(default_factory=list)


class CommentIndex(BaseModel):
    """Flat list of comment records with name indices into it."""

    records: list[CommentRecord] = _Field(default_factory=list)
    full_lookup: dict[str, int] = _Field(default_factory=dict)
    simple_lookup: dict[str, list[int]] = _Field(default_factory=dict)

    def add(
        self,
        name: str,
        namespaces: list[str],
        comment: CommentEntry,
        *,
        param_types: list[str] | None = None,
    ) -> None:
        """Register *comment* under *name* within *namespaces*.

        Passing ``param_types`` registers a function overload. Repeated
        registrations of the same function accumulate overloads; a repeated
        non-function registration is ignored.
        """
        full_name = "::".join([*namespaces, name])
        index = self.full_lookup.get(full_name)
        if index is None:
            record = CommentRecord(
                name=name,
                full_name=full_name,
                namespaces=list(namespaces),
                is_function=param_types is not None,
                comment=comment if param_types is None else CommentEntry(),
            )
            index = len(self.records)
            self.records.append(record)
            self.full_lookup[full_name] = index
            self.simple_lookup.setdefault(name, []).append(index)

        record = self.records[index]
        if param_types is not None and record.is_function:
            record.overloads.append(CommentOverload(param_types=list(param_types), comment=comment))

    def find(self, name: str, namespaces: list[str]) -> CommentRecord | None:
        """Return the record named *name* whose namespaces equal *namespaces*."""
        for index in self.simple_lookup.get(name, []):
            record = self.records[index]
            if record.namespaces == namespaces:
                return record
        return None
