# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Warnings and errors reported while collecting and emitting bindings.

None of the analysis passes abort on a bad declaration. They record a
diagnostic, skip the offending declaration and continue.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field

from scriptbind.logging import get_logger

_LOGGER = get_logger("diagnostics")

# ###############
# Public Interface
# ###############


class Severity(enum.Enum):
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class Diagnostic:
    """A single warning or error.

    Attributes:
        severity: Whether this is a warning or an error.
        message: Human-readable description naming the declaration.
    """

    severity: Severity
    message: str

    def format(self) -> str:
        return f"{self.severity.value}: {self.message}"


@dataclass
class Diagnostics:
    """Ordered collection of diagnostics produced during one run."""

    items: list[Diagnostic] = field(default_factory=list)

    def warning(self, message: str) -> None:
        _LOGGER.debug("warning: %s", message)
        self.items.append(Diagnostic(Severity.WARNING, message))

    def error(self, message: str) -> None:
        _LOGGER.debug("error: %s", message)
        self.items.append(Diagnostic(Severity.ERROR, message))

    @property
    def warnings(self) -> list[Diagnostic]:
        return [item for item in self.items if item.severity is Severity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [item for item in self.items if item.severity is Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return any(item.severity is Severity.ERROR for item in self.items)

    def messages(self) -> list[str]:
        """Return the bare messages in report order."""
        return [item.message for item in self.items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
