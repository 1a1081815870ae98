"""
Non-fatal diagnostics threaded through every pipeline stage.

A diagnostics sink is a plain caller-owned list; stages append to it and
never read it back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class GridErrorCode(str, Enum):
    """Canonical diagnostic codes."""

    OVERLAP_NOT_ALLOWED = "OVERLAP_NOT_ALLOWED"
    INVALID_TRANSFORMATION_PARAMS = "INVALID_TRANSFORMATION_PARAMS"
    NO_BOXES_PROCESSED = "NO_BOXES_PROCESSED"  # bulk verb moved nothing
    NO_SECTION_ID = "NO_SECTION_ID"
    BOX_SHAPE_MISSING_BP = "BOX_SHAPE_MISSING_BP"
    UNKNOWN_TRANSFORMATION = "UNKNOWN_TRANSFORMATION"
    EMPTY_GRID = "EMPTY_GRID"
    GRID_NORMALIZED_TO_POSITIVE_LINES = "GRID_NORMALIZED_TO_POSITIVE_LINES"
    MISSING_COORDINATES = "MISSING_COORDINATES"
    SECTION_SHAPES_MISSING_BP = "SECTION_SHAPES_MISSING_BP"
    UNKNOWN_NODE_ID = "UNKNOWN_NODE_ID"
    UNKNOWN_ANCHOR = "UNKNOWN_ANCHOR"
    BOX_SPAN_MISSING = "BOX_SPAN_MISSING"
    MISSING_BOX = "MISSING_BOX"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"


@dataclass(frozen=True)
class GridIssue:
    code: GridErrorCode
    message: str
    element_id: str | None = None
    details: Any = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.element_id is not None:
            out["elementId"] = self.element_id
        if self.details is not None:
            out["details"] = self.details
        return out


@dataclass(frozen=True)
class DiagnosticEntry:
    severity: Severity
    origin: str  # stage or verb name
    issue: GridIssue

    @property
    def code(self) -> GridErrorCode:
        return self.issue.code

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "origin": self.origin,
            "issue": self.issue.to_dict(),
        }


Diagnostics = list[DiagnosticEntry]


def make_diagnostic(
    severity: Severity,
    origin: str,
    code: GridErrorCode,
    message: str,
    element_id: str | None = None,
    details: Any = None,
) -> DiagnosticEntry:
    entry = DiagnosticEntry(severity, origin, GridIssue(code, message, element_id, details))
    level = logging.DEBUG if severity is Severity.INFO else logging.WARNING
    logger.log(level, "%s [%s] %s: %s", severity.value, origin, code.value, message)
    return entry


def make_error(
    origin: str,
    code: GridErrorCode,
    message: str,
    element_id: str | None = None,
    details: Any = None,
) -> DiagnosticEntry:
    return make_diagnostic(Severity.ERROR, origin, code, message, element_id, details)


def make_warning(
    origin: str,
    code: GridErrorCode,
    message: str,
    element_id: str | None = None,
    details: Any = None,
) -> DiagnosticEntry:
    return make_diagnostic(Severity.WARNING, origin, code, message, element_id, details)


def make_info(
    origin: str,
    code: GridErrorCode,
    message: str,
    element_id: str | None = None,
    details: Any = None,
) -> DiagnosticEntry:
    return make_diagnostic(Severity.INFO, origin, code, message, element_id, details)


def codes(diagnostics: Diagnostics) -> list[GridErrorCode]:
    """Codes of all entries, in recording order."""
    return [d.issue.code for d in diagnostics]
