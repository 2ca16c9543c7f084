"""
Row classification for spreadsheet imports.

Decides whether a decoded row describes a program, a project, or neither.

Rules (order matters):
  1. No non-empty "name" or no "budget"   → UNRECOGNIZED, blank (skipped silently)
  2. Has "category"                        → PROGRAM  (wins over "programId")
  3. Has "programId"                       → PROJECT
  4. Anything else                         → UNRECOGNIZED, reported as a row error

Rule 1 covers the empty separator rows that templates use between the
program block and the project block.
"""

from dataclasses import dataclass, field
from enum import Enum

from tracker.services.field_coercer import is_present

UNCLASSIFIED_REASON = "could not classify row"


class RowKind(str, Enum):
    PROGRAM = "program"
    PROJECT = "project"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ClassifiedRow:
    """A row tagged with its kind. ``blank`` is only meaningful for UNRECOGNIZED."""

    kind: RowKind
    fields: dict = field(default_factory=dict)
    blank: bool = False


def classify_row(row: dict) -> ClassifiedRow:
    """Classify one decoded row. Pure function of the row contents."""
    fields = dict(row or {})

    if not (is_present(fields.get("name")) and is_present(fields.get("budget"))):
        return ClassifiedRow(RowKind.UNRECOGNIZED, fields, blank=True)
    if is_present(fields.get("category")):
        return ClassifiedRow(RowKind.PROGRAM, fields)
    if is_present(fields.get("programId")):
        return ClassifiedRow(RowKind.PROJECT, fields)
    return ClassifiedRow(RowKind.UNRECOGNIZED, fields)
