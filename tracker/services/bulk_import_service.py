"""
Bulk Import Service - spreadsheet import of programs and projects.

Pipeline: decode workbook → classify each row → coerce fields → persist →
write one import ledger entry.

Features:
  - Decode the first worksheet of an .xlsx upload (header row → dict rows)
  - Per-row isolation: a bad row becomes "Row {n}: {reason}" and the batch
    moves on to the next row
  - Rows are processed strictly in file order, so a project row may
    reference a program created by an earlier row of the same file
  - Downloadable .xlsx template
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy.exc import SQLAlchemyError

from tracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from tracker.models import db
from tracker.models.import_record import ImportRecord
from tracker.services import program_service, project_service
from tracker.services.field_coercer import coerce_program, coerce_project, is_present
from tracker.services.import_ledger import record_import
from tracker.services.row_classifier import UNCLASSIFIED_REASON, RowKind, classify_row

logger = logging.getLogger(__name__)


class BulkImportError(Exception):
    """Batch-fatal import error (nothing was processed row by row)."""
    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ═══════════════════════════════════════════════════════════════
# Template
# ═══════════════════════════════════════════════════════════════

TEMPLATE_HEADER = [
    "name", "description", "category", "programId", "status", "priority",
    "budget", "progress", "startDate", "endDate", "deadline",
]
TEMPLATE_EXAMPLE = [
    ["Programme Exemple", "Description du programme", "innovation", None, "active", None,
     100000, None, "2024-01-01", "2024-12-31", None],
    [None] * len(TEMPLATE_HEADER),
    ["Projet Exemple", "Description du projet", None, 1, "in-progress", "high",
     50000, 50, "2024-01-01", None, "2024-06-30"],
]

HEADER_FILL = PatternFill(start_color="354A5F", end_color="354A5F", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)


def build_template() -> io.BytesIO:
    """Generate the example import workbook. Returns a BytesIO buffer ready for send_file."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Import"

    ws.append(TEMPLATE_HEADER)
    for col, _ in enumerate(TEMPLATE_HEADER, start=1):
        cell = ws.cell(row=1, column=col)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        ws.column_dimensions[get_column_letter(col)].width = 18

    for row in TEMPLATE_EXAMPLE:
        ws.append(row)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


# ═══════════════════════════════════════════════════════════════
# Workbook Decoding
# ═══════════════════════════════════════════════════════════════

def read_rows(stream) -> list[dict]:
    """
    Decode the first worksheet into a list of row dicts.

    The first row is the header. Empty cells are omitted from each row dict,
    and blank rows are kept as empty dicts so positions match the sheet.
    """
    if isinstance(stream, (bytes, bytearray)):
        stream = io.BytesIO(stream)

    try:
        wb = load_workbook(stream, read_only=True, data_only=True)
    except Exception as exc:
        raise BulkImportError(f"Could not read spreadsheet: {exc}", 500) from exc

    try:
        rows = _sheet_rows(wb)
    except BulkImportError:
        raise
    except Exception as exc:
        raise BulkImportError(f"Could not read spreadsheet: {exc}", 500) from exc
    finally:
        wb.close()

    # Trailing blank rows carry no information
    while rows and not rows[-1]:
        rows.pop()
    return rows


def _sheet_rows(wb) -> list[dict]:
    """Map every row after the header to a dict.

    In read-only mode the worksheet XML is parsed here, not in load_workbook,
    so a damaged sheet fails during this iteration.
    """
    if not wb.worksheets:
        raise BulkImportError("Spreadsheet has no worksheets", 500)

    rows_iter = wb.worksheets[0].iter_rows(values_only=True)
    header_row = next(rows_iter, None)
    if header_row is None:
        return []
    header = [
        str(cell).strip() if is_present(cell) else None
        for cell in header_row
    ]

    rows = []
    for values in rows_iter:
        row = {}
        for key, value in zip(header, values):
            if key and is_present(value):
                row[key] = value
        rows.append(row)
    return rows


# ═══════════════════════════════════════════════════════════════
# Batch Import
# ═══════════════════════════════════════════════════════════════

@dataclass
class ImportResult:
    records_imported: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "success" if not self.errors else "partial"


_ROW_HANDLERS = {
    RowKind.PROGRAM: (coerce_program, program_service.create_program),
    RowKind.PROJECT: (coerce_project, project_service.create_project),
}


def _coerce_and_persist(kind: RowKind, fields: dict, owner_id: int):
    """Return (record, None) or (None, reason). Never raises."""
    coerce, create = _ROW_HANDLERS[kind]
    try:
        data, err = coerce(fields)
        if err:
            return None, err
        return create(data, owner_id), None
    except (NotFoundError, ValidationError, ConflictError) as exc:
        db.session.rollback()
        return None, str(exc)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database error while importing %s row", kind.value)
        return None, "database error"
    except Exception:
        db.session.rollback()
        logger.exception("Unexpected error while importing %s row", kind.value)
        return None, "unexpected error"


def import_rows(rows: list[dict], owner_id: int) -> ImportResult:
    """
    Run classify → coerce → persist over *rows* in order.

    Positions in error messages are 1-based row indexes of *rows*.
    """
    result = ImportResult()

    for position, row in enumerate(rows, start=1):
        classified = classify_row(row)

        if classified.kind is RowKind.UNRECOGNIZED:
            if not classified.blank:
                result.errors.append(f"Row {position}: {UNCLASSIFIED_REASON}")
            continue

        record, reason = _coerce_and_persist(classified.kind, classified.fields, owner_id)
        if reason:
            logger.debug("Import row %d rejected: %s", position, reason)
            result.errors.append(f"Row {position}: {reason}")
            continue
        result.records_imported += 1

    logger.info(
        "Batch import finished: owner=%s rows=%d imported=%d errors=%d",
        owner_id, len(rows), result.records_imported, len(result.errors),
    )
    return result


def import_workbook(stream, filename: str, owner_id: int) -> tuple[ImportResult, ImportRecord]:
    """
    Full pipeline: decode → import → ledger.

    A workbook that cannot be decoded still gets a ledger entry with status
    "error", then BulkImportError is raised for the HTTP layer.
    """
    try:
        rows = read_rows(stream)
    except BulkImportError as exc:
        logger.warning("Spreadsheet decode failed: file=%s owner=%s: %s", filename, owner_id, exc.message)
        record_import(filename, "error", 0, [exc.message], owner_id)
        raise

    result = import_rows(rows, owner_id)
    record = record_import(filename, result.status, result.records_imported, result.errors, owner_id)
    return result, record
