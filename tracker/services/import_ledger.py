"""
Import ledger - append-only audit trail of spreadsheet upload attempts.

One ImportRecord is written per attempt: after the batch importer finishes
(status "success" or "partial") or after a batch-fatal failure (status
"error", nothing imported).
"""

import logging

from tracker.models import db
from tracker.models.import_record import IMPORT_STATUSES, ImportRecord
from tracker.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)


def record_import(
    filename: str,
    status: str,
    records_imported: int,
    errors: list[str] | None,
    owner_id: int,
) -> ImportRecord:
    """Append one ledger entry. An empty error list is stored as null."""
    if status not in IMPORT_STATUSES:
        raise ValueError(f"Unknown import status: {status!r}")

    record = ImportRecord(
        user_id=owner_id,
        filename=(filename or "upload.xlsx")[:255],
        status=status,
        records_imported=records_imported,
        errors=list(errors) if errors else None,
    )
    db.session.add(record)
    commit_or_raise("ImportRecord")
    logger.info(
        "Import recorded: id=%s file=%s status=%s imported=%d errors=%d",
        record.id, record.filename, status, records_imported, len(errors or []),
    )
    return record


def list_import_history(owner_id: int) -> list[ImportRecord]:
    """Return the owner's import attempts, newest first."""
    return (
        ImportRecord.query_for_owner(owner_id)
        .order_by(ImportRecord.created_at.desc(), ImportRecord.id.desc())
        .all()
    )
