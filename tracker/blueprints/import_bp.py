"""
Import Blueprint - spreadsheet upload of programs and projects.

Endpoints:
  POST /api/v1/import/excel      - Upload & import an .xlsx file (multipart field "file")
  GET  /api/v1/import/history    - Import ledger, newest first
  GET  /api/v1/import/template   - Download the example workbook
"""

import logging

from flask import Blueprint, current_app, g, jsonify, request, send_file

from tracker.auth import login_required
from tracker.config import XLSX_MIMETYPE
from tracker.services.bulk_import_service import BulkImportError, build_template, import_workbook
from tracker.services.import_ledger import list_import_history
from tracker.utils.errors import E, api_error

logger = logging.getLogger(__name__)

import_bp = Blueprint("import_bp", __name__, url_prefix="/api/v1/import")


# ═══════════════════════════════════════════════════════════════
# Upload
# ═══════════════════════════════════════════════════════════════
@import_bp.route("/excel", methods=["POST"])
@login_required
def import_excel():
    """Upload a spreadsheet and import its program/project rows."""
    file = request.files.get("file")
    if file is None or not file.filename:
        return api_error(E.VALIDATION_REQUIRED, "No file uploaded")

    allowed = current_app.config.get("IMPORT_ALLOWED_MIMETYPES", (XLSX_MIMETYPE,))
    if file.mimetype not in allowed:
        return api_error(E.UNSUPPORTED_MEDIA, "Only Excel files are allowed")

    try:
        result, record = import_workbook(file.stream, file.filename, g.current_user_id)
    except BulkImportError as e:
        return jsonify({"message": e.message}), e.status_code
    except Exception:
        logger.exception("Error importing Excel file: %s", file.filename)
        return jsonify({"message": "Failed to import Excel file"}), 500

    return jsonify({
        "message": "Import completed",
        "recordsImported": result.records_imported,
        "errors": result.errors or None,
        "importId": record.id,
    }), 200


# ═══════════════════════════════════════════════════════════════
# History
# ═══════════════════════════════════════════════════════════════
@import_bp.route("/history", methods=["GET"])
@login_required
def import_history():
    records = list_import_history(g.current_user_id)
    return jsonify([r.to_dict() for r in records]), 200


# ═══════════════════════════════════════════════════════════════
# Template Download
# ═══════════════════════════════════════════════════════════════
@import_bp.route("/template", methods=["GET"])
@login_required
def download_template():
    """Download the example import workbook."""
    return send_file(
        build_template(),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name="template_programs_projects.xlsx",
    )
