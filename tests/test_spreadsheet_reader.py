"""
Tests for workbook decoding and the downloadable template.
"""

import io
from datetime import datetime

import pytest
from openpyxl import Workbook, load_workbook

from tracker.services.bulk_import_service import (
    TEMPLATE_HEADER,
    BulkImportError,
    build_template,
    import_rows,
    read_rows,
)


def _xlsx(rows, second_sheet=None):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    if second_sheet is not None:
        other = wb.create_sheet("Other")
        for row in second_sheet:
            other.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


class TestReadRows:
    def test_header_maps_cells(self):
        rows = read_rows(_xlsx([
            ["name", "category", "budget"],
            ["P1", "innovation", 1000],
        ]))
        assert rows == [{"name": "P1", "category": "innovation", "budget": 1000}]

    def test_empty_cells_omitted(self):
        rows = read_rows(_xlsx([
            ["name", "programId", "category", "budget"],
            ["Task1", 1, None, 500],
        ]))
        assert rows == [{"name": "Task1", "programId": 1, "budget": 500}]

    def test_header_whitespace_stripped_and_blank_header_ignored(self):
        rows = read_rows(_xlsx([
            [" name ", None, "budget"],
            ["P1", "ignored", 3],
        ]))
        assert rows == [{"name": "P1", "budget": 3}]

    def test_blank_rows_kept_trailing_trimmed(self):
        rows = read_rows(_xlsx([
            ["name", "budget"],
            ["A", 1],
            [None, None],
            ["B", 2],
            [None, None],
            [None, None],
        ]))
        assert rows == [{"name": "A", "budget": 1}, {}, {"name": "B", "budget": 2}]

    def test_date_cells_come_back_as_datetimes(self):
        rows = read_rows(_xlsx([
            ["name", "startDate"],
            ["P1", datetime(2024, 1, 1)],
        ]))
        assert rows[0]["startDate"] == datetime(2024, 1, 1)

    def test_only_first_sheet_is_read(self):
        rows = read_rows(_xlsx(
            [["name", "budget"], ["First", 1]],
            second_sheet=[["name", "budget"], ["Second", 2]],
        ))
        assert rows == [{"name": "First", "budget": 1}]

    def test_header_only(self):
        assert read_rows(_xlsx([["name", "budget"]])) == []

    def test_accepts_raw_bytes(self):
        content = _xlsx([["name", "budget"], ["P1", 1]]).getvalue()
        assert read_rows(content) == [{"name": "P1", "budget": 1}]

    def test_unreadable_input(self):
        with pytest.raises(BulkImportError) as exc_info:
            read_rows(io.BytesIO(b"name,budget\nP1,1\n"))
        assert exc_info.value.status_code == 500
        assert exc_info.value.message.startswith("Could not read spreadsheet")


class TestTemplate:
    def test_template_layout(self):
        wb = load_workbook(build_template())
        ws = wb.active
        header = [c.value for c in ws[1]]
        assert header == TEMPLATE_HEADER
        assert ws.cell(row=1, column=1).font.bold is True

    def test_template_rows_decode(self):
        rows = read_rows(build_template())
        assert len(rows) == 3
        assert rows[0]["category"] == "innovation"
        assert rows[1] == {}
        assert rows[2]["programId"] == 1

    def test_template_imports_cleanly(self, user):
        result = import_rows(read_rows(build_template()), user.id)
        assert result.records_imported == 2
        assert result.errors == []
