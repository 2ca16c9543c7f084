"""
Tests for tracker/services/row_classifier.py

Covers:
    - Blank rows (missing name or budget) are skipped silently
    - category wins over programId
    - programId alone → project
    - name + budget with neither → unrecognized, reported
    - Classification is a pure function of the row
"""

import pytest

from tracker.services.row_classifier import ClassifiedRow, RowKind, classify_row


class TestBlankRows:
    @pytest.mark.parametrize("row", [
        {},
        {"name": "", "budget": ""},
        {"name": "   ", "budget": 100},
        {"name": "Orphan"},
        {"budget": 500, "category": "digital"},
        {"name": None, "budget": None, "programId": 3},
    ])
    def test_missing_name_or_budget_is_blank(self, row):
        result = classify_row(row)
        assert result.kind is RowKind.UNRECOGNIZED
        assert result.blank is True

    def test_none_row_is_blank(self):
        assert classify_row(None).blank is True


class TestProgramRows:
    def test_category_means_program(self):
        result = classify_row({"name": "P1", "budget": "1000", "category": "innovation"})
        assert result.kind is RowKind.PROGRAM
        assert result.blank is False

    def test_category_wins_over_program_id(self):
        result = classify_row({
            "name": "Both", "budget": 10, "category": "digital", "programId": 7,
        })
        assert result.kind is RowKind.PROGRAM

    def test_invalid_category_value_still_classifies_as_program(self):
        # Enum validation belongs to the coercer
        result = classify_row({"name": "P", "budget": 1, "category": "nope"})
        assert result.kind is RowKind.PROGRAM


class TestProjectRows:
    def test_program_id_means_project(self):
        result = classify_row({"name": "Task1", "budget": "500", "programId": "1"})
        assert result.kind is RowKind.PROJECT

    def test_blank_category_does_not_count(self):
        result = classify_row({"name": "Task1", "budget": 5, "category": "  ", "programId": 1})
        assert result.kind is RowKind.PROJECT


class TestUnrecognizedRows:
    def test_name_and_budget_only(self):
        result = classify_row({"name": "Mystery", "budget": 42})
        assert result.kind is RowKind.UNRECOGNIZED
        assert result.blank is False

    def test_zero_budget_is_present(self):
        result = classify_row({"name": "Zero", "budget": 0})
        assert result.blank is False


def test_classification_is_pure():
    row = {"name": "P1", "budget": "1000", "category": "innovation"}
    first = classify_row(row)
    second = classify_row(row)
    assert first == second
    assert isinstance(first, ClassifiedRow)
    assert row == {"name": "P1", "budget": "1000", "category": "innovation"}


def test_fields_are_carried_through():
    row = {"name": "Task1", "budget": 500, "programId": 1, "deadline": "2024-02-01"}
    assert classify_row(row).fields == row
