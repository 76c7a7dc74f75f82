"""Unit tests for the per-row validation gate."""

from datetime import date

import pytest

from app.exceptions import RowValidationError
from app.stories.importers.schemas import NormalizedRow
from app.stories.importers.validator import validate_row
from app.stories.schemas import CandidateStory


def _row(ambiguous_date=False, **fields):
    fields.setdefault("title", "A story")
    return NormalizedRow(row_number=1, story=CandidateStory(**fields), ambiguous_date=ambiguous_date)


def _reason(row):
    with pytest.raises(RowValidationError) as excinfo:
        validate_row(row)
    return excinfo.value.reason


class TestValidateRow:
    def test_accepts_minimal_story(self):
        validate_row(_row())

    def test_accepts_single_day_range(self):
        validate_row(_row(coverage_start_date=date(2024, 4, 1), coverage_end_date=date(2024, 4, 1)))

    def test_accepts_open_ended_range(self):
        validate_row(_row(coverage_end_date=date(2024, 4, 1)))

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_missing_title(self, title):
        assert _reason(_row(title=title)) == "missing title"

    def test_end_before_start(self):
        row = _row(coverage_start_date=date(2024, 4, 2), coverage_end_date=date(2024, 4, 1))
        assert _reason(row) == "invalid coverage range"

    def test_ambiguous_date_row(self):
        assert _reason(_row(ambiguous_date=True)) == "unparseable coverage date"

    def test_missing_title_reported_before_other_problems(self):
        row = _row(
            title="",
            coverage_start_date=date(2024, 4, 2),
            coverage_end_date=date(2024, 4, 1),
        )
        assert _reason(row) == "missing title"

    def test_title_too_long(self):
        assert _reason(_row(title="x" * 201)) == "title exceeds 200 characters"

    def test_description_too_long(self):
        assert _reason(_row(description="x" * 2001)) == "description exceeds 2000 characters"

    def test_question_too_long(self):
        row = _row(questions=["fine", "y" * 501])
        assert _reason(row) == "question 2 exceeds 500 characters"

    def test_question_reason_names_source_column(self):
        row = _row(questions=["fine", "y" * 501])
        row.question_numbers = [1, 3]
        assert _reason(row) == "question 3 exceeds 500 characters"
