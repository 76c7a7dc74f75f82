import csv
import re

import structlog

from app.stories.importers.dates import parse_flexible_date
from app.stories.importers.schemas import NormalizedRow, RawRow
from app.stories.models import MAX_QUESTIONS
from app.stories.schemas import CandidateStory

logger = structlog.get_logger()

TITLE_HEADERS = ["idea_title", "title", "story_title", "name"]
DESCRIPTION_HEADERS = ["idea_description", "enhanced_description", "description", "summary"]
START_DATE_HEADERS = ["coverage_start_date", "start_date", "date_start", "begin_date"]
END_DATE_HEADERS = ["coverage_end_date", "end_date", "date_end", "finish_date"]
TAG_HEADERS = ["tags", "auto_tags", "tag", "categories", "keywords"]
INTERVIEWEE_HEADERS = ["interviewees", "people_to_interview", "contacts", "sources"]

NUMBERED_INTERVIEWEE = re.compile(r"^interviewees?[\s_]*\d+$", re.IGNORECASE)

MAX_TAGS = 10
MAX_TAG_LENGTH = 50
MAX_INTERVIEWEES = 15


def _question_headers(number: int) -> list[str]:
    return [f"question_{number}", f"q{number}", f"question{number}"]


def split_multi_value(cell: str | None) -> list[str]:
    """Split a tags/interviewees cell into trimmed, non-empty sub-values.

    Sub-values follow CSV quoting, so ``"Smith, John",Jane`` yields two names.
    """
    if not cell or not cell.strip():
        return []
    flattened = re.sub(r"[\r\n]+", ",", cell)
    try:
        parts = next(csv.reader([flattened], skipinitialspace=True))
    except csv.Error:
        parts = flattened.split(",")
    cleaned = (" ".join(part.split()) for part in parts)
    return [part for part in cleaned if part]


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class RowNormalizer:
    """Maps RawRows onto CandidateStory using a header lookup built once per file."""

    def __init__(self, headers: list[str]) -> None:
        self._column_map = self._detect_columns(headers)
        self._numbered_interviewees = [
            h for h in headers if h and NUMBERED_INTERVIEWEE.match(h.strip())
        ]
        logger.debug(
            "csv_columns_detected",
            mapping=self._column_map,
            numbered_interviewees=self._numbered_interviewees,
        )

    @property
    def column_map(self) -> dict[str, list[str]]:
        return self._column_map

    def _detect_columns(self, headers: list[str]) -> dict[str, list[str]]:
        """Resolve each canonical field to the file's headers, in alias priority order."""
        by_name: dict[str, str] = {}
        for header in headers:
            key = header.strip().lower()
            if key and key not in by_name:
                by_name[key] = header

        fields: dict[str, list[str]] = {
            "title": TITLE_HEADERS,
            "description": DESCRIPTION_HEADERS,
            "coverage_start_date": START_DATE_HEADERS,
            "coverage_end_date": END_DATE_HEADERS,
            "tags": TAG_HEADERS,
            "interviewees": INTERVIEWEE_HEADERS,
        }
        for number in range(1, MAX_QUESTIONS + 1):
            fields[f"question_{number}"] = _question_headers(number)

        return {
            field: [by_name[alias] for alias in aliases if alias in by_name]
            for field, aliases in fields.items()
        }

    def _first_value(self, raw: RawRow, field: str) -> str:
        for header in self._column_map.get(field, []):
            value = raw.values.get(header, "").strip()
            if value:
                return value
        return ""

    def _all_values(self, raw: RawRow, field: str) -> list[str]:
        values = (raw.values.get(header, "").strip() for header in self._column_map.get(field, []))
        return [value for value in values if value]

    def normalize(self, raw: RawRow) -> NormalizedRow:
        title = self._first_value(raw, "title")
        description = self._first_value(raw, "description")

        questions: list[str] = []
        question_numbers: list[int] = []
        for number in range(1, MAX_QUESTIONS + 1):
            question = self._first_value(raw, f"question_{number}")
            if question:
                questions.append(question)
                question_numbers.append(number)

        tags = _dedupe(split_multi_value(self._first_value(raw, "tags")))

        # every interviewee column contributes, in alias order
        interviewees = [
            name
            for cell in self._all_values(raw, "interviewees")
            for name in split_multi_value(cell)
        ]
        for header in self._numbered_interviewees:
            value = " ".join(raw.values.get(header, "").split())
            if value:
                interviewees.append(value)

        warnings: list[str] = []
        unparsed: list[str] = []
        dates = {}
        for field, label in (("coverage_start_date", "start"), ("coverage_end_date", "end")):
            cell = self._first_value(raw, field)
            parsed = parse_flexible_date(cell)
            if cell and parsed is None:
                unparsed.append(field)
                warnings.append(f'Could not parse {label} date: "{cell}"')
            dates[field] = parsed

        if len(tags) > MAX_TAGS:
            warnings.append(f"Too many tags ({len(tags)}). Maximum recommended: {MAX_TAGS}")
        for tag in tags:
            if len(tag) > MAX_TAG_LENGTH:
                warnings.append(f'Tag "{tag}" is too long. Maximum: {MAX_TAG_LENGTH} characters')
        if len(interviewees) > MAX_INTERVIEWEES:
            warnings.append(
                f"Too many interviewees ({len(interviewees)}). "
                f"Maximum recommended: {MAX_INTERVIEWEES}"
            )

        story = CandidateStory(
            title=title,
            description=description,
            questions=questions,
            coverage_start_date=dates["coverage_start_date"],
            coverage_end_date=dates["coverage_end_date"],
            tags=tags,
            interviewees=interviewees,
        )

        # title plus an unreadable date and nothing else: flagged, not imported
        has_other_content = bool(
            description
            or questions
            or tags
            or interviewees
            or story.coverage_start_date
            or story.coverage_end_date
        )
        ambiguous = bool(title and unparsed and not has_other_content)

        return NormalizedRow(
            row_number=raw.row_number,
            story=story,
            question_numbers=question_numbers,
            warnings=warnings,
            unparsed_dates=unparsed,
            ambiguous_date=ambiguous,
        )
