from app.exceptions import RowValidationError
from app.stories.importers.schemas import NormalizedRow

MISSING_TITLE = "missing title"
INVALID_COVERAGE_RANGE = "invalid coverage range"
UNPARSEABLE_COVERAGE_DATE = "unparseable coverage date"

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_QUESTION_LENGTH = 500


def validate_row(row: NormalizedRow) -> None:
    """Accept or reject one normalized row before it is persisted.

    Raises RowValidationError carrying a short reason. Passing does not mean
    the insert will succeed.
    """
    story = row.story

    if not story.title.strip():
        raise RowValidationError(MISSING_TITLE)
    if len(story.title) > MAX_TITLE_LENGTH:
        raise RowValidationError(f"title exceeds {MAX_TITLE_LENGTH} characters")

    if row.ambiguous_date:
        raise RowValidationError(UNPARSEABLE_COVERAGE_DATE)

    start, end = story.coverage_start_date, story.coverage_end_date
    if start is not None and end is not None and end < start:
        raise RowValidationError(INVALID_COVERAGE_RANGE)

    if len(story.description) > MAX_DESCRIPTION_LENGTH:
        raise RowValidationError(f"description exceeds {MAX_DESCRIPTION_LENGTH} characters")
    # numbers refer to the source column, not the position after blanks are dropped
    numbers = row.question_numbers or range(1, len(story.questions) + 1)
    for number, question in zip(numbers, story.questions):
        if len(question) > MAX_QUESTION_LENGTH:
            raise RowValidationError(
                f"question {number} exceeds {MAX_QUESTION_LENGTH} characters"
            )
