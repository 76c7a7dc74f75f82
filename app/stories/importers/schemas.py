from dataclasses import dataclass, field

from pydantic import BaseModel

from app.stories.models import ApprovalStatus
from app.stories.schemas import CandidateStory


@dataclass(frozen=True)
class RawRow:
    row_number: int
    values: dict[str, str]
    error: str | None = None


@dataclass
class NormalizedRow:
    row_number: int
    story: CandidateStory
    question_numbers: list[int] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    unparsed_dates: list[str] = field(default_factory=list)
    ambiguous_date: bool = False


@dataclass(frozen=True)
class Imported:
    row: int
    story_id: str
    title: str


@dataclass(frozen=True)
class Rejected:
    row: int
    title: str | None
    reason: str


ImportOutcome = Imported | Rejected


class ImportRowError(BaseModel):
    row: int
    title: str | None
    error: str


class ImportRowWarning(BaseModel):
    row: int
    title: str | None
    warning: str


class ImportReport(BaseModel):
    imported: int = 0
    total: int = 0
    errors: list[ImportRowError] = []
    warnings: list[ImportRowWarning] = []
    approval_status: ApprovalStatus

    def record(self, outcome: ImportOutcome) -> None:
        self.total += 1
        if isinstance(outcome, Imported):
            self.imported += 1
        else:
            self.errors.append(
                ImportRowError(row=outcome.row, title=outcome.title, error=outcome.reason)
            )

    def warn(self, row: int, title: str | None, message: str) -> None:
        self.warnings.append(ImportRowWarning(row=row, title=title, warning=message))

    @property
    def rejected(self) -> int:
        return len(self.errors)
