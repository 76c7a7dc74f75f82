from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.stories.models import MAX_QUESTIONS, ApprovalStatus


class CandidateStory(BaseModel):
    """A normalized story that has not been persisted yet."""

    title: str
    description: str = ""
    questions: list[str] = Field(default_factory=list, max_length=MAX_QUESTIONS)
    coverage_start_date: date | None = None
    coverage_end_date: date | None = None
    tags: list[str] = Field(default_factory=list)
    interviewees: list[str] = Field(default_factory=list)


class StoryCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    questions: list[str] = Field(default_factory=list, max_length=MAX_QUESTIONS)
    coverage_start_date: date | None = None
    coverage_end_date: date | None = None
    tags: list[str] = Field(default_factory=list)
    interviewees: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_coverage_range(self) -> "StoryCreate":
        start, end = self.coverage_start_date, self.coverage_end_date
        if start is not None and end is not None and end < start:
            raise ValueError("coverage_end_date must not be before coverage_start_date")
        return self


class StoryResponse(BaseModel):
    id: str
    title: str
    description: str
    questions: list[str]
    coverage_start_date: date | None
    coverage_end_date: date | None
    tags: list[str]
    interviewees: list[str]
    uploaded_by: str
    approval_status: ApprovalStatus
    approved_by: str | None
    created_at: str
    updated_at: str


class StoryFilter(BaseModel):
    approval_status: ApprovalStatus | None = None
    tag: str | None = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)
