from datetime import date

import structlog

from app.auth import CurrentUser
from app.exceptions import ConflictError, NotFoundError
from app.stories.models import MAX_QUESTIONS, ApprovalStatus
from app.stories.repository import StoryRepository
from app.stories.schemas import CandidateStory, StoryCreate, StoryFilter, StoryResponse

logger = structlog.get_logger()


class StoryService:
    def __init__(self, repo: StoryRepository) -> None:
        self._repo = repo

    async def create(self, data: StoryCreate, user: CurrentUser) -> StoryResponse:
        """Submit a single story. Always enters review, whatever the submitter's role."""
        story = CandidateStory(
            title=data.title.strip(),
            description=data.description.strip(),
            questions=[q.strip() for q in data.questions if q.strip()],
            coverage_start_date=data.coverage_start_date,
            coverage_end_date=data.coverage_end_date,
            tags=list(dict.fromkeys(t.strip() for t in data.tags if t.strip())),
            interviewees=[p.strip() for p in data.interviewees if p.strip()],
        )
        story_id = await self._repo.insert(story, ApprovalStatus.pending, user.id)

        row = await self._repo.get_by_id(story_id)
        if row is None:
            raise NotFoundError("Story", story_id)

        logger.info("story_submitted", story_id=story_id, user_id=user.id)
        return self._to_response(row)

    async def get_by_id(self, story_id: str) -> StoryResponse:
        row = await self._repo.get_by_id(story_id)
        if row is None:
            raise NotFoundError("Story", story_id)
        return self._to_response(row)

    async def list_stories(self, filters: StoryFilter) -> list[StoryResponse]:
        rows = await self._repo.list_filtered(filters)
        return [self._to_response(row) for row in rows]

    async def review(
        self, story_id: str, status: ApprovalStatus, reviewer: CurrentUser
    ) -> StoryResponse:
        existing = await self._repo.get_by_id(story_id)
        if existing is None:
            raise NotFoundError("Story", story_id)
        if existing["approval_status"] == status:
            raise ConflictError(f"Story '{story_id}' is already {status}")

        await self._repo.set_approval_status(story_id, status, reviewer.id)
        logger.info(
            "story_reviewed", story_id=story_id, status=status, reviewer_id=reviewer.id
        )
        return await self.get_by_id(story_id)

    def _to_response(self, row: dict) -> StoryResponse:
        questions = [row[f"question_{n}"] for n in range(1, MAX_QUESTIONS + 1)]
        return StoryResponse(
            id=row["id"],
            title=row["idea_title"],
            description=row["idea_description"],
            questions=[q for q in questions if q],
            coverage_start_date=_parse_stored_date(row["coverage_start_date"]),
            coverage_end_date=_parse_stored_date(row["coverage_end_date"]),
            tags=row["tags"],
            interviewees=row["interviewees"],
            uploaded_by=row["uploaded_by"],
            approval_status=row["approval_status"],
            approved_by=row["approved_by"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


def _parse_stored_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None
