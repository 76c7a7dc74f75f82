from fastapi import APIRouter, Query, Response, UploadFile

from app.dependencies import AdminUser, ImportServiceDep, StoryServiceDep, User
from app.stories.importers.schemas import ImportReport
from app.stories.importers.template import render_template
from app.stories.models import ApprovalStatus
from app.stories.schemas import StoryCreate, StoryFilter, StoryResponse

router = APIRouter()


@router.post("/", status_code=201, response_model=StoryResponse)
async def create_story(
    data: StoryCreate,
    service: StoryServiceDep,
    user: User,
) -> StoryResponse:
    return await service.create(data, user)


@router.get("/", response_model=list[StoryResponse])
async def list_stories(
    service: StoryServiceDep,
    _user: User,
    approval_status: ApprovalStatus | None = None,
    tag: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[StoryResponse]:
    filters = StoryFilter(approval_status=approval_status, tag=tag, limit=limit, offset=offset)
    return await service.list_stories(filters)


@router.post("/import/csv", response_model=ImportReport)
async def import_csv(
    file: UploadFile,
    service: ImportServiceDep,
    user: User,
) -> ImportReport:
    content = await file.read()
    return await service.import_csv(content, file.filename or "upload.csv", user)


@router.get("/import/template")
async def download_template(_user: User) -> Response:
    return Response(
        content=render_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="story_import_template.csv"'},
    )


@router.get("/{story_id}", response_model=StoryResponse)
async def get_story(
    story_id: str,
    service: StoryServiceDep,
    _user: User,
) -> StoryResponse:
    return await service.get_by_id(story_id)


@router.post("/{story_id}/approve", response_model=StoryResponse)
async def approve_story(
    story_id: str,
    service: StoryServiceDep,
    admin: AdminUser,
) -> StoryResponse:
    return await service.review(story_id, ApprovalStatus.approved, admin)


@router.post("/{story_id}/reject", response_model=StoryResponse)
async def reject_story(
    story_id: str,
    service: StoryServiceDep,
    admin: AdminUser,
) -> StoryResponse:
    return await service.review(story_id, ApprovalStatus.rejected, admin)
