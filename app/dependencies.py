from typing import Annotated

from fastapi import Depends

from app.auth import CurrentUser, get_current_user, require_admin
from app.database import get_db
from app.stories.importers.service import ImportService
from app.stories.repository import StoryRepository
from app.stories.service import StoryService

User = Annotated[CurrentUser, Depends(get_current_user)]
AdminUser = Annotated[CurrentUser, Depends(require_admin)]


def get_story_repo() -> StoryRepository:
    return StoryRepository(get_db())


def get_story_service() -> StoryService:
    return StoryService(get_story_repo())


def get_import_service() -> ImportService:
    return ImportService(get_story_repo())


StoryServiceDep = Annotated[StoryService, Depends(get_story_service)]
ImportServiceDep = Annotated[ImportService, Depends(get_import_service)]
