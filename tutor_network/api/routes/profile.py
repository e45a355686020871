"""Profile Routes — read and edit the caller's profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import get_current_user
from tutor_network.core.domain_types import UserType
from tutor_network.infrastructure.database import get_db
from tutor_network.models.user import User
from tutor_network.schemas.auth import UserResponse
from tutor_network.schemas.profile import ProfileResponse, ProfileUpdate
from tutor_network.services import profiles

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


async def _profile_response(db: AsyncSession, user: User) -> ProfileResponse:
    subtopics = []
    if user.user_type == UserType.TUTOR.value:
        subtopics = await profiles.taught_subtopics(db, user.id)
    return ProfileResponse(
        **UserResponse.model_validate(user).model_dump(),
        subtopics=subtopics,
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    return await _profile_response(db, user)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await profiles.update_profile(db, user, body)
    return await _profile_response(db, user)
