"""Profile API endpoints."""

from fastapi import APIRouter

from community.dependencies import AuthenticatedSessionDep, ProfileServiceDep, SessionDep
from community.models.api import AvatarPreviewResponse, ProfileResponse, ProfileUpdateRequest
from community.services.avatars import build_avatar_url, random_avatar

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(session: AuthenticatedSessionDep, profile_service: ProfileServiceDep):
    """Get the signed-in user's profile."""
    user, profile = await profile_service.get_profile(session)
    return ProfileResponse.build(user, profile)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    session: AuthenticatedSessionDep,
    profile_service: ProfileServiceDep,
):
    """Update display name, biography and avatar."""
    user, profile = await profile_service.update_profile(
        session,
        full_name=request.full_name,
        biography=request.biography,
        avatar=request.avatar,
    )
    return ProfileResponse.build(user, profile)


@router.get("/profile/avatar/random", response_model=AvatarPreviewResponse)
async def random_avatar_preview(session: SessionDep):
    """Random avatar settings with a preview URL. Nothing is saved."""
    avatar = random_avatar()
    seed = session.user.id if session.user else "default"
    return AvatarPreviewResponse(avatar=avatar, avatar_url=build_avatar_url(seed, avatar))
