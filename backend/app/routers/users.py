from fastapi import APIRouter, Depends

from app.core.auth import get_current_actor
from app.schemas.user import Actor, UserProfile
from app.services.seed import get_fixture_user

router = APIRouter()


@router.get(
    "/me",
    response_model=UserProfile,
    summary="Get current actor",
    responses={401: {"description": "Missing actor headers"}},
)
async def get_me(actor: Actor = Depends(get_current_actor)) -> UserProfile:
    """The calling actor, with profile details when it is a known demo user."""
    profile = get_fixture_user(actor.id)
    if profile is None or profile.role != actor.role:
        return UserProfile(id=actor.id, role=actor.role)
    return profile
