from fastapi import APIRouter, Depends

from app.api.deps import get_follow_service, get_profile_service
from app.schemas.social import (
    FollowRequest,
    FollowResponse,
    Profile,
    SaveProfileRequest,
    SuccessResponse,
)
from app.services.follow_service import FollowService
from app.services.profile_service import ProfileService

router = APIRouter(tags=["profiles"])


@router.get("/get-profile/{wallet}", response_model=Profile)
def get_profile(wallet: str, profiles: ProfileService = Depends(get_profile_service)) -> Profile:
    return Profile.model_validate(profiles.get_profile(wallet))


@router.post("/save-profile", response_model=SuccessResponse)
def save_profile(
    request: SaveProfileRequest, profiles: ProfileService = Depends(get_profile_service)
) -> SuccessResponse:
    profiles.save_profile(request.wallet, request.data)
    return SuccessResponse()


@router.post("/follow", response_model=FollowResponse)
def follow(request: FollowRequest, follows: FollowService = Depends(get_follow_service)) -> FollowResponse:
    """
    Toggle a follow between two wallets.
    """
    is_following, followers_count = follows.toggle_follow(request.follower, request.target)
    return FollowResponse(is_following=is_following, followers_count=followers_count)
