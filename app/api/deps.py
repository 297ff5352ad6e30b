from fastapi import Request

from app.services.follow_service import FollowService
from app.services.post_service import PostService
from app.services.profile_service import ProfileService
from app.services.upload_service import UploadService


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profiles


def get_post_service(request: Request) -> PostService:
    return request.app.state.posts


def get_follow_service(request: Request) -> FollowService:
    return request.app.state.follows


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.uploads
