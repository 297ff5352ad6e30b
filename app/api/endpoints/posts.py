from fastapi import APIRouter, Depends
from typing import List, Optional

from app.api.deps import get_post_service
from app.schemas.social import (
    CreatePostRequest,
    CreatePostResponse,
    LikeResponse,
    Post,
    PostActionRequest,
    Reply,
    ReplyRequest,
    ReplyResponse,
    SuccessResponse,
)
from app.services.post_service import PostService

router = APIRouter(tags=["posts"])


@router.post("/post", response_model=CreatePostResponse)
def create_post(request: CreatePostRequest, posts: PostService = Depends(get_post_service)) -> CreatePostResponse:
    post = posts.create_post(
        request.wallet,
        request.text,
        image=request.image,
        name=request.name,
        avatar=request.avatar,
        original_post=request.original_post,
    )
    return CreatePostResponse(filename=post["filename"])


@router.get("/feed", response_model=List[Post])
def feed(wallet: Optional[str] = None, posts: PostService = Depends(get_post_service)) -> List[Post]:
    """
    All posts, newest first, optionally only those by ``wallet``.
    """
    return [Post.model_validate(p) for p in posts.list_feed(wallet)]


@router.post("/delete-post", response_model=SuccessResponse)
def delete_post(request: PostActionRequest, posts: PostService = Depends(get_post_service)) -> SuccessResponse:
    posts.delete_post(request.wallet, request.filename)
    return SuccessResponse()


@router.post("/like", response_model=LikeResponse)
def like(request: PostActionRequest, posts: PostService = Depends(get_post_service)) -> LikeResponse:
    count, has_liked = posts.toggle_like(request.wallet, request.filename)
    return LikeResponse(likes=count, has_liked=has_liked)


@router.post("/reply", response_model=ReplyResponse)
def reply(request: ReplyRequest, posts: PostService = Depends(get_post_service)) -> ReplyResponse:
    created = posts.add_reply(
        request.filename, request.wallet, request.text, name=request.name, avatar=request.avatar
    )
    return ReplyResponse(reply=Reply.model_validate(created))
