from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Profile(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str = "Guest"
    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)


class Reply(CamelModel):
    id: int
    wallet: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    text: str
    timestamp: str


class Post(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    wallet: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    text: Optional[str] = None
    image: Optional[str] = None
    original_post: Optional[Dict[str, Any]] = None
    likes: List[str] = Field(default_factory=list)
    replies: List[Dict[str, Any]] = Field(default_factory=list)
    timestamp: Optional[str] = None
    filename: str


# Requests

class SaveProfileRequest(CamelModel):
    wallet: str
    data: Dict[str, Any] = Field(default_factory=dict)


class CreatePostRequest(CamelModel):
    wallet: str
    text: str = ""
    image: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    original_post: Optional[Dict[str, Any]] = None


class PostActionRequest(CamelModel):
    wallet: str
    filename: str


class ReplyRequest(CamelModel):
    filename: str
    wallet: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None


class FollowRequest(CamelModel):
    follower: Optional[str] = None
    target: Optional[str] = None


# Responses

class SuccessResponse(CamelModel):
    success: bool = True


class CreatePostResponse(SuccessResponse):
    filename: str


class LikeResponse(SuccessResponse):
    likes: int
    has_liked: bool


class ReplyResponse(SuccessResponse):
    reply: Reply


class FollowResponse(SuccessResponse):
    is_following: bool
    followers_count: int


class UploadResponse(SuccessResponse):
    url: str
