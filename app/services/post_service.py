"""
Posts and the feed.

Each post is one record keyed ``{id}-{wallet}``. Clients address posts by
``filename`` (the key plus ``.json``), which is attached on read and never
stored inside the record.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from app.core.errors import ForbiddenError, NotFoundError
from app.schemas.social import Post
from app.services.wallets import normalize_wallet, wallet_list
from app.storage.kv import CorruptRecordError, KeyValueStore, validate_key
from app.storage.locks import KeyLocks

logger = logging.getLogger(__name__)

FILENAME_SUFFIX = ".json"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return (moment - EPOCH) // timedelta(milliseconds=1)


def iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def post_key(post_id: int, wallet: str) -> str:
    return f"{post_id}-{wallet.lower()}"


def filename_for(key: str) -> str:
    return f"{key}{FILENAME_SUFFIX}"


class PostService:
    """Create, list, delete, like and reply to posts."""

    def __init__(self, store: KeyValueStore, locks: Optional[KeyLocks] = None, clock: Clock = utc_now):
        self.store = store
        self.locks = locks or KeyLocks()
        self.clock = clock

    @staticmethod
    def _key_from_filename(filename: str) -> str:
        if not filename or not filename.endswith(FILENAME_SUFFIX):
            raise NotFoundError("Post not found")
        key = filename[: -len(FILENAME_SUFFIX)]
        try:
            return validate_key(key)
        except ValueError:
            raise NotFoundError("Post not found") from None

    @staticmethod
    def _lock_key(key: str) -> str:
        return f"post:{key}"

    def _load_existing(self, key: str) -> Dict[str, Any]:
        try:
            post = self.store.get(key)
        except CorruptRecordError as e:
            logger.warning(f"Treating unreadable post as missing: {e}")
            post = None
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def create_post(
        self,
        wallet: str,
        text: str,
        image: Optional[str] = None,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
        original_post: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        normalize_wallet(wallet)
        now = self.clock()
        post = {
            "id": epoch_millis(now),
            "wallet": wallet.strip(),
            "name": name,
            "avatar": avatar,
            "text": text,
            "image": image,
            "originalPost": original_post or None,
            "likes": [],
            "replies": [],
            "timestamp": iso_timestamp(now),
        }
        key = post_key(post["id"], post["wallet"])
        # Same wallet in the same millisecond overwrites the earlier post
        self.store.put(key, post)
        logger.info(f"Created post {key}")
        return {**post, "filename": filename_for(key)}

    def list_feed(self, wallet: Optional[str] = None) -> List[Dict[str, Any]]:
        wanted = wallet.strip().lower() if wallet and wallet.strip() else None
        posts = []
        for key in self.store.list():
            try:
                post = self.store.get(key)
            except CorruptRecordError as e:
                logger.warning(f"Skipping unreadable post: {e}")
                continue
            if post is None:
                continue
            post["filename"] = filename_for(key)
            try:
                Post.model_validate(post)
            except SchemaError as e:
                logger.warning(f"Skipping malformed post {key}: {e.error_count()} invalid field(s)")
                continue
            if not isinstance(post["id"], int) or isinstance(post["id"], bool):
                logger.warning(f"Skipping post {key} with non-integer id")
                continue
            if wanted is not None and post["wallet"].lower() != wanted:
                continue
            posts.append(post)
        posts.sort(key=lambda p: p["id"], reverse=True)
        return posts

    def delete_post(self, wallet: str, filename: str) -> None:
        requester = normalize_wallet(wallet)
        key = self._key_from_filename(filename)
        with self.locks.hold(self._lock_key(key)):
            post = self._load_existing(key)
            owner = str(post.get("wallet") or "").lower()
            if owner != requester:
                raise ForbiddenError("Only the author can delete this post")
            if not self.store.delete(key):
                raise NotFoundError("Post not found")
        logger.info(f"Deleted post {key}")

    def toggle_like(self, wallet: str, filename: str) -> Tuple[int, bool]:
        liker = normalize_wallet(wallet)
        key = self._key_from_filename(filename)
        with self.locks.hold(self._lock_key(key)):
            post = self._load_existing(key)
            likes = wallet_list(post.get("likes"))
            if liker in likes:
                likes = [w for w in likes if w != liker]
                has_liked = False
            else:
                likes.append(liker)
                has_liked = True
            post["likes"] = likes
            self.store.put(key, post)
        return len(likes), has_liked

    def add_reply(
        self,
        filename: str,
        wallet: str,
        text: str,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Dict[str, Any]:
        normalize_wallet(wallet)
        key = self._key_from_filename(filename)
        with self.locks.hold(self._lock_key(key)):
            post = self._load_existing(key)
            now = self.clock()
            reply = {
                "id": epoch_millis(now),
                "wallet": wallet.strip(),
                "name": name,
                "avatar": avatar,
                "text": text,
                "timestamp": iso_timestamp(now),
            }
            replies = post.get("replies")
            replies = list(replies) if isinstance(replies, list) else []
            replies.append(reply)
            post["replies"] = replies
            self.store.put(key, post)
        return reply
