import logging
from typing import Tuple

from app.core.errors import ValidationError
from app.services.profile_service import ProfileService
from app.services.wallets import normalize_wallet, wallet_list

logger = logging.getLogger(__name__)


class FollowService:
    """Keeps ``following`` and ``followers`` in step across two profiles."""

    def __init__(self, profiles: ProfileService):
        self.profiles = profiles

    def toggle_follow(self, follower: str, target: str) -> Tuple[bool, int]:
        """
        Follow ``target`` if not already followed, otherwise unfollow.

        Returns (is_following, target's follower count). Both profiles are
        written while holding both locks.
        """
        follower_key = normalize_wallet(follower, "follower")
        target_key = normalize_wallet(target, "target")
        if follower_key == target_key:
            raise ValidationError("Cannot follow yourself")

        store = self.profiles.store
        with self.profiles.locks.hold(
            ProfileService.lock_key(follower_key), ProfileService.lock_key(target_key)
        ):
            follower_profile = self.profiles.load(follower_key) or {}
            target_profile = self.profiles.load(target_key) or {}
            following = wallet_list(follower_profile.get("following"))
            followers = wallet_list(target_profile.get("followers"))

            if target_key not in following:
                following.append(target_key)
                if follower_key not in followers:
                    followers.append(follower_key)
                is_following = True
            else:
                following = [w for w in following if w != target_key]
                followers = [w for w in followers if w != follower_key]
                is_following = False

            follower_profile["following"] = following
            target_profile["followers"] = followers
            store.put(follower_key, follower_profile)
            store.put(target_key, target_profile)

        logger.info(
            f"{follower_key} {'followed' if is_following else 'unfollowed'} {target_key}"
        )
        return is_following, len(followers)
