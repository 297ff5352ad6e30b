"""
Profile records keyed by lower-cased wallet.
"""
import logging
from typing import Any, Dict, Optional

from app.services.wallets import normalize_wallet, wallet_list
from app.storage.kv import CorruptRecordError, KeyValueStore
from app.storage.locks import KeyLocks

logger = logging.getLogger(__name__)


def default_profile() -> Dict[str, Any]:
    return {"name": "Guest", "followers": [], "following": []}


class ProfileService:
    """Reads and shallow-merges profile records."""

    def __init__(self, store: KeyValueStore, locks: Optional[KeyLocks] = None):
        self.store = store
        self.locks = locks or KeyLocks()

    @staticmethod
    def lock_key(wallet: str) -> str:
        return f"profile:{wallet}"

    def load(self, wallet: str) -> Optional[Dict[str, Any]]:
        """Stored record for a normalized wallet; corrupt records read as absent."""
        try:
            return self.store.get(wallet)
        except CorruptRecordError as e:
            logger.warning(f"Ignoring unreadable profile: {e}")
            return None

    def get_profile(self, wallet: str) -> Dict[str, Any]:
        key = normalize_wallet(wallet)
        profile = self.load(key)
        if profile is None:
            return default_profile()
        # Client data may have overwritten these with anything
        if not isinstance(profile.get("name"), str):
            profile["name"] = "Guest"
        for field in ("followers", "following"):
            profile[field] = wallet_list(profile.get(field))
        return profile

    def save_profile(self, wallet: str, data: Dict[str, Any]) -> Dict[str, Any]:
        key = normalize_wallet(wallet)
        with self.locks.hold(self.lock_key(key)):
            merged = {**(self.load(key) or {}), **(data or {})}
            self.store.put(key, merged)
        return merged
