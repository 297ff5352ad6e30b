"""
Image uploads written under the storage root's ``images/`` directory.
"""
import logging
import os
import random
import re
from pathlib import Path
from typing import Callable, Optional

from app.core.errors import StorageError, ValidationError
from app.services.post_service import Clock, epoch_millis, utc_now
from app.services.wallets import normalize_wallet

logger = logging.getLogger(__name__)

EXT_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
PUBLIC_PREFIX = "/uploads/images"


def safe_extension(original_name: Optional[str]) -> str:
    ext = os.path.splitext(original_name or "")[1]
    return ext.lower() if EXT_RE.match(ext) else ""


class UploadService:
    """Stores uploaded bytes under generated names and returns their public URL."""

    def __init__(
        self,
        images_dir: Path,
        max_bytes: int,
        clock: Clock = utc_now,
        token: Callable[[], int] = lambda: random.randint(0, 10 ** 9),
    ):
        self.images_dir = Path(images_dir)
        self.max_bytes = max_bytes
        self.clock = clock
        self.token = token

    def _check(self, content: Optional[bytes]) -> bytes:
        if not content:
            raise ValidationError("No file")
        if len(content) > self.max_bytes:
            raise ValidationError(f"File exceeds {self.max_bytes} bytes")
        return content

    def _generic_name(self, ext: str) -> str:
        return f"img-{epoch_millis(self.clock())}-{self.token()}{ext}"

    def _write(self, name: str, content: bytes) -> str:
        path = self.images_dir / name
        try:
            path.write_bytes(content)
        except OSError as e:
            logger.exception(f"Failed to write upload {path}")
            raise StorageError("Failed to save upload") from e
        logger.info(f"Stored upload {name} ({len(content)} bytes)")
        return f"{PUBLIC_PREFIX}/{name}"

    def save_image(self, content: Optional[bytes], original_name: Optional[str]) -> str:
        content = self._check(content)
        return self._write(self._generic_name(safe_extension(original_name)), content)

    def save_avatar(
        self, content: Optional[bytes], original_name: Optional[str], wallet: Optional[str] = None
    ) -> str:
        content = self._check(content)
        ext = safe_extension(original_name)
        if wallet and wallet.strip():
            name = f"{normalize_wallet(wallet)}-{epoch_millis(self.clock())}{ext}"
        else:
            name = self._generic_name(ext)
        return self._write(name, content)
