import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    app_name: str = "Social File Store API"
    # If ALLOWED_ORIGINS env is provided, it should be a JSON array.
    # Example: ["http://localhost:5173", "http://127.0.0.1:5173"]
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Storage root; RAILWAY_VOLUME_MOUNT_PATH is honoured for existing deployments
    storage_root: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("storage_root", "railway_volume_mount_path"),
    )
    public_dir: Optional[Path] = None

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    max_upload_bytes: int = 10 * 1024 * 1024


settings = Settings()


def default_storage_root() -> Path:
    if sys.platform == "win32":
        return PROJECT_DIR / "uploads"
    return Path("/app/uploads")


@dataclass(frozen=True)
class StorageConfig:
    """Resolved on-disk layout, built once at startup and read-only after."""

    root: Path

    @property
    def images_dir(self) -> Path:
        return self.root / "images"

    @property
    def profiles_dir(self) -> Path:
        return self.root / "profiles"

    @property
    def posts_dir(self) -> Path:
        return self.root / "posts"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        return cls(root=Path(settings.storage_root or default_storage_root()))

    def ensure_directories(self) -> None:
        for directory in (self.root, self.images_dir, self.profiles_dir, self.posts_dir):
            directory.mkdir(parents=True, exist_ok=True)


def resolve_public_dir(settings: Settings) -> Path:
    return Path(settings.public_dir or PROJECT_DIR / "public")
