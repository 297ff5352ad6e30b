import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import PROJECT_DIR, Settings, StorageConfig, resolve_public_dir, settings as default_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import configure_logging
from app.api.endpoints.posts import router as posts_router
from app.api.endpoints.profiles import router as profiles_router
from app.api.endpoints.uploads import router as uploads_router
from app.services.follow_service import FollowService
from app.services.post_service import PostService
from app.services.profile_service import ProfileService
from app.services.upload_service import UploadService
from app.storage.kv import JsonFileStore
from app.storage.locks import KeyLocks

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    storage = StorageConfig.from_settings(settings)
    public_dir = resolve_public_dir(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        configure_logging(settings.log_level)
        storage.ensure_directories()
        logger.info(f"Storage root: {storage.root}")
        yield
        logger.info("Shutting down")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    locks = KeyLocks()
    app.state.storage = storage
    app.state.profiles = ProfileService(JsonFileStore(storage.profiles_dir), locks)
    app.state.posts = PostService(JsonFileStore(storage.posts_dir), locks)
    app.state.follows = FollowService(app.state.profiles)
    app.state.uploads = UploadService(storage.images_dir, settings.max_upload_bytes)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(profiles_router, prefix="/api")
    app.include_router(posts_router, prefix="/api")
    app.include_router(uploads_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/", include_in_schema=False)
    def index():
        for candidate in (public_dir / "index.html", PROJECT_DIR / "index.html"):
            if candidate.is_file():
                return FileResponse(candidate)
        return PlainTextResponse("index.html not found; deploy the frontend into public/", status_code=404)

    # Directories are created in lifespan, so skip the mount-time existence check
    app.mount("/uploads", StaticFiles(directory=storage.root, check_dir=False), name="uploads")
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir), name="frontend")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=default_settings.host, port=default_settings.port)
