"""
FastAPI Application
==================
Application factory for the Reel Studio API.

Run with:
    reelstudio serve
or:
    uvicorn reelstudio.web_api.main:create_app --factory
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reelstudio import __version__
from reelstudio.captions.files import CaptionFiles
from reelstudio.config import DEFAULT_SIGNING_SECRET, ConfigLoader, StudioConfig
from reelstudio.errors import ActionError
from reelstudio.io.object_store import ObjectStore
from reelstudio.projects.actions import ProjectActions
from reelstudio.projects.assets import AssetActions
from reelstudio.projects.store import ProjectStore
from reelstudio.telemetry.logger import EventLogger
from reelstudio.voice.coqui_client import CoquiClient
from reelstudio.voice.service import VoiceService
from reelstudio.web_api.routers import assets, captions, health, projects, storage, voice


def create_app(
    config: Optional[StudioConfig] = None,
    logger: Optional[EventLogger] = None,
) -> FastAPI:
    """Build the API with services wired from `config` (environment by default)."""
    settings = config if config is not None else ConfigLoader.from_env()
    settings.validate()
    event_logger = logger if logger is not None else EventLogger()
    if settings.signing_secret == DEFAULT_SIGNING_SECRET:
        event_logger.warning("api", "default_signing_secret")

    app = FastAPI(
        title="Reel Studio API",
        description="Project dashboard and voice studio backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    object_store = ObjectStore(
        root=settings.storage_root,
        bucket=settings.storage_bucket,
        public_base_url=settings.public_base_url,
        signing_secret=settings.signing_secret,
    )
    client = CoquiClient(
        settings.coqui_api_base_url,
        timeout_seconds=settings.voice_timeout_seconds,
        max_retries=settings.voice_max_retries,
        retry_backoff_base_seconds=settings.voice_retry_backoff_seconds,
    )
    app.state.config = settings
    app.state.logger = event_logger
    app.state.object_store = object_store
    app.state.voice_service = VoiceService(
        client,
        object_store,
        event_logger,
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
    )
    project_store = ProjectStore(settings.projects_db_path)
    app.state.project_actions = ProjectActions(project_store, event_logger)
    app.state.asset_actions = AssetActions(
        project_store,
        object_store,
        event_logger,
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
    )
    app.state.caption_files = CaptionFiles(object_store, project_store, event_logger)

    @app.exception_handler(ActionError)
    async def action_error_handler(request: Request, exc: ActionError):
        if exc.status_code >= 500:
            event_logger.failure("api", exc, path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(voice.router, prefix="/api/voice", tags=["Voice"])
    app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
    app.include_router(assets.router, prefix="/api/assets", tags=["Assets"])
    app.include_router(captions.router, prefix="/api/captions", tags=["Captions"])
    app.include_router(storage.router, prefix="/storage", tags=["Storage"])

    return app


# For running directly: python -m reelstudio.web_api.main
if __name__ == "__main__":
    import uvicorn

    settings = ConfigLoader.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
