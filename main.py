from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import FileResponse

from agents.analyst import AnalystAgent
from agents.generator import ProjectGeneratorAgent
from agents.llm_client import LLMClient
from agents.planner import PlannerAgent
from api.deps import get_file_storage
from api.routes_advisor import router as advisor_router
from api.routes_auth import router as auth_router
from api.routes_projects import router as projects_router
from api.routes_stream import router as stream_router
from config import Settings, get_settings
from logging_config import setup_logging
from services.file_storage import FileStorage
from services.notifier import Notifier
from services.project_service import ProjectService
from services.user_service import UserService
from services.workspace import WorkspaceRegistry


def configure_app_state(app: FastAPI, settings: Settings, llm: LLMClient | None = None) -> None:
    project_service = ProjectService(settings.data_dir)

    if llm is None:
        llm = LLMClient(
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            api_base=settings.llm_api_base,
            timeout_seconds=settings.llm_timeout_seconds,
        )

    app.state.settings = settings
    app.state.project_service = project_service
    app.state.user_service = UserService(settings.data_dir)
    app.state.file_storage = FileStorage(settings.upload_dir, settings.app_base_url)
    app.state.notifier = Notifier()
    app.state.workspaces = WorkspaceRegistry(project_service)
    app.state.generator_agent = ProjectGeneratorAgent(llm=llm)
    app.state.analyst_agent = AnalystAgent(llm=llm)
    app.state.planner_agent = PlannerAgent(llm=llm)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    configure_app_state(app, settings)
    yield


app = FastAPI(title="Science Fair Workspace API", version="0.1.0", lifespan=lifespan)

app.include_router(auth_router, prefix="/api")
app.include_router(projects_router, prefix="/api")
app.include_router(advisor_router, prefix="/api")
app.include_router(stream_router, prefix="/api")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/files/{object_path:path}")
def download_file(
    object_path: str,
    storage: FileStorage = Depends(get_file_storage),
) -> FileResponse:
    try:
        path = storage.resolve(object_path)
    except FileNotFoundError as err:
        raise HTTPException(status_code=404, detail="File not found") from err
    return FileResponse(path, filename=path.name, content_disposition_type="attachment")
