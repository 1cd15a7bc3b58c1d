from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from agents.analyst import AnalystAgent
from agents.generator import ProjectGeneratorAgent
from agents.planner import PlannerAgent
from config import Settings
from models.user import User
from services.auth import verify_api_key, verify_session_token
from services.file_storage import FileStorage
from services.notifier import Notifier
from services.project_service import ProjectService
from services.user_service import UserService
from services.workspace import ProjectWorkspace, WorkspaceRegistry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_project_service(request: Request) -> ProjectService:
    return request.app.state.project_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_file_storage(request: Request) -> FileStorage:
    return request.app.state.file_storage


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_workspaces(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


def get_generator_agent(request: Request) -> ProjectGeneratorAgent:
    return request.app.state.generator_agent


def get_analyst_agent(request: Request) -> AnalystAgent:
    return request.app.state.analyst_agent


def get_planner_agent(request: Request) -> PlannerAgent:
    return request.app.state.planner_agent


def require_api_key(
    apikey: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not verify_api_key(apikey, settings.api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def get_current_user(
    authorization: str | None = Header(default=None),
    _: None = Depends(require_api_key),
    settings: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
) -> User:
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()

    user_id = verify_session_token(token, settings.session_secret)
    user = users.get_user(user_id) if user_id else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_workspace(
    user: User = Depends(get_current_user),
    workspaces: WorkspaceRegistry = Depends(get_workspaces),
) -> ProjectWorkspace:
    return workspaces.for_user(user.id)
