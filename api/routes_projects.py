from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool

from agents.generator import ProjectGeneratorAgent
from api.deps import (
    get_current_user,
    get_file_storage,
    get_generator_agent,
    get_notifier,
    get_workspace,
)
from config import DEFAULT_AGE_GROUP
from models.project import Project
from models.user import User
from services.errors import ScienceFairError
from services.export import export_filename, export_project_json
from services.file_storage import FileStorage
from services.guidance import project_guidance
from services.notifier import Notifier
from services.presentation import build_slides, render_presentation_pdf
from services.status_machine import progress, status_label
from services.workspace import ProjectWorkspace


router = APIRouter(prefix="/projects", tags=["projects"])


class GenerateProjectRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    interests: str = ""
    age_group: str = Field(default=DEFAULT_AGE_GROUP, alias="ageGroup")


class StatusChangeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    direction: str


class NoteRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    note: str = ""


class ResultRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    value: Any = ""


def project_card(project: Project) -> dict:
    payload = project.model_dump(mode="json")
    payload["progress"] = progress(project.status)
    payload["status_label"] = status_label(project.status)
    return payload


async def fail(notifier: Notifier, user: User, err: ScienceFairError) -> HTTPException:
    await notifier.error(user.id, err.title, str(err))
    return HTTPException(status_code=err.status_code, detail=str(err))


@router.get("", status_code=status.HTTP_200_OK)
async def list_projects(
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> list[dict]:
    try:
        projects = workspace.refresh()
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return [project_card(p) for p in projects]


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_project(
    payload: GenerateProjectRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
    generator: ProjectGeneratorAgent = Depends(get_generator_agent),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = await workspace.generate(generator, payload.interests, payload.age_group)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(
        user.id, "Project Generated!", "Your new project idea has been saved.", project_id=project.id
    )
    return project_card(project)


@router.get("/{project_id}", status_code=status.HTTP_200_OK)
async def get_project(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.fetch(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return project_card(project)


@router.delete("/{project_id}", status_code=status.HTTP_200_OK)
async def delete_project(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, str]:
    try:
        workspace.delete(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(user.id, "Project deleted", "The project has been removed.")
    return {"project_id": project_id, "status": "deleted"}


@router.post("/{project_id}/select", status_code=status.HTTP_200_OK)
async def select_project(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.select(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return {
        "project": project_card(project),
        "files": [f.model_dump(mode="json") for f in workspace.files],
    }


@router.post("/{project_id}/status", status_code=status.HTTP_200_OK)
async def change_status(
    project_id: str,
    payload: StatusChangeRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.advance(project_id, payload.direction)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return project_card(project)


@router.post("/{project_id}/notes", status_code=status.HTTP_200_OK)
async def add_note(
    project_id: str,
    payload: NoteRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.add_note(project_id, payload.note)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(user.id, "Note added", "Your observation has been recorded.")
    return project_card(project)


@router.delete("/{project_id}/notes/{index}", status_code=status.HTTP_200_OK)
async def delete_note(
    project_id: str,
    index: int,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.delete_note(project_id, index)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return project_card(project)


@router.post("/{project_id}/results", status_code=status.HTTP_200_OK)
async def add_result(
    project_id: str,
    payload: ResultRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.add_result(project_id, payload.name, payload.value)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(user.id, "Result added", "Your experiment result has been recorded.")
    return project_card(project)


@router.delete("/{project_id}/results/{name:path}", status_code=status.HTTP_200_OK)
async def delete_result(
    project_id: str,
    name: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.delete_result(project_id, name)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return project_card(project)


@router.get("/{project_id}/chart", status_code=status.HTTP_200_OK)
async def get_chart_data(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> list[dict]:
    try:
        project = workspace.fetch(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return [{"name": name, "value": value} for name, value in project.experiment_results.items()]


@router.get("/{project_id}/guidance", status_code=status.HTTP_200_OK)
async def get_guidance(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    try:
        project = workspace.fetch(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return project_guidance(project.category)


@router.get("/{project_id}/files", status_code=status.HTTP_200_OK)
async def list_files(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> list[dict]:
    try:
        workspace.fetch(project_id)
        files = workspace.reload_files(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return [f.model_dump(mode="json") for f in files]


@router.post("/{project_id}/files", status_code=status.HTTP_201_CREATED)
async def upload_file(
    project_id: str,
    file: UploadFile = File(...),
    workspace: ProjectWorkspace = Depends(get_workspace),
    storage: FileStorage = Depends(get_file_storage),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict:
    content = await file.read()
    try:
        project_file = workspace.attach_file(
            storage,
            project_id,
            file.filename or "upload",
            file.content_type or "application/octet-stream",
            content,
        )
    except ScienceFairError as err:
        await notifier.error(user.id, "Upload failed", str(err))
        raise HTTPException(status_code=err.status_code, detail=str(err)) from err
    await notifier.notify(user.id, "File uploaded", "Your file has been uploaded successfully.")
    return project_file.model_dump(mode="json")


@router.get("/{project_id}/slides", status_code=status.HTTP_200_OK)
async def get_slides(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> list[dict]:
    try:
        project = workspace.fetch(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return [slide.model_dump() for slide in build_slides(project)]


@router.get("/{project_id}/export.json", status_code=status.HTTP_200_OK)
async def export_json(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> Response:
    try:
        project = workspace.fetch(project_id)
        files = workspace.reload_files(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return Response(
        content=export_project_json(project, files),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(project, "json")}"'
        },
    )


@router.get("/{project_id}/presentation.pdf", status_code=status.HTTP_200_OK)
async def export_presentation(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> Response:
    try:
        project = workspace.fetch(project_id)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    # reportlab rendering is CPU-bound; keep it off the event loop
    content = await run_in_threadpool(render_presentation_pdf, project)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(project, "pdf")}"'
        },
    )
