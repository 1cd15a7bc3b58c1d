from __future__ import annotations

import math
from typing import Any, Protocol

from logging_config import get_logger
from models.advice import ProjectIdea
from models.project import Project, ProjectFile
from services.errors import InputValidationError, ProjectNotFoundError
from services.file_storage import FileStorage
from services.project_service import ProjectService
from services.status_machine import next_status


logger = get_logger(__name__)


class IdeaGenerator(Protocol):
    async def generate_project(self, interests: str, age_group: str) -> ProjectIdea: ...


def parse_measurement(raw_value: Any) -> float:
    if isinstance(raw_value, bool):
        raise InputValidationError("Please enter a valid number for the measurement.")
    try:
        value = float(str(raw_value).strip())
    except (TypeError, ValueError) as err:
        raise InputValidationError("Please enter a valid number for the measurement.") from err
    if not math.isfinite(value):
        raise InputValidationError("Please enter a valid number for the measurement.")
    return value


class ProjectWorkspace:
    """In-memory view state of one user's projects.

    Holds the loaded project list, the selected project and its files. Every
    mutation goes through a method here; the local copy is only replaced once
    the store write has succeeded.
    """

    def __init__(self, store: ProjectService, user_id: str | None = None):
        self.store = store
        self.user_id = user_id
        self.projects: list[Project] = []
        self.selected: Project | None = None
        self.files: list[ProjectFile] = []

    def refresh(self) -> list[Project]:
        self.projects = self.store.list_projects(self.user_id)
        return self.projects

    def fetch(self, project_id: str) -> Project:
        project = self.store.get_project(project_id)
        if self.user_id is not None and project.user_id != self.user_id:
            raise ProjectNotFoundError(f"Project '{project_id}' not found")
        return project

    def select(self, project_id: str) -> Project:
        files = self.store.list_files(project_id)
        project = self.fetch(project_id)
        self.selected = project
        self.files = files
        self._replace(project)
        return project

    def reload_files(self, project_id: str) -> list[ProjectFile]:
        files = self.store.list_files(project_id)
        if self.selected is not None and self.selected.id == project_id:
            self.files = files
        return files

    async def generate(self, generator: IdeaGenerator, interests: str, age_group: str) -> Project:
        idea = await generator.generate_project(interests, age_group)
        project = self.store.insert_project(
            {
                **idea.model_dump(),
                "user_id": self.user_id,
                "status": "draft",
            }
        )
        self.projects.insert(0, project)
        return project

    def delete(self, project_id: str) -> None:
        self.fetch(project_id)
        self.store.delete_project(project_id)
        self.projects = [p for p in self.projects if p.id != project_id]
        if self.selected is not None and self.selected.id == project_id:
            self.selected = None
            self.files = []

    def advance(self, project_id: str, direction: str) -> Project:
        project = self._current(project_id)
        new_status = next_status(project.status, direction)
        if new_status == project.status:
            return project
        updated = self.store.update_project(project_id, {"status": new_status})
        logger.info(
            "project_status_changed",
            project_id=project_id,
            old_status=project.status,
            new_status=new_status,
        )
        self._replace(updated)
        return updated

    def add_note(self, project_id: str, note: str) -> Project:
        text = str(note or "").strip()
        if not text:
            raise InputValidationError("Note text must not be empty.")
        project = self._current(project_id)
        notes = [*project.observation_notes, text]
        return self._write(project_id, {"observation_notes": notes})

    def delete_note(self, project_id: str, index: int) -> Project:
        project = self._current(project_id)
        if index < 0 or index >= len(project.observation_notes):
            return project
        notes = [n for i, n in enumerate(project.observation_notes) if i != index]
        return self._write(project_id, {"observation_notes": notes})

    def add_result(self, project_id: str, name: str, raw_value: Any) -> Project:
        metric = str(name or "").strip()
        if not metric:
            raise InputValidationError("Measurement name must not be empty.")
        value = parse_measurement(raw_value)
        project = self._current(project_id)
        results = {**project.experiment_results, metric: value}
        return self._write(project_id, {"experiment_results": results})

    def delete_result(self, project_id: str, name: str) -> Project:
        project = self._current(project_id)
        if name not in project.experiment_results:
            return project
        results = {k: v for k, v in project.experiment_results.items() if k != name}
        return self._write(project_id, {"experiment_results": results})

    def attach_file(
        self,
        storage: FileStorage,
        project_id: str,
        file_name: str,
        file_type: str,
        content: bytes,
    ) -> ProjectFile:
        self._current(project_id)
        object_path = storage.upload(project_id, file_name, content)
        project_file = self.store.insert_file(
            {
                "project_id": project_id,
                "file_name": file_name,
                "file_type": file_type or "application/octet-stream",
                "file_url": storage.public_url(object_path),
            }
        )
        self.reload_files(project_id)
        return project_file

    def _current(self, project_id: str) -> Project:
        if self.selected is not None and self.selected.id == project_id:
            return self.selected
        for project in self.projects:
            if project.id == project_id:
                return project
        return self.fetch(project_id)

    def _write(self, project_id: str, changes: dict[str, Any]) -> Project:
        self.store.update_project(project_id, changes)
        return self.select(project_id)

    def _replace(self, project: Project) -> None:
        if self.selected is not None and self.selected.id == project.id:
            self.selected = project
        for idx, existing in enumerate(self.projects):
            if existing.id == project.id:
                self.projects[idx] = project
                return


class WorkspaceRegistry:
    def __init__(self, store: ProjectService):
        self.store = store
        self._workspaces: dict[str, ProjectWorkspace] = {}

    def for_user(self, user_id: str) -> ProjectWorkspace:
        workspace = self._workspaces.get(user_id)
        if workspace is None:
            workspace = ProjectWorkspace(self.store, user_id=user_id)
            workspace.refresh()
            self._workspaces[user_id] = workspace
        return workspace
