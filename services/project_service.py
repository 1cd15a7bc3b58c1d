from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from logging_config import get_logger
from models.project import Project, ProjectFile, utc_now
from services.errors import ProjectNotFoundError, StoreError
from services.status_machine import progress


logger = get_logger(__name__)


class ProjectService:
    """Row store for ``projects`` and ``project_files`` kept as JSON documents.

    Every update rewrites the whole row. File rows live in their own table
    directory so removing a project leaves its files untouched.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self._projects_dir.mkdir(parents=True, exist_ok=True)
        self._files_dir.mkdir(parents=True, exist_ok=True)

    @property
    def _projects_dir(self) -> Path:
        return self.data_dir / "projects"

    @property
    def _files_dir(self) -> Path:
        return self.data_dir / "project_files"

    def _project_file(self, project_id: str) -> Path:
        return self._projects_dir / f"{project_id}.json"

    def exists(self, project_id: str) -> bool:
        return self._project_file(project_id).exists()

    def insert_project(self, fields: dict[str, Any]) -> Project:
        payload = dict(fields)
        payload["id"] = uuid4().hex
        payload["created_at"] = utc_now()
        try:
            project = Project.model_validate(payload)
        except ValidationError as err:
            raise StoreError(f"Project row rejected: {err.errors()[0]['msg']}") from err
        self._write(self._project_file(project.id), project.model_dump(mode="json"))
        logger.info("project_inserted", project_id=project.id, status=project.status)
        return project

    def get_project(self, project_id: str) -> Project:
        project_file = self._project_file(project_id)
        if not project_file.exists():
            raise ProjectNotFoundError(f"Project '{project_id}' not found")
        return Project.model_validate(self._read(project_file))

    def list_projects(self, user_id: str | None = None) -> list[Project]:
        projects = []
        for path in self._projects_dir.glob("*.json"):
            project = Project.model_validate(self._read(path))
            if user_id is not None and project.user_id != user_id:
                continue
            projects.append(project)
        return sorted(projects, key=lambda p: p.created_at, reverse=True)

    def update_project(self, project_id: str, changes: dict[str, Any]) -> Project:
        current = self.get_project(project_id)
        payload = current.model_dump()
        payload.update(changes)
        payload["id"] = current.id
        try:
            project = Project.model_validate(payload)
        except ValidationError as err:
            raise StoreError(f"Project update rejected: {err.errors()[0]['msg']}") from err
        self._write(self._project_file(project_id), project.model_dump(mode="json"))
        logger.info("project_updated", project_id=project_id, fields=sorted(changes))
        return project

    def delete_project(self, project_id: str) -> None:
        project_file = self._project_file(project_id)
        if not project_file.exists():
            raise ProjectNotFoundError(f"Project '{project_id}' not found")
        try:
            project_file.unlink()
        except OSError as err:
            raise StoreError(f"Failed to delete project '{project_id}'") from err
        logger.info("project_deleted", project_id=project_id)

    def insert_file(self, fields: dict[str, Any]) -> ProjectFile:
        payload = dict(fields)
        payload["id"] = uuid4().hex
        payload["created_at"] = utc_now()
        try:
            project_file = ProjectFile.model_validate(payload)
        except ValidationError as err:
            raise StoreError(f"File row rejected: {err.errors()[0]['msg']}") from err
        self._write(
            self._files_dir / f"{project_file.id}.json",
            project_file.model_dump(mode="json"),
        )
        logger.info(
            "project_file_inserted",
            project_id=project_file.project_id,
            file_id=project_file.id,
        )
        return project_file

    def list_files(self, project_id: str) -> list[ProjectFile]:
        files = []
        for path in self._files_dir.glob("*.json"):
            project_file = ProjectFile.model_validate(self._read(path))
            if project_file.project_id == project_id:
                files.append(project_file)
        return sorted(files, key=lambda f: f.created_at, reverse=True)

    def project_summary(self, project_id: str) -> dict[str, Any]:
        project = self.get_project(project_id)
        return {
            "id": project.id,
            "title": project.title,
            "category": project.category,
            "status": project.status,
            "progress": round(progress(project.status), 1),
            "notes": len(project.observation_notes),
            "results": len(project.experiment_results),
            "files": len(self.list_files(project_id)),
        }

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as err:
            raise StoreError(f"Failed to read {path.name}") from err

    @staticmethod
    def _write(path: Path, payload: dict[str, Any]) -> None:
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as err:
            tmp_path.unlink(missing_ok=True)
            logger.error("store_write_failed", path=str(path), error=str(err))
            raise StoreError(f"Failed to write {path.name}") from err
