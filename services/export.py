from __future__ import annotations

import json
import re

from models.project import Project, ProjectFile


def export_filename(project: Project, extension: str) -> str:
    stem = re.sub(r"[^a-zA-Z0-9\s-]", "", project.title).strip().lower()
    stem = re.sub(r"[\s-]+", "-", stem)[:60] or "project"
    return f"{stem}.{extension}"


def export_project_json(project: Project, files: list[ProjectFile] | None = None) -> bytes:
    payload = project.model_dump(mode="json")
    payload["files"] = [f.model_dump(mode="json") for f in files or []]
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")
