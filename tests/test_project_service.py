from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from services.errors import ProjectNotFoundError, StoreError
from services.project_service import ProjectService


def _idea(title: str = "Volcano Chemistry") -> dict:
    return {
        "title": title,
        "description": "Model an eruption",
        "category": "Chemistry",
        "hypothesis": "More baking soda makes a bigger eruption",
        "materials": ["baking soda", "vinegar"],
    }


def test_insert_assigns_id_and_created_at(tmp_path) -> None:
    service = ProjectService(tmp_path)

    project = service.insert_project(_idea())

    assert project.id
    assert project.created_at is not None
    assert project.status == "draft"
    assert service.get_project(project.id).title == "Volcano Chemistry"


def test_stored_status_outside_enum_loads_as_draft(tmp_path) -> None:
    service = ProjectService(tmp_path)
    project = service.insert_project(_idea())

    path = tmp_path / "projects" / f"{project.id}.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    payload["status"] = "archived"
    payload["observation_notes"] = None
    payload["experiment_results"] = None
    path.write_text(json.dumps(payload), encoding="utf-8")

    loaded = service.get_project(project.id)
    assert loaded.status == "draft"
    assert loaded.observation_notes == []
    assert loaded.experiment_results == {}


def test_list_projects_newest_first_and_scoped_to_user(tmp_path) -> None:
    service = ProjectService(tmp_path)
    older = service.insert_project({**_idea("Older"), "user_id": "u1"})
    newer = service.insert_project({**_idea("Newer"), "user_id": "u1"})
    service.insert_project({**_idea("Someone else"), "user_id": "u2"})

    path = tmp_path / "projects" / f"{older.id}.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    payload["created_at"] = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    path.write_text(json.dumps(payload), encoding="utf-8")

    titles = [p.title for p in service.list_projects("u1")]
    assert titles == ["Newer", "Older"]
    assert newer.id in {p.id for p in service.list_projects()}
    assert len(service.list_projects()) == 3


def test_update_rewrites_fields(tmp_path) -> None:
    service = ProjectService(tmp_path)
    project = service.insert_project(_idea())

    updated = service.update_project(project.id, {"status": "in_progress"})

    assert updated.status == "in_progress"
    assert updated.created_at == project.created_at
    assert service.get_project(project.id).status == "in_progress"


def test_missing_project_raises(tmp_path) -> None:
    service = ProjectService(tmp_path)

    with pytest.raises(ProjectNotFoundError):
        service.get_project("nope")
    with pytest.raises(ProjectNotFoundError):
        service.update_project("nope", {"status": "completed"})
    with pytest.raises(ProjectNotFoundError):
        service.delete_project("nope")


def test_delete_project_keeps_file_rows(tmp_path) -> None:
    service = ProjectService(tmp_path)
    project = service.insert_project(_idea())
    service.insert_file(
        {
            "project_id": project.id,
            "file_name": "photo.png",
            "file_type": "image/png",
            "file_url": "http://localhost/files/photo.png",
        }
    )

    service.delete_project(project.id)

    assert not service.exists(project.id)
    assert len(service.list_files(project.id)) == 1


def test_project_summary_counts(tmp_path) -> None:
    service = ProjectService(tmp_path)
    project = service.insert_project(_idea())
    service.update_project(
        project.id,
        {"observation_notes": ["fizz"], "experiment_results": {"height": 12.0}},
    )

    summary = service.project_summary(project.id)

    assert summary["notes"] == 1
    assert summary["results"] == 1
    assert summary["files"] == 0
    assert summary["status"] == "draft"
    assert summary["progress"] == 33.3


def test_failed_write_keeps_previous_row(tmp_path, monkeypatch) -> None:
    service = ProjectService(tmp_path)
    project = service.insert_project(_idea())

    def broken_dump(payload, f, **kwargs):
        f.write('{"id": "trunc')
        raise OSError("disk full")

    monkeypatch.setattr("services.project_service.json.dump", broken_dump)
    with pytest.raises(StoreError):
        service.update_project(project.id, {"status": "completed"})
    monkeypatch.undo()

    assert service.get_project(project.id).status == "draft"
    assert [p.name for p in (tmp_path / "projects").iterdir()] == [f"{project.id}.json"]
