from __future__ import annotations

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import app, configure_app_state


class FakeLLM:
    def __init__(self) -> None:
        self.analysis: dict = {"insights": "Taller with music.", "recommendations": "Repeat twice."}

    async def chat_json(self, messages, **kwargs):
        if "analyze this experimental data" in messages[-1]["content"]:
            return self.analysis
        return {
            "title": "Plant Growth and Music",
            "description": "Play music to bean plants and measure growth",
            "category": "Biology",
            "hypothesis": "Plants exposed to classical music grow taller",
            "materials": ["bean plants", "speaker", "ruler"],
        }

    async def chat(self, messages, **kwargs):
        return "1. Water the plants daily"


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(tmp_path, llm):
    settings = Settings(
        app_base_url="http://testserver",
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "uploads",
        api_key="k",
        session_secret="test-secret",
        session_ttl_seconds=3600,
        llm_api_key="",
        llm_api_base="http://llm.invalid",
        llm_model="test-model",
        llm_timeout_seconds=1.0,
        log_level="WARNING",
        log_format="console",
    )
    configure_app_state(app, settings, llm=llm)
    return TestClient(app)


def _sign_up(client: TestClient, email: str = "student@example.com") -> dict[str, str]:
    response = client.post(
        "/api/auth/signup",
        json={"email": email, "password": "secret1", "full_name": "Ada"},
        headers={"apikey": "k"},
    )
    assert response.status_code == 201
    token = response.json()["access_token"]
    return {"apikey": "k", "Authorization": f"Bearer {token}"}


def _generate(client: TestClient, headers: dict[str, str]) -> dict:
    response = client.post(
        "/api/projects/generate",
        json={"interests": "plants and music", "ageGroup": "middle"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_api_key_is_rejected(client) -> None:
    response = client.post("/api/auth/signin", json={"email": "a@b.co", "password": "x"})
    assert response.status_code == 401


def test_missing_session_is_rejected(client) -> None:
    response = client.get("/api/projects", headers={"apikey": "k"})
    assert response.status_code == 401


def test_signin_and_session(client) -> None:
    _sign_up(client)

    response = client.post(
        "/api/auth/signin",
        json={"email": "student@example.com", "password": "secret1"},
        headers={"apikey": "k"},
    )
    assert response.status_code == 200
    headers = {"apikey": "k", "Authorization": f"Bearer {response.json()['access_token']}"}

    session = client.get("/api/auth/session", headers=headers)
    assert session.json()["user"]["email"] == "student@example.com"

    bad = client.post(
        "/api/auth/signin",
        json={"email": "student@example.com", "password": "wrong-pass"},
        headers={"apikey": "k"},
    )
    assert bad.status_code == 401


def test_project_lifecycle(client) -> None:
    headers = _sign_up(client)
    project = _generate(client, headers)
    project_id = project["id"]

    assert project["status"] == "draft"
    assert project["status_label"] == "Draft"
    assert [p["id"] for p in client.get("/api/projects", headers=headers).json()] == [project_id]

    moved = client.post(f"/api/projects/{project_id}/status", json={"direction": "next"}, headers=headers)
    assert moved.json()["status"] == "in_progress"
    moved = client.post(f"/api/projects/{project_id}/status", json={"direction": "next"}, headers=headers)
    assert moved.json()["status"] == "completed"
    assert moved.json()["progress"] == 100
    moved = client.post(f"/api/projects/{project_id}/status", json={"direction": "next"}, headers=headers)
    assert moved.json()["status"] == "completed"

    noted = client.post(f"/api/projects/{project_id}/notes", json={"note": "Day 1: 2cm"}, headers=headers)
    assert noted.json()["observation_notes"] == ["Day 1: 2cm"]

    client.post(f"/api/projects/{project_id}/results", json={"name": "weight", "value": 10}, headers=headers)
    result = client.post(
        f"/api/projects/{project_id}/results",
        json={"name": "temperature", "value": "25.5"},
        headers=headers,
    )
    assert result.json()["experiment_results"] == {"weight": 10.0, "temperature": 25.5}

    chart = client.get(f"/api/projects/{project_id}/chart", headers=headers).json()
    assert chart == [{"name": "weight", "value": 10.0}, {"name": "temperature", "value": 25.5}]

    removed = client.delete(f"/api/projects/{project_id}/results/weight", headers=headers)
    assert removed.json()["experiment_results"] == {"temperature": 25.5}
    removed = client.delete(f"/api/projects/{project_id}/notes/0", headers=headers)
    assert removed.json()["observation_notes"] == []


def test_invalid_result_value_is_rejected(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    response = client.post(
        f"/api/projects/{project_id}/results",
        json={"name": "temperature", "value": "warm"},
        headers=headers,
    )

    assert response.status_code == 400
    stored = client.get(f"/api/projects/{project_id}", headers=headers).json()
    assert stored["experiment_results"] == {}


def test_unknown_direction_is_rejected(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    response = client.post(
        f"/api/projects/{project_id}/status", json={"direction": "sideways"}, headers=headers
    )

    assert response.status_code == 400


def test_projects_are_private_to_their_owner(client) -> None:
    owner = _sign_up(client)
    project_id = _generate(client, owner)["id"]
    other = _sign_up(client, "other@example.com")

    assert client.get("/api/projects", headers=other).json() == []
    assert client.get(f"/api/projects/{project_id}", headers=other).status_code == 404


def test_upload_and_download_file(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    uploaded = client.post(
        f"/api/projects/{project_id}/files",
        files={"file": ("data.csv", b"a,b\n1,2\n", "text/csv")},
        headers=headers,
    )
    assert uploaded.status_code == 201
    file_url = uploaded.json()["file_url"]
    assert file_url.startswith("http://testserver/files/")

    listed = client.get(f"/api/projects/{project_id}/files", headers=headers).json()
    assert [f["file_name"] for f in listed] == ["data.csv"]

    downloaded = client.get(file_url.replace("http://testserver", ""))
    assert downloaded.status_code == 200
    assert downloaded.content == b"a,b\n1,2\n"


def test_delete_project(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    response = client.delete(f"/api/projects/{project_id}", headers=headers)

    assert response.json() == {"project_id": project_id, "status": "deleted"}
    assert client.get(f"/api/projects/{project_id}", headers=headers).status_code == 404


def test_exports(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    exported = client.get(f"/api/projects/{project_id}/export.json", headers=headers)
    assert exported.status_code == 200
    assert "plant-growth-and-music.json" in exported.headers["content-disposition"]
    assert json.loads(exported.content)["title"] == "Plant Growth and Music"

    pdf = client.get(f"/api/projects/{project_id}/presentation.pdf", headers=headers)
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

    slides = client.get(f"/api/projects/{project_id}/slides", headers=headers).json()
    assert [s["id"] for s in slides] == ["title", "hypothesis", "materials", "observations", "progress"]


def test_guidance_for_biology_project(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    guidance = client.get(f"/api/projects/{project_id}/guidance", headers=headers).json()

    assert guidance["category"] == "biology"
    assert len(guidance["tutorial"]) == 8


def test_advisor_routes(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    no_data = client.post(f"/api/projects/{project_id}/analyze-data", headers=headers)
    assert no_data.status_code == 400

    client.post(f"/api/projects/{project_id}/results", json={"name": "height", "value": 4}, headers=headers)
    analysis = client.post(f"/api/projects/{project_id}/analyze-data", headers=headers)
    assert analysis.json() == {"insights": "Taller with music.", "recommendations": "Repeat twice."}

    plan = client.post(f"/api/projects/{project_id}/plan-experiment", headers=headers)
    assert plan.json() == {"plan": "1. Water the plants daily"}

    answer = client.post(
        f"/api/projects/{project_id}/research", json={"question": "Why?"}, headers=headers
    )
    assert answer.json() == {"answer": "1. Water the plants daily"}


def test_incomplete_analysis_is_a_gateway_error(client, llm) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]
    client.post(f"/api/projects/{project_id}/results", json={"name": "height", "value": 4}, headers=headers)
    llm.analysis = {"insights": "Only insights"}

    response = client.post(f"/api/projects/{project_id}/analyze-data", headers=headers)

    assert response.status_code == 502


def test_failures_reach_the_notification_queue(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]
    user_id = client.get("/api/auth/session", headers=headers).json()["user"]["id"]
    queue = app.state.notifier.subscribe(user_id)

    client.post(
        f"/api/projects/{project_id}/results",
        json={"name": "temperature", "value": "warm"},
        headers=headers,
    )

    message = queue.get_nowait()
    assert message["data"]["variant"] == "destructive"
    assert message["data"]["title"] == "Invalid input"


def test_pdf_renders_off_the_event_loop(client, monkeypatch) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]
    render_threads: list[str] = []

    def fake_render(project):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            render_threads.append("worker")
        else:
            render_threads.append("event-loop")
        return b"%PDF-1.4 rendered"

    monkeypatch.setattr("api.routes_projects.render_presentation_pdf", fake_render)

    response = client.get(f"/api/projects/{project_id}/presentation.pdf", headers=headers)

    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 rendered"
    assert render_threads == ["worker"]


def test_boolean_result_value_is_rejected(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]

    response = client.post(
        f"/api/projects/{project_id}/results",
        json={"name": "flag", "value": True},
        headers=headers,
    )

    assert response.status_code == 400
    stored = client.get(f"/api/projects/{project_id}", headers=headers).json()
    assert stored["experiment_results"] == {}


def test_downloaded_files_are_attachments(client) -> None:
    headers = _sign_up(client)
    project_id = _generate(client, headers)["id"]
    uploaded = client.post(
        f"/api/projects/{project_id}/files",
        files={"file": ("page.html", b"<script>alert(1)</script>", "text/html")},
        headers=headers,
    )

    downloaded = client.get(uploaded.json()["file_url"].replace("http://testserver", ""))

    assert downloaded.status_code == 200
    assert downloaded.headers["content-disposition"].startswith("attachment")
