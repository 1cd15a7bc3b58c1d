from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict

from agents.analyst import AnalystAgent
from agents.planner import PlannerAgent
from api.deps import get_analyst_agent, get_current_user, get_notifier, get_planner_agent, get_workspace
from api.routes_projects import fail
from models.advice import DataAnalysis
from models.user import User
from services.errors import ScienceFairError
from services.notifier import Notifier
from services.workspace import ProjectWorkspace


router = APIRouter(prefix="/projects", tags=["advisor"])


class ResearchRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    question: str = ""


@router.post("/{project_id}/analyze-data", response_model=DataAnalysis)
async def analyze_data(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    analyst: AnalystAgent = Depends(get_analyst_agent),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> DataAnalysis:
    try:
        project = workspace.fetch(project_id)
        analysis = await analyst.analyze_data(project.title, project.experiment_results)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(user.id, "Analysis Complete", "Your experiment data has been analyzed.")
    return analysis


@router.post("/{project_id}/analyze-notes", status_code=status.HTTP_200_OK)
async def analyze_notes(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    analyst: AnalystAgent = Depends(get_analyst_agent),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, str]:
    try:
        project = workspace.fetch(project_id)
        summary = await analyst.analyze_notes(project.title, project.observation_notes)
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return {"analysis": summary}


@router.post("/{project_id}/analyze", status_code=status.HTTP_200_OK)
async def analyze_project(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    analyst: AnalystAgent = Depends(get_analyst_agent),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, str]:
    try:
        project = workspace.fetch(project_id)
        review = await analyst.analyze_project(
            project.title, project.description, project.hypothesis, project.materials
        )
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(
        user.id, "Analysis Complete", "AI has analyzed your project and provided suggestions."
    )
    return {"analysis": review}


@router.post("/{project_id}/plan-experiment", status_code=status.HTTP_200_OK)
async def plan_experiment(
    project_id: str,
    workspace: ProjectWorkspace = Depends(get_workspace),
    planner: PlannerAgent = Depends(get_planner_agent),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, str]:
    try:
        project = workspace.fetch(project_id)
        plan = await planner.plan_experiment(
            project.title, project.description, project.hypothesis, project.materials
        )
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    return {"plan": plan}


@router.post("/{project_id}/research", status_code=status.HTTP_200_OK)
async def research_question(
    project_id: str,
    payload: ResearchRequest,
    workspace: ProjectWorkspace = Depends(get_workspace),
    planner: PlannerAgent = Depends(get_planner_agent),
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> dict[str, str]:
    try:
        project = workspace.fetch(project_id)
        answer = await planner.research_question(
            payload.question, project.title, project.description
        )
    except ScienceFairError as err:
        raise await fail(notifier, user, err) from err
    await notifier.notify(
        user.id, "Research Assistant Response", "Your question has been answered."
    )
    return {"answer": answer}
