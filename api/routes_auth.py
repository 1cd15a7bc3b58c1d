from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from api.deps import get_current_user, get_settings, get_user_service, require_api_key
from config import Settings
from models.user import User
from services.auth import issue_session_token
from services.errors import ScienceFairError
from services.user_service import UserService


router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(require_api_key)])


class SignUpRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    full_name: str = ""


class SignInRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


def _session_payload(user: User, settings: Settings) -> dict:
    return {
        "access_token": issue_session_token(
            user.id, settings.session_secret, settings.session_ttl_seconds
        ),
        "token_type": "bearer",
        "expires_in": settings.session_ttl_seconds,
        "user": user.public(),
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: SignUpRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> dict:
    try:
        user = users.sign_up(payload.email, payload.password, payload.full_name)
    except ScienceFairError as err:
        raise HTTPException(status_code=err.status_code, detail=str(err)) from err
    return _session_payload(user, settings)


@router.post("/signin", status_code=status.HTTP_200_OK)
def sign_in(
    payload: SignInRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> dict:
    try:
        user = users.sign_in(payload.email, payload.password)
    except ScienceFairError as err:
        raise HTTPException(status_code=err.status_code, detail=str(err)) from err
    return _session_payload(user, settings)


@router.get("/session", status_code=status.HTTP_200_OK)
def current_session(user: User = Depends(get_current_user)) -> dict:
    return {"user": user.public()}
