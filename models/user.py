from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    full_name: str = ""
    password_hash: str
    created_at: datetime = Field(default_factory=utc_now)

    def public(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email, "full_name": self.full_name}
