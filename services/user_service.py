from __future__ import annotations

import json
import re
from pathlib import Path
from uuid import uuid4

from logging_config import get_logger
from models.user import User
from services.auth import hash_password, verify_password
from services.errors import AuthError, InputValidationError, StoreError


logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserService:
    def __init__(self, data_dir: Path):
        self.users_dir = data_dir / "users"
        self.users_dir.mkdir(parents=True, exist_ok=True)

    def _user_file(self, user_id: str) -> Path:
        return self.users_dir / f"{user_id}.json"

    def _load(self, path: Path) -> User:
        try:
            with path.open("r", encoding="utf-8") as f:
                return User.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError) as err:
            raise StoreError(f"Failed to read {path.name}") from err

    def find_by_email(self, email: str) -> User | None:
        needle = email.strip().lower()
        for path in self.users_dir.glob("*.json"):
            user = self._load(path)
            if user.email == needle:
                return user
        return None

    def get_user(self, user_id: str) -> User | None:
        path = self._user_file(user_id)
        if not path.exists():
            return None
        return self._load(path)

    def sign_up(self, email: str, password: str, full_name: str = "") -> User:
        normalized = email.strip().lower()
        if not _EMAIL_RE.match(normalized):
            raise InputValidationError("Please enter a valid email address.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InputValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        if self.find_by_email(normalized) is not None:
            raise AuthError("User already registered")

        user = User(
            id=uuid4().hex,
            email=normalized,
            full_name=full_name.strip(),
            password_hash=hash_password(password),
        )
        try:
            with self._user_file(user.id).open("w", encoding="utf-8") as f:
                json.dump(user.model_dump(mode="json"), f, ensure_ascii=False, indent=2)
        except OSError as err:
            raise StoreError("Failed to save user") from err
        logger.info("user_signed_up", user_id=user.id)
        return user

    def sign_in(self, email: str, password: str) -> User:
        user = self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError("Invalid login credentials")
        logger.info("user_signed_in", user_id=user.id)
        return user
