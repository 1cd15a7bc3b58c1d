from __future__ import annotations

import hashlib
import hmac
import secrets
import time


PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS
    ).hex()
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iterations, salt, expected = password_hash.split("$")
        rounds = int(iterations)
        salt_bytes = bytes.fromhex(salt)
    except ValueError:
        return False
    if scheme != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt_bytes, rounds).hex()
    return hmac.compare_digest(digest, expected)


def _sign(secret: str, user_id: str, expires_at: int) -> str:
    payload = f"{user_id}.{expires_at}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def issue_session_token(
    user_id: str,
    secret: str,
    ttl_seconds: int,
    now_ts: int | None = None,
) -> str:
    current = now_ts if now_ts is not None else int(time.time())
    expires_at = current + ttl_seconds
    return f"{user_id}.{expires_at}.{_sign(secret, user_id, expires_at)}"


def verify_session_token(
    token: str | None,
    secret: str,
    now_ts: int | None = None,
) -> str | None:
    """Return the user id carried by a valid, unexpired token, else ``None``."""
    if not token:
        return None
    parts = token.split(".")
    if len(parts) != 3:
        return None
    user_id, expires_raw, signature = parts
    try:
        expires_at = int(expires_raw)
    except ValueError:
        return None

    current = now_ts if now_ts is not None else int(time.time())
    if current >= expires_at:
        return None
    if not hmac.compare_digest(_sign(secret, user_id, expires_at), signature):
        return None
    return user_id


def verify_api_key(provided: str | None, expected: str) -> bool:
    if not expected:
        return True
    if not provided:
        return False
    return hmac.compare_digest(provided, expected)
