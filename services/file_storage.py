from __future__ import annotations

from pathlib import Path, PurePosixPath
from uuid import uuid4

from logging_config import get_logger
from services.errors import StoreError


logger = get_logger(__name__)


class FileStorage:
    """Blob store for project attachments served back under ``/files``."""

    def __init__(self, root_dir: Path, public_base_url: str):
        self.root_dir = root_dir
        self.public_base_url = public_base_url.rstrip("/")
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def upload(self, project_id: str, file_name: str, content: bytes) -> str:
        """Store ``content`` and return its object path relative to the root."""
        suffix = PurePosixPath(file_name).suffix
        object_path = f"{project_id}/{uuid4().hex}{suffix}"
        target = self.root_dir / object_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as err:
            logger.error("blob_upload_failed", project_id=project_id, error=str(err))
            raise StoreError(f"Failed to upload '{file_name}'") from err
        logger.info("blob_uploaded", project_id=project_id, object_path=object_path, size=len(content))
        return object_path

    def public_url(self, object_path: str) -> str:
        return f"{self.public_base_url}/files/{object_path}"

    def resolve(self, object_path: str) -> Path:
        root = self.root_dir.resolve()
        target = (root / object_path).resolve()
        if root not in target.parents or not target.is_file():
            raise FileNotFoundError(object_path)
        return target
