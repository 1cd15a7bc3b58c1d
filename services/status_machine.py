from __future__ import annotations

from typing import Literal

from models.project import VALID_STATUSES, ProjectStatus
from services.errors import InputValidationError


Direction = Literal["next", "prev"]

STATUS_ORDER: tuple[ProjectStatus, ...] = VALID_STATUSES  # draft, in_progress, completed

STATUS_LABELS: dict[str, str] = {
    "draft": "Draft",
    "in_progress": "In Progress",
    "completed": "Completed",
}


def status_index(status: str) -> int:
    try:
        return STATUS_ORDER.index(status)
    except ValueError:
        return 0


def next_status(status: str, direction: str) -> ProjectStatus:
    """Return the status one step away in ``direction``, clamped to the ends.

    At a boundary the current status comes back unchanged; callers compare
    the result with the input to decide whether anything needs persisting.
    """
    if direction == "next":
        step = 1
    elif direction == "prev":
        step = -1
    else:
        raise InputValidationError(f"Unknown direction '{direction}'. Use 'next' or 'prev'.")

    index = status_index(status)
    new_index = max(0, min(len(STATUS_ORDER) - 1, index + step))
    return STATUS_ORDER[new_index]


def progress(status: str) -> float:
    return (status_index(status) + 1) / len(STATUS_ORDER) * 100


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, STATUS_LABELS["draft"])
