from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from api.deps import get_current_user, get_notifier
from models.user import User
from services.notifier import Notifier


router = APIRouter(prefix="/notifications", tags=["stream"])


@router.get("/stream")
async def notification_stream(
    user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
) -> EventSourceResponse:
    queue = notifier.subscribe(user.id)

    async def event_generator():
        try:
            while True:
                try:
                    message = await asyncio.wait_for(queue.get(), timeout=15)
                    yield {
                        "event": message["event"],
                        "data": json.dumps(message["data"], ensure_ascii=False),
                    }
                except asyncio.TimeoutError:
                    yield {"event": "ping", "data": "{}"}
        finally:
            notifier.unsubscribe(user.id, queue)

    return EventSourceResponse(event_generator())
