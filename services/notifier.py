from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Literal


Variant = Literal["default", "destructive"]


class Notifier:
    """Fan-out of transient user notifications to open SSE streams."""

    def __init__(self) -> None:
        self.subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)

    def subscribe(self, user_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self.subscribers[user_id].add(queue)
        return queue

    def unsubscribe(self, user_id: str, queue: asyncio.Queue) -> None:
        self.subscribers[user_id].discard(queue)
        if not self.subscribers[user_id]:
            self.subscribers.pop(user_id, None)

    async def notify(
        self,
        user_id: str,
        title: str,
        description: str = "",
        variant: Variant = "default",
        **extra: Any,
    ) -> None:
        if user_id not in self.subscribers:
            return
        message = {
            "event": "notification",
            "data": {
                "title": title,
                "description": description,
                "variant": variant,
                "at": datetime.now(timezone.utc).isoformat(),
                **extra,
            },
        }
        for queue in list(self.subscribers[user_id]):
            await queue.put(message)

    async def error(self, user_id: str, title: str, description: str) -> None:
        await self.notify(user_id, title, description, variant="destructive")
