"""Health and transcript log routes."""

from __future__ import annotations

import asyncio
import json
from typing import Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from ..schemas import LogsResponse

STREAM_POLL_SECONDS = 0.5


def build_health_router(console) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @router.get("/api/logs", response_model=LogsResponse)
    def api_logs(limit: Optional[int] = None, event: Optional[str] = None) -> LogsResponse:
        entries = console.logs.history(limit, event)
        return LogsResponse(events=[entry.to_dict() for entry in entries])

    @router.get("/api/logs/stream")
    def api_logs_stream(request: Request, once: bool = False, after: int = 0):
        # NDJSON: one entry per line, then new entries as they are appended.
        async def entry_generator():
            entries, last_id = console.logs.snapshot_after(after)
            for entry in entries:
                yield json.dumps(entry.to_dict()) + "\n"
            if once:
                return
            while True:
                if await request.is_disconnected():
                    break
                entries, last_id = console.logs.snapshot_after(last_id)
                for entry in entries:
                    yield json.dumps(entry.to_dict()) + "\n"
                await asyncio.sleep(STREAM_POLL_SECONDS)

        return StreamingResponse(entry_generator(), media_type="application/x-ndjson")

    return router


__all__ = ["build_health_router"]
