"""服务状态路由"""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Request

from ... import __version__

router = APIRouter(prefix="/api", tags=["status"])


def api_response(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data, "timestamp": int(time.time() * 1000)}


@router.get("/status")
async def service_status(request: Request):
    state = request.app.state
    return api_response(
        {
            "status": "ok",
            "browser": state.collector is not None,
            "feedCount": await state.store.count(),
            "uptime": round(time.monotonic() - state.started_at, 1),
            "version": __version__,
        }
    )
