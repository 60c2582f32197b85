"""FastAPI 应用：快照查询与追踪开关。"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI
from pydantic import BaseModel, Field

from stepclock.config_store import UserSettings
from stepclock.service import ActivityService


class SettingsPayload(BaseModel):
    milestone_size: int = Field(..., gt=0)
    inactivity_timeout_minutes: float = Field(..., gt=0.0)
    step_goal: int = Field(..., gt=0)


def create_app(service: Optional[ActivityService] = None) -> FastAPI:
    """构建 FastAPI 应用并注册基础路由。"""

    app = FastAPI(title="stepclock")
    _service = service or ActivityService()
    app.state.service = _service

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/snapshot", tags=["activity"])
    async def snapshot() -> dict[str, Any]:
        return _service.snapshot_payload()

    @app.post("/tracking/start", tags=["activity"])
    def start_tracking() -> dict[str, Any]:
        _service.start()
        return _service.snapshot_payload()

    @app.post("/tracking/stop", tags=["activity"])
    def stop_tracking() -> dict[str, Any]:
        _service.stop()
        return _service.snapshot_payload()

    @app.post("/tracking/toggle", tags=["activity"])
    def toggle_tracking() -> dict[str, Any]:
        _service.toggle()
        return _service.snapshot_payload()

    @app.get("/settings", tags=["settings"])
    async def get_settings() -> dict[str, Any]:
        return _service.get_settings().to_dict()

    @app.put("/settings", tags=["settings"])
    def put_settings(payload: SettingsPayload) -> dict[str, Any]:
        settings = UserSettings(
            milestone_size=payload.milestone_size,
            inactivity_timeout_minutes=payload.inactivity_timeout_minutes,
            step_goal=payload.step_goal,
        )
        return _service.update_settings(settings).to_dict()

    return app
