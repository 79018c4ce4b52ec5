# sharpedge/dependencies.py
from __future__ import annotations

from fastapi import Request

from sharpedge.services.schedule import ScheduleService


def get_schedule_service(request: Request) -> ScheduleService:
    return request.app.state.schedule
