# sharpedge/routers/chat_routes.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sharpedge.dependencies import get_schedule_service
from sharpedge.services.context import build_chat_preamble
from sharpedge.services.schedule import ScheduleService

router = APIRouter(tags=["chat"])


class PreambleRequest(BaseModel):
    message: str
    league: Optional[str] = None


@router.get("/context")
async def current_context(service: ScheduleService = Depends(get_schedule_service)):
    snap = service.context
    return {"league": snap.league or None, "context": snap.text}


@router.post("/chat/preamble")
async def chat_preamble(body: PreambleRequest, service: ScheduleService = Depends(get_schedule_service)):
    """Wraps a user message with the current board digest, ready to forward to the model."""
    snap = service.context
    # a non-empty board is labelled with the league it was built from
    league = (snap.league if snap.text else body.league or "NHL").upper()
    return {"prompt": build_chat_preamble(snap.text, league, body.message)}
