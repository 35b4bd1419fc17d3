"""
Lyrics agent endpoints.

``GET`` creates a conversation thread, ``POST`` sends a message to it.
"""

from typing import Any
from fastapi import APIRouter, Depends

from api.dependencies import get_lyrics_service

from .interfaces import ILyricsService
from .models import AgentReply, SendMessageRequest

router = APIRouter()


@router.get("")
async def create_thread(
    service: ILyricsService = Depends(get_lyrics_service),
) -> Any:
    """Create a new agent thread."""
    return await service.create_thread()


@router.post("", response_model=AgentReply)
async def send_message(
    request: SendMessageRequest,
    service: ILyricsService = Depends(get_lyrics_service),
) -> AgentReply:
    """Send a message to a thread and return the agent's final answer."""
    return await service.send_message(request)
