"""
Lyrics agent relay.

Creates threads on the LangGraph agent service and runs the lyrics
assistant on a user message. Runs are requested in streaming mode but the
stream is read to the end and reduced to the final AI message.
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import quote

from shared.config import Settings, get_settings
from shared.exceptions import ZamarError
from shared.http_client import ServiceClient

from .interfaces import ILyricsService
from .models import AgentReply, SendMessageRequest
from .exceptions import MessageSendError, MissingMessageError, ThreadCreationError

logger = logging.getLogger(__name__)

THREADS_PATH = "/threads"
SSE_DATA_PREFIX = "data: "


def create_agent_client(settings: Settings) -> ServiceClient:
    """Build a client for the LangGraph agent service from settings."""
    return ServiceClient(
        "langgraph",
        settings.langgraph_url,
        timeout=settings.http_timeout,
        default_headers={"x-api-key": settings.langgraph_api_key},
    )


def extract_last_ai_message(stream_text: str) -> Any:
    """
    Reduce a ``values`` event stream to the last AI message content.

    Each ``data:`` line carries the full graph state; a line whose last
    message is an AI message with content replaces the answer so far.
    Lines that are not JSON are skipped. Content is returned as sent, so
    it may be a list of content blocks rather than a string.
    """
    answer = ""
    for line in stream_text.split("\n"):
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        try:
            data = json.loads(line[len(SSE_DATA_PREFIX):])
        except ValueError:
            continue

        messages = data.get("messages") if isinstance(data, dict) else None
        if not isinstance(messages, list) or not messages:
            continue

        last = messages[-1]
        if isinstance(last, dict) and last.get("type") == "ai" and last.get("content"):
            answer = last["content"]
    return answer


class LyricsService(ILyricsService):
    """Implementation of the lyrics agent relay."""

    def __init__(
        self,
        agent: Optional[ServiceClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._agent = agent or create_agent_client(self._settings)

    async def create_thread(self) -> dict[str, Any]:
        try:
            thread = await self._agent.forward("POST", THREADS_PATH, json={})
        except ZamarError as e:
            logger.error(f"LangGraph thread creation error: {e.message}")
            raise ThreadCreationError() from e

        logger.info("Created agent thread")
        return thread

    async def send_message(self, request: SendMessageRequest) -> AgentReply:
        if not request.thread_id or not request.message:
            raise MissingMessageError()

        assistant_id = request.assistant_id or self._settings.langgraph_assistant_id
        thread_id = quote(request.thread_id, safe="")
        path = f"{THREADS_PATH}/{thread_id}/runs/stream"
        payload = {
            "input": {
                "messages": [{"type": "human", "content": request.message}],
            },
            "assistant_id": assistant_id,
            "stream_mode": ["values"],
            "config": {"recursion_limit": self._settings.langgraph_recursion_limit},
        }

        try:
            response = await self._agent.request("POST", path, json=payload)
        except ZamarError as e:
            logger.error(f"LangGraph message error: {e.message}")
            raise MessageSendError() from e

        if not response.is_success:
            logger.error(
                f"LangGraph message error: status {response.status_code} "
                f"for thread {request.thread_id}"
            )
            raise MessageSendError()

        text = response.text
        return AgentReply(message=extract_last_ai_message(text), raw=text)
