"""
Lyrics module data models.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    """A user turn sent to the lyrics agent."""

    thread_id: Optional[str] = None
    message: Optional[str] = None
    assistant_id: Optional[str] = Field(
        None, description="Agent to run; defaults to the configured assistant"
    )


class AgentReply(BaseModel):
    """
    Result of one agent run.

    ``message`` is the content of the last AI message seen in the stream,
    passed through as the agent sent it (a string or a list of content
    blocks), or empty if there was none. ``raw`` is the full event stream
    text.
    """

    message: Any = ""
    raw: str = ""
