"""
Lyrics module.

Relays AI lyric-search conversations to the LangGraph agent service.

Public API:
- ILyricsService: Interface for the agent relay
- SendMessageRequest / AgentReply: Message run request and result
- Lyrics exceptions: ThreadCreationError, MessageSendError, MissingMessageError
"""

from .interfaces import ILyricsService
from .models import AgentReply, SendMessageRequest
from .exceptions import (
    LyricsAgentError,
    MessageSendError,
    MissingMessageError,
    ThreadCreationError,
)

__all__ = [
    # Interface
    "ILyricsService",
    # Models
    "AgentReply",
    "SendMessageRequest",
    # Exceptions
    "LyricsAgentError",
    "MessageSendError",
    "MissingMessageError",
    "ThreadCreationError",
]
