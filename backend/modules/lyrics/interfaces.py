"""
Lyrics module interface.

The lyrics agent runs on a LangGraph deployment; this module only relays
thread creation and message runs to it.
"""

from typing import Any, Protocol, runtime_checkable

from .models import AgentReply, SendMessageRequest


@runtime_checkable
class ILyricsService(Protocol):
    """Interface for the lyrics agent relay."""

    async def create_thread(self) -> dict[str, Any]:
        """
        Create a conversation thread.

        Returns:
            The thread object exactly as the agent service returned it

        Raises:
            ThreadCreationError: If the agent service call failed
        """
        ...

    async def send_message(self, request: SendMessageRequest) -> AgentReply:
        """
        Run the agent on one human message and wait for the whole stream.

        Raises:
            MissingMessageError: If ``thread_id`` or ``message`` is empty
            MessageSendError: If the agent service call failed
        """
        ...
