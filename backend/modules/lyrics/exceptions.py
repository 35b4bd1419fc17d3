"""
Lyrics module exceptions.
"""

from shared.exceptions import ValidationError, ZamarError


class LyricsAgentError(ZamarError):
    """Raised when the agent service call fails for any reason."""

    def __init__(self, message: str, code: str = "AGENT_ERROR"):
        super().__init__(message, code=code)


class ThreadCreationError(LyricsAgentError):
    def __init__(self):
        super().__init__("Failed to create thread", code="THREAD_CREATE_FAILED")


class MessageSendError(LyricsAgentError):
    def __init__(self):
        super().__init__("Failed to send message", code="MESSAGE_SEND_FAILED")


class MissingMessageError(ValidationError):
    """Raised when a send request lacks a thread id or message."""

    def __init__(self):
        super().__init__("Missing thread_id or message", code="MISSING_MESSAGE")
