"""
Admin module interface.

Every operation forwards to the backend's admin API with the admin's own
bearer token. Non-2xx answers are raised as UpstreamError so the API layer
can relay them unchanged.
"""

from typing import Any, Protocol, runtime_checkable

from .models import (
    AssignSetlistRequest,
    AssignSongRequest,
    CreditsUpdateRequest,
    DeleteResult,
)


@runtime_checkable
class IAdminService(Protocol):
    """Interface for the admin console proxy."""

    # Users

    async def list_users(self, token: str) -> Any:
        ...

    async def get_user(self, token: str, user_id: str) -> Any:
        ...

    async def delete_user(self, token: str, user_id: str) -> DeleteResult:
        ...

    async def update_user_credits(
        self,
        token: str,
        user_id: str,
        request: CreditsUpdateRequest,
    ) -> Any:
        """
        Adjust a user's credit balance through the backend.

        Raises:
            InvalidAmountError: If ``amount`` is not a JSON number
        """
        ...

    async def impersonate_user(self, token: str, user_id: str) -> Any:
        """
        Obtain an impersonation token for a user.

        The token is returned to the admin console, which passes it
        explicitly on the requests it makes as that user.
        """
        ...

    # Songs

    async def list_user_songs(self, token: str, user_id: str) -> Any:
        ...

    async def create_user_song(self, token: str, user_id: str, song: dict[str, Any]) -> Any:
        ...

    async def update_user_song(
        self,
        token: str,
        user_id: str,
        song_id: str,
        song: dict[str, Any],
    ) -> Any:
        ...

    async def delete_user_song(self, token: str, user_id: str, song_id: str) -> DeleteResult:
        ...

    # Setlists

    async def list_user_setlists(self, token: str, user_id: str) -> Any:
        ...

    async def create_user_setlist(
        self,
        token: str,
        user_id: str,
        setlist: dict[str, Any],
    ) -> Any:
        ...

    async def update_user_setlist(
        self,
        token: str,
        user_id: str,
        setlist_id: str,
        setlist: dict[str, Any],
    ) -> Any:
        ...

    async def delete_user_setlist(
        self,
        token: str,
        user_id: str,
        setlist_id: str,
    ) -> DeleteResult:
        ...

    # Library

    async def assign_song(self, token: str, request: AssignSongRequest) -> Any:
        """
        Copy a song to another user.

        Raises:
            MissingFieldsError: If ``songId`` or ``targetUserId`` is missing;
                the backend is not called
        """
        ...

    async def assign_setlist(self, token: str, request: AssignSetlistRequest) -> Any:
        """
        Copy a setlist to another user. ``copySongs`` defaults to true.

        Raises:
            MissingFieldsError: If ``setlistId`` or ``targetUserId`` is missing;
                the backend is not called
        """
        ...

    async def list_all_songs(self, token: str) -> Any:
        ...

    async def list_all_setlists(self, token: str) -> Any:
        ...
