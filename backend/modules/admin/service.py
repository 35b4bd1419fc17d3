"""
Admin service implementation.

A stateless proxy over the backend's admin API. Apart from field-presence
checks it holds no business logic and never retries.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

from shared.config import get_settings
from shared.http_client import ServiceClient
from modules.auth.service import create_backend_client

from .interfaces import IAdminService
from .models import (
    AssignSetlistRequest,
    AssignSongRequest,
    CreditsUpdateRequest,
    DeleteResult,
)
from .exceptions import InvalidAmountError, MissingFieldsError

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/api/admin"


def _segment(value: str) -> str:
    """Quote a single path segment."""
    return quote(value, safe="")


def _user_path(user_id: str, *parts: str) -> str:
    segments = [ADMIN_PREFIX, "users", _segment(user_id), *(_segment(p) for p in parts)]
    return "/".join(segments)


def _require(fields: dict[str, Any]) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise MissingFieldsError(list(fields), missing)


class AdminService(IAdminService):
    """Implementation of the admin console proxy."""

    def __init__(self, backend: Optional[ServiceClient] = None):
        self._backend = backend or create_backend_client(get_settings())

    # Users

    async def list_users(self, token: str) -> Any:
        return await self._backend.forward("GET", f"{ADMIN_PREFIX}/users", token=token)

    async def get_user(self, token: str, user_id: str) -> Any:
        return await self._backend.forward("GET", _user_path(user_id), token=token)

    async def delete_user(self, token: str, user_id: str) -> DeleteResult:
        await self._backend.forward(
            "DELETE", _user_path(user_id), token=token, expect_body=False
        )
        logger.info(f"Admin deleted user {user_id}")
        return DeleteResult(success=True, message="User deleted successfully")

    async def update_user_credits(
        self,
        token: str,
        user_id: str,
        request: CreditsUpdateRequest,
    ) -> Any:
        amount = request.amount
        # bool is an int subclass but not a JSON number
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise InvalidAmountError(amount)

        result = await self._backend.forward(
            "PATCH",
            _user_path(user_id, "credits"),
            token=token,
            json={"amount": amount, "operation": request.operation},
        )
        logger.info(f"Admin updated credits for user {user_id}: {request.operation} {amount}")
        return result

    async def impersonate_user(self, token: str, user_id: str) -> Any:
        result = await self._backend.forward(
            "POST", _user_path(user_id, "impersonate"), token=token
        )
        logger.info(f"Admin issued impersonation token for user {user_id}")
        return result

    # Songs

    async def list_user_songs(self, token: str, user_id: str) -> Any:
        return await self._backend.forward("GET", _user_path(user_id, "songs"), token=token)

    async def create_user_song(self, token: str, user_id: str, song: dict[str, Any]) -> Any:
        return await self._backend.forward(
            "POST", _user_path(user_id, "songs"), token=token, json=song
        )

    async def update_user_song(
        self,
        token: str,
        user_id: str,
        song_id: str,
        song: dict[str, Any],
    ) -> Any:
        return await self._backend.forward(
            "PUT", _user_path(user_id, "songs", song_id), token=token, json=song
        )

    async def delete_user_song(self, token: str, user_id: str, song_id: str) -> DeleteResult:
        await self._backend.forward(
            "DELETE", _user_path(user_id, "songs", song_id), token=token, expect_body=False
        )
        return DeleteResult(success=True)

    # Setlists

    async def list_user_setlists(self, token: str, user_id: str) -> Any:
        return await self._backend.forward("GET", _user_path(user_id, "setlists"), token=token)

    async def create_user_setlist(
        self,
        token: str,
        user_id: str,
        setlist: dict[str, Any],
    ) -> Any:
        return await self._backend.forward(
            "POST", _user_path(user_id, "setlists"), token=token, json=setlist
        )

    async def update_user_setlist(
        self,
        token: str,
        user_id: str,
        setlist_id: str,
        setlist: dict[str, Any],
    ) -> Any:
        return await self._backend.forward(
            "PUT", _user_path(user_id, "setlists", setlist_id), token=token, json=setlist
        )

    async def delete_user_setlist(
        self,
        token: str,
        user_id: str,
        setlist_id: str,
    ) -> DeleteResult:
        await self._backend.forward(
            "DELETE",
            _user_path(user_id, "setlists", setlist_id),
            token=token,
            expect_body=False,
        )
        return DeleteResult(success=True)

    # Library

    async def assign_song(self, token: str, request: AssignSongRequest) -> Any:
        _require({"songId": request.song_id, "targetUserId": request.target_user_id})

        result = await self._backend.forward(
            "POST",
            f"{ADMIN_PREFIX}/assign-song",
            token=token,
            json={"songId": request.song_id, "targetUserId": request.target_user_id},
        )
        logger.info(f"Admin assigned song {request.song_id} to user {request.target_user_id}")
        return result

    async def assign_setlist(self, token: str, request: AssignSetlistRequest) -> Any:
        _require({"setlistId": request.setlist_id, "targetUserId": request.target_user_id})

        copy_songs = True if request.copy_songs is None else request.copy_songs
        result = await self._backend.forward(
            "POST",
            f"{ADMIN_PREFIX}/assign-setlist",
            token=token,
            json={
                "setlistId": request.setlist_id,
                "targetUserId": request.target_user_id,
                "copySongs": copy_songs,
            },
        )
        logger.info(
            f"Admin assigned setlist {request.setlist_id} to user {request.target_user_id}"
        )
        return result

    async def list_all_songs(self, token: str) -> Any:
        return await self._backend.forward("GET", f"{ADMIN_PREFIX}/all-songs", token=token)

    async def list_all_setlists(self, token: str) -> Any:
        return await self._backend.forward("GET", f"{ADMIN_PREFIX}/all-setlists", token=token)
