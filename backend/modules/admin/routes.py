"""
Admin API endpoints.

Every route requires the caller's own bearer token to belong to an admin
and forwards that same token to the backend's admin API. Backend errors
are relayed with their original status and body.
"""

from typing import Any
from fastapi import APIRouter, Body, Depends

from api.middleware.auth import require_admin
from api.dependencies import get_admin_service
from modules.auth.models import TokenContext

from .interfaces import IAdminService
from .models import (
    AssignSetlistRequest,
    AssignSongRequest,
    CreditsUpdateRequest,
    DeleteResult,
)

router = APIRouter()


# Users


@router.get("/users")
async def list_users(
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    """List all users."""
    return await service.list_users(context.bearer_token)


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.get_user(context.bearer_token, user_id)


@router.delete("/users/{user_id}", response_model=DeleteResult)
async def delete_user(
    user_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> DeleteResult:
    return await service.delete_user(context.bearer_token, user_id)


@router.patch("/users/{user_id}/credits")
async def update_user_credits(
    user_id: str,
    request: CreditsUpdateRequest,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    """Add to or set a user's credit balance."""
    return await service.update_user_credits(context.bearer_token, user_id, request)


@router.post("/users/{user_id}/impersonate")
async def impersonate_user(
    user_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    """
    Issue an impersonation token for a user.

    The console sends it back in the impersonation header on the requests
    it makes as that user.
    """
    return await service.impersonate_user(context.bearer_token, user_id)


# Songs


@router.get("/users/{user_id}/songs")
async def list_user_songs(
    user_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.list_user_songs(context.bearer_token, user_id)


@router.post("/users/{user_id}/songs")
async def create_user_song(
    user_id: str,
    song: dict[str, Any] = Body(...),
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.create_user_song(context.bearer_token, user_id, song)


@router.put("/users/{user_id}/songs/{song_id}")
async def update_user_song(
    user_id: str,
    song_id: str,
    song: dict[str, Any] = Body(...),
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.update_user_song(context.bearer_token, user_id, song_id, song)


@router.delete("/users/{user_id}/songs/{song_id}", response_model=DeleteResult)
async def delete_user_song(
    user_id: str,
    song_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> DeleteResult:
    return await service.delete_user_song(context.bearer_token, user_id, song_id)


# Setlists


@router.get("/users/{user_id}/setlists")
async def list_user_setlists(
    user_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.list_user_setlists(context.bearer_token, user_id)


@router.post("/users/{user_id}/setlists")
async def create_user_setlist(
    user_id: str,
    setlist: dict[str, Any] = Body(...),
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.create_user_setlist(context.bearer_token, user_id, setlist)


@router.put("/users/{user_id}/setlists/{setlist_id}")
async def update_user_setlist(
    user_id: str,
    setlist_id: str,
    setlist: dict[str, Any] = Body(...),
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.update_user_setlist(
        context.bearer_token, user_id, setlist_id, setlist
    )


@router.delete("/users/{user_id}/setlists/{setlist_id}", response_model=DeleteResult)
async def delete_user_setlist(
    user_id: str,
    setlist_id: str,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> DeleteResult:
    return await service.delete_user_setlist(context.bearer_token, user_id, setlist_id)


# Library


@router.post("/assign-song")
async def assign_song(
    request: AssignSongRequest,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    """Copy a song into another user's library."""
    return await service.assign_song(context.bearer_token, request)


@router.post("/assign-setlist")
async def assign_setlist(
    request: AssignSetlistRequest,
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    """Copy a setlist, and by default its songs, to another user."""
    return await service.assign_setlist(context.bearer_token, request)


@router.get("/all-songs")
async def list_all_songs(
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.list_all_songs(context.bearer_token)


@router.get("/all-setlists")
async def list_all_setlists(
    context: TokenContext = Depends(require_admin),
    service: IAdminService = Depends(get_admin_service),
) -> Any:
    return await service.list_all_setlists(context.bearer_token)
