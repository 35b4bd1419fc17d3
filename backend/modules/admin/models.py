"""
Admin module data models.

Request bodies keep the camelCase field names the admin console and the
backend already use.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class CreditsUpdateRequest(BaseModel):
    """
    Manual credit adjustment.

    ``amount`` is validated by the service so non-numeric values get a
    dedicated error instead of a schema error.
    """

    amount: Any = Field(None, description="Credits to add, or the new balance")
    operation: Optional[str] = Field(None, description="'add' or 'set'")


class AssignSongRequest(BaseModel):
    """Copy a song into another user's library."""

    song_id: Optional[str] = Field(None, alias="songId")
    target_user_id: Optional[str] = Field(None, alias="targetUserId")

    model_config = {"populate_by_name": True}


class AssignSetlistRequest(BaseModel):
    """Copy a setlist (and optionally its songs) to another user."""

    setlist_id: Optional[str] = Field(None, alias="setlistId")
    target_user_id: Optional[str] = Field(None, alias="targetUserId")
    copy_songs: Optional[bool] = Field(None, alias="copySongs")

    model_config = {"populate_by_name": True}


class DeleteResult(BaseModel):
    """Response for successful admin deletes."""

    success: bool = True
    message: Optional[str] = None
