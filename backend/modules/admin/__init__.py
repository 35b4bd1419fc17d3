"""
Admin module.

Proxies the admin console's user, song and setlist management to the
backend, behind the admin gate.

Public API:
- IAdminService: Interface for admin operations
- AssignSongRequest / AssignSetlistRequest / CreditsUpdateRequest: Request bodies
- Admin exceptions: MissingFieldsError, InvalidAmountError
"""

from .interfaces import IAdminService
from .models import (
    AssignSetlistRequest,
    AssignSongRequest,
    CreditsUpdateRequest,
    DeleteResult,
)
from .exceptions import InvalidAmountError, MissingFieldsError

__all__ = [
    # Interface
    "IAdminService",
    # Models
    "AssignSetlistRequest",
    "AssignSongRequest",
    "CreditsUpdateRequest",
    "DeleteResult",
    # Exceptions
    "InvalidAmountError",
    "MissingFieldsError",
]
