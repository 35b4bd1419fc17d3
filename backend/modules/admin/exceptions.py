"""
Admin module exceptions.

These exceptions are raised by the admin module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Any

from shared.exceptions import ValidationError


class MissingFieldsError(ValidationError):
    """Raised when a request lacks required fields."""

    def __init__(self, required: list[str], missing: list[str]):
        super().__init__(
            f"{' and '.join(required)} are required",
            code="MISSING_FIELDS",
            details={"missing": missing},
        )
        self.missing = missing


class InvalidAmountError(ValidationError):
    """Raised when a credit adjustment amount is not a number."""

    def __init__(self, amount: Any):
        super().__init__(
            "Invalid amount",
            code="INVALID_AMOUNT",
            details={"amount": repr(amount)},
        )
