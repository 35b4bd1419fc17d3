"""
User-facing message catalog.

Only the generic texts shown to end users are localized; diagnostic
messages (missing fields, invalid signatures) stay in English.
"""

from typing import Optional

from .config import get_settings

DEFAULT_LOCALE = "he"

MESSAGES: dict[str, dict[str, str]] = {
    "he": {
        "not_logged_in": "לא מחובר",
        "forbidden": "אין הרשאה - גישה למנהלים בלבד",
        "internal_error": "שגיאת שרת פנימית",
        "checkout_failed": "שגיאה ביצירת ההזמנה",
        "payments_unavailable": "מערכת התשלומים אינה מוגדרת",
    },
    "en": {
        "not_logged_in": "Unauthorized",
        "forbidden": "Forbidden - Admin access only",
        "internal_error": "Internal server error",
        "checkout_failed": "Failed to create checkout session",
        "payments_unavailable": "Payment system is not configured",
    },
}


def get_message(key: str, locale: Optional[str] = None) -> str:
    """
    Look up a user-facing message.

    Falls back to the default locale, then to the key itself.
    """
    locale = locale or get_settings().locale
    catalog = MESSAGES.get(locale) or MESSAGES[DEFAULT_LOCALE]
    return catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
