"""
Zamar web API package.

Provides the FastAPI application for the Zamar admin proxy, Stripe credit
reloads and the lyrics agent relay.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
