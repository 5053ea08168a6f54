from __future__ import annotations

"""User account endpoints: the caller's own profile and the admin listing."""

from .routes import router

__all__ = ["router"]
