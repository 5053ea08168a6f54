"""Export account-related domain entities for use across the application."""

from .user import Role, User

__all__ = ["User", "Role"]
