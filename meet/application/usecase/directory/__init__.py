"""Directory use cases."""

from .list_users import ListUsersUseCase
from .update_profile import UpdateProfileUseCase

__all__ = ["ListUsersUseCase", "UpdateProfileUseCase"]
