"""Authentication use cases."""

from .get_current_user import GetCurrentUserUseCase
from .login import LoginUseCase
from .logout import LogoutUseCase
from .register import RegisterUseCase

__all__ = [
    "GetCurrentUserUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RegisterUseCase",
]
