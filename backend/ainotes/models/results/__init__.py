"""Result models for service operations."""

from ainotes.models.results.auth import (
    AuthResult, SignInResult, SignUpResult, SignOutResult, UserResult,
)

__all__ = [
    "AuthResult", "SignInResult", "SignUpResult", "SignOutResult", "UserResult",
]
