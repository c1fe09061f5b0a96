"""
Result models for auth provider operations.
"""

from pydantic import BaseModel
from typing import Optional

from ainotes.models.domain.session import Session


class AuthResult(BaseModel):
    """Base result for auth provider operations."""
    success: bool
    error: Optional[str] = None


class SignInResult(AuthResult):
    """Result of a password sign-in."""
    session: Optional[Session] = None


class SignUpResult(AuthResult):
    """Result of registering a new account.

    ``session`` is empty when the provider requires email confirmation.
    """
    session: Optional[Session] = None
    user_id: Optional[str] = None


class SignOutResult(AuthResult):
    """Result of revoking a session."""
    pass


class UserResult(AuthResult):
    """Result of looking up the user behind an access token."""
    user_id: Optional[str] = None
    email: Optional[str] = None
