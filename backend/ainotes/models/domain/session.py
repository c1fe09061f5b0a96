"""Session and auth request models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Session(BaseModel):
    """Proof of authenticated identity issued by the auth provider."""
    user_id: str
    email: Optional[str] = None
    access_token: str
    expires_at: Optional[datetime] = None


class SignInCredentials(BaseModel):
    email: str
    password: str


class SignUpCredentials(SignInCredentials):
    password_confirm: str
