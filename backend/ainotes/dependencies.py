"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ainotes.config import Settings
from ainotes.errors import UnauthorizedError
from ainotes.models import Session
from ainotes.services.auth_provider import AuthProvider
from ainotes.services.notes import NoteService
from ainotes.services.sessions import SessionVerifier
from ainotes.services.summarizer import Summarizer

bearer = HTTPBearer(auto_error=False)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service


def get_summarizer(request: Request) -> Summarizer:
    return request.app.state.summarizer


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth_provider


def get_session_verifier(request: Request) -> SessionVerifier:
    return request.app.state.session_verifier


def get_optional_session(
    request: Request,
    verifier: Annotated[SessionVerifier, Depends(get_session_verifier)],
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[Session]:
    """Session from the bearer token, falling back to the auth cookie."""
    token = None
    if creds is not None and creds.scheme.lower() == "bearer":
        token = creds.credentials
    if not token:
        token = request.cookies.get(request.app.state.settings.AUTH_COOKIE_NAME)
    return verifier.verify(token)


def get_current_session(
    session: Annotated[Optional[Session], Depends(get_optional_session)],
) -> Session:
    if session is None:
        raise UnauthorizedError()
    return session


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
SummarizerDep = Annotated[Summarizer, Depends(get_summarizer)]
AuthProviderDep = Annotated[AuthProvider, Depends(get_auth_provider)]
OptionalSessionDep = Annotated[Optional[Session], Depends(get_optional_session)]
SessionDep = Annotated[Session, Depends(get_current_session)]
