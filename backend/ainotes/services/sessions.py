"""
Session verification and session-change tracking.

``SessionVerifier`` re-validates the provider's JWT on every request.
``AuthEvents`` carries sign-in/sign-out notifications, and ``SessionContext``
is the explicit session object handed to views: it fetches the current user
once on enter, follows ``AuthEvents`` while open, and unsubscribes on exit.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from jose import JWTError, jwt

from ainotes.config import Settings
from ainotes.errors import UnauthorizedError
from ainotes.logging import get_logger
from ainotes.models import AuthChangeEvent, AuthStateChange, Session, SignInResult
from ainotes.services.events import EventHub, Listener, Subscription

if TYPE_CHECKING:
    from ainotes.services.auth_provider import AuthProvider

logger = get_logger('services.sessions')


class SessionVerifier:
    """Turns a provider-issued access token into a ``Session``."""

    def __init__(self, secret: str, algorithm: str = "HS256", audience: Optional[str] = None):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience or None
        if not secret:
            logger.warning("AUTH_JWT_SECRET not set - every request will be unauthorized")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionVerifier":
        return cls(
            secret=settings.AUTH_JWT_SECRET,
            algorithm=settings.AUTH_JWT_ALGORITHM,
            audience=settings.AUTH_JWT_AUDIENCE,
        )

    def verify(self, token: Optional[str]) -> Optional[Session]:
        """
        Validate ``token`` and build the session it proves.

        :param token: Raw JWT access token, if any
        :type token: Optional[str]
        :return: The session, or None for a missing/invalid/expired token
        :rtype: Optional[Session]
        """
        if not token or not self.secret:
            return None

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError as e:
            logger.debug(f"Rejected access token: {e}")
            return None

        sub = payload.get("sub")
        if not sub:
            return None

        exp = payload.get("exp")
        return Session(
            user_id=str(sub),
            email=payload.get("email"),
            access_token=token,
            expires_at=datetime.fromtimestamp(int(exp), tz=timezone.utc) if exp else None,
        )


class AuthEvents(EventHub[AuthStateChange]):
    """Sign-in/sign-out announcements, keyed by the user they concern."""

    def __init__(self):
        super().__init__("auth")

    def subscribe_user(self, user_id: str, listener: Listener) -> Subscription:
        return self.subscribe(listener, topic=user_id)

    async def publish(self, event: AuthChangeEvent, session: Optional[Session] = None) -> None:
        topic = session.user_id if session is not None else None
        await self._emit(topic, AuthStateChange(event=event, session=session))


class SessionContext:
    """
    Current session for a view, kept fresh from ``AuthEvents``.

    A context only follows events for its own user, so another user
    signing in or out never changes it.

    Usage::

        async with SessionContext(provider, access_token) as ctx:
            if ctx.session is None:
                ...  # redirect to sign-in
    """

    def __init__(self, provider: AuthProvider, access_token: Optional[str] = None):
        self.provider = provider
        self.access_token = access_token
        self.session: Optional[Session] = None
        self._subscription: Optional[Subscription] = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    async def open(self) -> "SessionContext":
        if self.access_token:
            result = await self.provider.get_user(self.access_token)
            if result.success:
                self._adopt(Session(
                    user_id=result.user_id,
                    email=result.email,
                    access_token=self.access_token,
                ))
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def __aenter__(self) -> "SessionContext":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Sign in through the provider and make the new session this context's own."""
        result = await self.provider.sign_in(email, password)
        if result.success:
            self._adopt(result.session)
        return result

    def require(self) -> Session:
        if self.session is None:
            raise UnauthorizedError()
        return self.session

    def _adopt(self, session: Session) -> None:
        self.close()
        self.session = session
        self.access_token = session.access_token
        self._subscription = self.provider.events.subscribe_user(session.user_id, self._on_change)

    def _on_change(self, change: AuthStateChange) -> None:
        if self.session is None or change.session is None:
            return
        if change.session.user_id != self.session.user_id:
            return

        if change.event == AuthChangeEvent.SIGNED_IN:
            self.session = change.session
        elif change.event == AuthChangeEvent.SIGNED_OUT:
            logger.debug(f"Session for {self.session.user_id} ended")
            self.session = None
            self.close()
