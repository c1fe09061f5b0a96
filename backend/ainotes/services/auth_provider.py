"""
Auth provider integration (GoTrue REST API, as exposed by Supabase).

Handles sign-in, sign-up, sign-out and user lookup. This is the transport
layer: every call returns a result model instead of raising, and successful
sign-in/sign-out are announced on ``AuthEvents``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from ainotes.logging import get_logger
from ainotes.models import (
    AuthChangeEvent,
    Session,
    SignInResult,
    SignOutResult,
    SignUpResult,
    UserResult,
)
from ainotes.services.sessions import AuthEvents

logger = get_logger('services.auth_provider')

NOT_CONFIGURED = "Auth provider not configured"


def _session_from_token_response(data: dict[str, Any]) -> Session:
    user = data.get("user") or {}
    expires_at = data.get("expires_at")
    return Session(
        user_id=str(user["id"]),
        email=user.get("email"),
        access_token=data["access_token"],
        expires_at=datetime.fromtimestamp(int(expires_at), tz=timezone.utc) if expires_at else None,
    )


class AuthProvider:
    """Async client for the external auth provider."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        events: AuthEvents,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.events = events
        self.client: Optional[httpx.AsyncClient] = None

        if not base_url:
            logger.warning("AUTH_PROVIDER_URL not set - sign-in and sign-up are disabled")
            return

        self.client = httpx.AsyncClient(
            base_url=f"{base_url}/auth/v1",
            headers={"apikey": anon_key},
            transport=transport,
            timeout=timeout,
        )

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    # ── Sessions ──

    async def sign_in(self, email: str, password: str) -> SignInResult:
        if not self.is_available:
            return SignInResult(success=False, error=NOT_CONFIGURED)

        try:
            response = await self.client.post(
                "/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as e:
            logger.error(f"Sign in request failed: {e}")
            return SignInResult(success=False, error="Sign in failed")

        if response.status_code in (400, 401):
            return SignInResult(success=False, error="Invalid email or password")
        if response.is_error:
            logger.error(f"Sign in rejected with status {response.status_code}")
            return SignInResult(success=False, error="Sign in failed")

        try:
            session = _session_from_token_response(response.json())
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected sign in response: {e}")
            return SignInResult(success=False, error="Sign in failed")

        logger.info(f"User {session.user_id} signed in")
        await self.events.publish(AuthChangeEvent.SIGNED_IN, session)
        return SignInResult(success=True, session=session)

    async def sign_up(self, email: str, password: str, password_confirm: str) -> SignUpResult:
        if password != password_confirm:
            return SignUpResult(success=False, error="Passwords do not match")
        if not self.is_available:
            return SignUpResult(success=False, error=NOT_CONFIGURED)

        try:
            response = await self.client.post(
                "/signup",
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as e:
            logger.error(f"Sign up request failed: {e}")
            return SignUpResult(success=False, error="Sign up failed")

        if response.is_error:
            logger.error(f"Sign up rejected with status {response.status_code}")
            return SignUpResult(success=False, error="Sign up failed")

        try:
            data = response.json()
            # Auto-confirmed accounts get a session straight away;
            # otherwise only the user record comes back.
            if data.get("access_token"):
                session = _session_from_token_response(data)
                await self.events.publish(AuthChangeEvent.SIGNED_IN, session)
                return SignUpResult(success=True, session=session, user_id=session.user_id)
            user = data.get("user") or data
            return SignUpResult(success=True, user_id=str(user["id"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected sign up response: {e}")
            return SignUpResult(success=False, error="Sign up failed")

    async def sign_out(self, session: Session) -> SignOutResult:
        if not self.is_available:
            return SignOutResult(success=False, error=NOT_CONFIGURED)

        try:
            response = await self.client.post(
                "/logout",
                headers={"Authorization": f"Bearer {session.access_token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Sign out request failed: {e}")
            return SignOutResult(success=False, error="Sign out failed")

        if response.is_error:
            logger.error(f"Sign out rejected with status {response.status_code}")
            return SignOutResult(success=False, error="Sign out failed")

        logger.info(f"User {session.user_id} signed out")
        await self.events.publish(AuthChangeEvent.SIGNED_OUT, session)
        return SignOutResult(success=True)

    async def get_user(self, access_token: str) -> UserResult:
        if not self.is_available:
            return UserResult(success=False, error=NOT_CONFIGURED)

        try:
            response = await self.client.get(
                "/user",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"User lookup failed: {e}")
            return UserResult(success=False, error="Session lookup failed")

        if response.is_error:
            return UserResult(success=False, error="Session lookup failed")

        try:
            data = response.json()
            return UserResult(success=True, user_id=str(data["id"]), email=data.get("email"))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected user response: {e}")
            return UserResult(success=False, error="Session lookup failed")
