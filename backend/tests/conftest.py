import json
import time

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from ainotes.app import create_app
from ainotes.config import Settings
from ainotes.database.db import init_db
from ainotes.errors import SummarizationError
from ainotes.services.auth_provider import AuthProvider
from ainotes.services.invalidation import InvalidationChannel
from ainotes.services.notes import NoteService
from ainotes.services.sessions import AuthEvents
from ainotes.services.summarizer import Summarizer

JWT_SECRET = "test-jwt-secret"
AUTH_URL = "https://auth.example.test"
GROCERY_SUMMARY = "A list of grocery items: milk and eggs."

# email -> (user id, password)
USERS = {
    "alice@example.com": ("user-alice", "alice-password"),
    "bob@example.com": ("user-bob", "bob-password"),
}


def make_token(user_id, email=None, expires_in=3600, audience="authenticated", secret=JWT_SECRET):
    now = int(time.time())
    payload = {"sub": user_id, "aud": audience, "iat": now, "exp": now + expires_in}
    if email:
        payload["email"] = email
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(user_id, email=None):
    return {"Authorization": f"Bearer {make_token(user_id, email)}"}


class FakeSummarizer(Summarizer):
    def __init__(self, summary=GROCERY_SUMMARY, fail=False):
        self.summary = summary
        self.fail = fail
        self.prompts = []

    @property
    def is_available(self):
        return True

    @property
    def calls(self):
        return len(self.prompts)

    async def _generate(self, prompt):
        self.prompts.append(prompt)
        if self.fail:
            raise SummarizationError()
        return self.summary


class FakeAuthServer:
    """Minimal GoTrue stand-in for httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.fail_logout = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/v1/token":
            body = json.loads(request.content)
            user = USERS.get(body.get("email"))
            if user is None or user[1] != body.get("password"):
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            return httpx.Response(200, json={
                "access_token": make_token(user[0], body["email"]),
                "token_type": "bearer",
                "expires_in": 3600,
                "expires_at": int(time.time()) + 3600,
                "refresh_token": "refresh",
                "user": {"id": user[0], "email": body["email"]},
            })

        if path == "/auth/v1/signup":
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "user-new", "email": body["email"]})

        if path == "/auth/v1/logout":
            if self.fail_logout:
                return httpx.Response(500, json={"msg": "boom"})
            return httpx.Response(204)

        if path == "/auth/v1/user":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            try:
                claims = jwt.decode(token, JWT_SECRET, algorithms=["HS256"], audience="authenticated")
            except Exception:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json={"id": claims["sub"], "email": claims.get("email")})

        return httpx.Response(404)


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_PATH=str(tmp_path / "notes.db"),
        GEMINI_API_KEY="",
        AUTH_JWT_SECRET=JWT_SECRET,
        AUTH_PROVIDER_URL=AUTH_URL,
        AUTH_PROVIDER_ANON_KEY="anon-key",
        DEBUG=True,
    )


@pytest.fixture()
def summarizer():
    return FakeSummarizer()


@pytest.fixture()
def auth_server():
    return FakeAuthServer()


@pytest.fixture()
def client(settings, summarizer, auth_server):
    app = create_app(
        settings=settings,
        summarizer=summarizer,
        auth_transport=httpx.MockTransport(auth_server),
    )
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def channel():
    return InvalidationChannel()


@pytest.fixture()
def published(channel):
    events = []
    channel.subscribe(events.append)
    return events


@pytest.fixture()
async def note_service(settings, channel, summarizer):
    await init_db(settings.DATABASE_PATH)
    return NoteService(settings.DATABASE_PATH, channel, summarizer)


@pytest.fixture()
def auth_events():
    return AuthEvents()


@pytest.fixture()
async def auth_provider(auth_server, auth_events):
    provider = AuthProvider(
        base_url=AUTH_URL,
        anon_key="anon-key",
        events=auth_events,
        transport=httpx.MockTransport(auth_server),
    )
    yield provider
    await provider.aclose()
