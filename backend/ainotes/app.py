"""
AI Notes - FastAPI Backend
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ainotes.config import Settings, get_settings
from ainotes.database.db import init_db
from ainotes.errors import NotesAppError
from ainotes.logging import setup_logging, get_logger
from ainotes.routers import auth, notes, summarize
from ainotes.services.auth_provider import AuthProvider
from ainotes.services.invalidation import InvalidationChannel, SocketIOInvalidationBridge
from ainotes.services.notes import NoteService
from ainotes.services.sessions import AuthEvents, SessionVerifier
from ainotes.services.summarizer import Summarizer, build_summarizer

logger = get_logger('main')


def create_app(
    settings: Optional[Settings] = None,
    summarizer: Optional[Summarizer] = None,
    auth_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the API application.

    :param settings: Settings to use instead of the environment
    :type settings: Optional[Settings]
    :param summarizer: Summarizer to use instead of the configured provider
    :type summarizer: Optional[Summarizer]
    :param auth_transport: httpx transport for the auth provider client
    :type auth_transport: Optional[httpx.AsyncBaseTransport]
    :return: Configured FastAPI application
    :rtype: FastAPI
    """
    settings = settings or get_settings()

    # Socket.IO server for note-list invalidation pushes
    sio = socketio.AsyncServer(
        async_mode='asgi',
        cors_allowed_origins=settings.CORS_ORIGINS,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.DEBUG)
        logger.info("Starting AI Notes API")

        await init_db(settings.DATABASE_PATH)
        logger.info("Database initialized")

        invalidation = InvalidationChannel()
        app.state.invalidation = invalidation
        app.state.summarizer = summarizer or build_summarizer(settings)
        app.state.note_service = NoteService(
            db_path=settings.DATABASE_PATH,
            invalidation=invalidation,
            summarizer=app.state.summarizer,
        )
        app.state.auth_events = AuthEvents()
        app.state.auth_provider = AuthProvider(
            base_url=settings.AUTH_PROVIDER_URL,
            anon_key=settings.AUTH_PROVIDER_ANON_KEY,
            events=app.state.auth_events,
            transport=auth_transport,
        )
        app.state.session_verifier = SessionVerifier.from_settings(settings)

        bridge = SocketIOInvalidationBridge(sio, invalidation)
        bridge.start()
        logger.info("Services initialized")

        yield

        logger.info("Shutting down application")
        bridge.stop()
        await app.state.auth_provider.aclose()

    app = FastAPI(
        title="AI Notes API",
        description="Notes with AI-generated summaries",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.sio = sio

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotesAppError)
    async def notes_app_error_handler(request: Request, exc: NotesAppError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    app.include_router(notes.router, prefix="/api/notes", tags=["Notes"])
    app.include_router(summarize.router, prefix="/api/summarize", tags=["Summarize"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])

    @sio.event
    async def connect(sid, environ, auth_payload=None):
        token = auth_payload.get("token") if isinstance(auth_payload, dict) else None
        session = app.state.session_verifier.verify(token)
        if session is None:
            logger.debug(f"Refused socket {sid[:8]}...: no valid session")
            return False
        await sio.enter_room(sid, session.user_id)
        logger.debug(f"Client {sid[:8]}... joined notes room for user {session.user_id}")

    @sio.event
    async def disconnect(sid):
        logger.debug(f"Client {sid[:8]}... disconnected")

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "ai-notes",
            "summarizer_available": app.state.summarizer.is_available if hasattr(app.state, 'summarizer') else False,
            "auth_provider_available": app.state.auth_provider.is_available if hasattr(app.state, 'auth_provider') else False,
        }

    @app.get("/")
    async def root():
        return {
            "name": "AI Notes API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


def create_asgi_app(settings: Optional[Settings] = None) -> socketio.ASGIApp:
    """ASGI entry point serving both the API and Socket.IO."""
    app = create_app(settings)
    return socketio.ASGIApp(app.state.sio, other_asgi_app=app)
