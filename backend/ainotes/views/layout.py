"""Header and dashboard view-models."""

from typing import Optional

from ainotes.errors import NotesAppError
from ainotes.services.invalidation import InvalidationChannel
from ainotes.services.notes import NoteService
from ainotes.services.sessions import SessionContext
from ainotes.services.summarizer import Summarizer
from ainotes.views.base import Toaster, guarded
from ainotes.views.notes import NotesListView

SIGN_IN_PATH = "/auth/signin"
HOME_PATH = "/"


class HeaderView:
    def __init__(self, session: SessionContext, toaster: Toaster):
        self.session = session
        self.toaster = toaster
        self.is_loading = False
        self.redirect_to: Optional[str] = None

    @property
    def user_email(self) -> Optional[str]:
        return self.session.session.email if self.session.session else None

    async def sign_out(self) -> bool:
        self.is_loading = True
        try:
            result = await guarded(
                self.toaster,
                "signing out",
                self._sign_out,
                "Signed out successfully",
                "Sign out failed. An error occurred. Please try again.",
            )
        finally:
            self.is_loading = False

        if result is None:
            return False
        self.redirect_to = HOME_PATH
        return True

    async def _sign_out(self) -> bool:
        result = await self.session.provider.sign_out(self.session.require())
        if not result.success:
            raise NotesAppError(result.error)
        return True


class DashboardView:
    """Entry view; without a session it only reports a redirect."""

    def __init__(
        self,
        service: NoteService,
        summarizer: Summarizer,
        channel: InvalidationChannel,
        session: SessionContext,
        toaster: Optional[Toaster] = None,
    ):
        self.toaster = toaster or Toaster()
        self.header = HeaderView(session, self.toaster)
        self.redirect_to: Optional[str] = None
        self.notes: Optional[NotesListView] = None

        if not session.is_authenticated:
            self.redirect_to = SIGN_IN_PATH
            return
        self.notes = NotesListView(service, summarizer, channel, session, self.toaster)

    async def load(self) -> None:
        if self.notes is not None:
            await self.notes.load()

    def close(self) -> None:
        if self.notes is not None:
            self.notes.close()
