"""
Command line client for AI Notes.

``ainotes serve`` runs the API. The other commands drive the dashboard
view-models against the local notes database, signed in with a provider
access token (``--token`` or ``AINOTES_TOKEN``).
"""

import asyncio
from typing import Optional

import click
import uvicorn

from ainotes.app import create_asgi_app
from ainotes.config import Settings, get_settings
from ainotes.database.db import init_db
from ainotes.errors import NoteNotFoundError
from ainotes.logging import setup_logging
from ainotes.models import Note, NotificationLevel
from ainotes.services.auth_provider import AuthProvider
from ainotes.services.invalidation import InvalidationChannel
from ainotes.services.notes import NoteService
from ainotes.services.sessions import AuthEvents, SessionContext
from ainotes.services.summarizer import Summarizer, build_summarizer
from ainotes.views.base import Toaster
from ainotes.views.layout import DashboardView
from ainotes.views.notes import NoteEditor

NOT_SIGNED_IN = "Not signed in. Run `ainotes signin` and pass the token with --token."


class ClientRuntime:
    """Service graph for one CLI invocation."""

    def __init__(
        self,
        settings: Settings,
        summarizer: Optional[Summarizer] = None,
        auth_transport=None,
    ):
        self.settings = settings
        self.toaster = Toaster()
        self._summarizer = summarizer
        self._auth_transport = auth_transport

    async def __aenter__(self) -> "ClientRuntime":
        await init_db(self.settings.DATABASE_PATH)
        self.channel = InvalidationChannel()
        self.summarizer = self._summarizer or build_summarizer(self.settings)
        self.notes = NoteService(self.settings.DATABASE_PATH, self.channel, self.summarizer)
        self.provider = AuthProvider(
            base_url=self.settings.AUTH_PROVIDER_URL,
            anon_key=self.settings.AUTH_PROVIDER_ANON_KEY,
            events=AuthEvents(),
            transport=self._auth_transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.provider.aclose()

    async def open_session(self, token: Optional[str]) -> SessionContext:
        return await SessionContext(self.provider, token).open()

    def dashboard(self, session: SessionContext) -> DashboardView:
        return DashboardView(self.notes, self.summarizer, self.channel, session, self.toaster)


def _runtime(ctx: click.Context) -> ClientRuntime:
    obj = ctx.obj
    return ClientRuntime(
        obj["settings"],
        summarizer=obj.get("summarizer"),
        auth_transport=obj.get("auth_transport"),
    )


def _report(toaster: Toaster) -> None:
    """Echo the last toast; an error toast fails the command."""
    last = toaster.last
    if last is None:
        return
    if last.level == NotificationLevel.ERROR:
        raise click.ClickException(last.message)
    click.secho(last.message, fg="green")


def _echo_note(note: Note) -> None:
    click.secho(f"{note.id}  {note.title}", bold=True)
    click.echo(f"  updated {note.updated_at.isoformat(timespec='seconds')}")
    if note.summary:
        click.echo(f"  summary: {note.summary}")


async def _signed_in_dashboard(runtime: ClientRuntime, token: Optional[str]) -> DashboardView:
    session = await runtime.open_session(token)
    dashboard = runtime.dashboard(session)
    if dashboard.redirect_to is not None:
        raise click.ClickException(NOT_SIGNED_IN)
    return dashboard


async def _find_note(dashboard: DashboardView, note_id: str) -> Note:
    user_id = dashboard.notes.session.require().user_id
    note = await dashboard.notes.service.get_note(user_id, note_id)
    if note is None:
        raise click.ClickException(NoteNotFoundError().message)
    return note


@click.group(help="AI Notes: notes with AI-generated summaries.")
@click.option("--token", envvar="AINOTES_TOKEN", help="Provider access token.")
@click.pass_context
def cli(ctx: click.Context, token: Optional[str]) -> None:
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = get_settings()
    ctx.obj["token"] = token
    setup_logging(ctx.obj["settings"].DEBUG)


@cli.command(help="Run the API and Socket.IO server.")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    uvicorn.run(create_asgi_app(ctx.obj["settings"]), host=host, port=port)


@cli.command(help="Sign in and print the access token.")
@click.argument("email")
@click.password_option(confirmation_prompt=False)
@click.pass_context
def signin(ctx: click.Context, email: str, password: str) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            async with SessionContext(runtime.provider) as session:
                result = await session.sign_in(email, password)
        if not result.success:
            raise click.ClickException(result.error)
        click.secho(f"Signed in as {result.session.email or result.session.user_id}", fg="green", err=True)
        click.echo(result.session.access_token)

    asyncio.run(run())


@cli.command(help="Sign out of the current session.")
@click.pass_context
def signout(ctx: click.Context) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            dashboard = await _signed_in_dashboard(runtime, ctx.obj["token"])
            await dashboard.header.sign_out()
            dashboard.close()
            _report(runtime.toaster)

    asyncio.run(run())


@cli.command(name="list", help="List your notes, newest first.")
@click.pass_context
def list_notes(ctx: click.Context) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            dashboard = await _signed_in_dashboard(runtime, ctx.obj["token"])
            await dashboard.load()
            view = dashboard.notes
            dashboard.close()

        if view.error:
            raise click.ClickException(view.error)
        if view.is_empty:
            click.echo("No notes yet. Create one with `ainotes create`.")
            return
        click.echo(f"Signed in as {dashboard.header.user_email}")
        for card in view.cards():
            _echo_note(card.note)

    asyncio.run(run())


def _check_form(editor: NoteEditor) -> None:
    if editor.errors:
        for message in editor.errors.values():
            click.secho(message, fg="red", err=True)
        raise click.ClickException("Note not saved")


@cli.command(help="Create a note.")
@click.option("--title", required=True)
@click.option("--content", required=True)
@click.pass_context
def create(ctx: click.Context, title: str, content: str) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            dashboard = await _signed_in_dashboard(runtime, ctx.obj["token"])
            editor = dashboard.notes.open_create()
            editor.title = title
            editor.content = content
            note = await editor.submit()
            dashboard.close()
            _check_form(editor)
            _report(runtime.toaster)
        if note is not None:
            _echo_note(note)

    asyncio.run(run())


@cli.command(help="Edit a note's title and/or content.")
@click.argument("note_id")
@click.option("--title")
@click.option("--content")
@click.pass_context
def edit(ctx: click.Context, note_id: str, title: Optional[str], content: Optional[str]) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            dashboard = await _signed_in_dashboard(runtime, ctx.obj["token"])
            editor = dashboard.notes.open_edit(await _find_note(dashboard, note_id))
            if title is not None:
                editor.title = title
            if content is not None:
                editor.content = content
            note = await editor.submit()
            dashboard.close()
            _check_form(editor)
            _report(runtime.toaster)
        if note is not None:
            _echo_note(note)

    asyncio.run(run())


@cli.command(help="Summarize a note and save the summary on it.")
@click.argument("note_id")
@click.pass_context
def summarize(ctx: click.Context, note_id: str) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            dashboard = await _signed_in_dashboard(runtime, ctx.obj["token"])
            editor = dashboard.notes.open_edit(await _find_note(dashboard, note_id))
            note = await editor.summarize()
            dashboard.close()
            _report(runtime.toaster)
        if note is not None:
            _echo_note(note)

    asyncio.run(run())


@cli.command(help="Delete a note.")
@click.argument("note_id")
@click.pass_context
def delete(ctx: click.Context, note_id: str) -> None:
    async def run():
        async with _runtime(ctx) as runtime:
            dashboard = await _signed_in_dashboard(runtime, ctx.obj["token"])
            await dashboard.load()
            cards = [c for c in dashboard.notes.cards() if c.note.id == note_id]
            if not cards:
                dashboard.close()
                raise click.ClickException(NoteNotFoundError().message)
            await cards[0].delete()
            dashboard.close()
            _report(runtime.toaster)

    asyncio.run(run())


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
