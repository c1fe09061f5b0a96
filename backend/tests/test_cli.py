import httpx
import pytest
from click.testing import CliRunner

from ainotes import cli as cli_module
from ainotes.cli import cli

from conftest import GROCERY_SUMMARY, make_token

ALICE_TOKEN = make_token("user-alice", "alice@example.com")


@pytest.fixture()
def invoke(settings, summarizer, auth_server):
    runner = CliRunner()

    def _invoke(*args, token=ALICE_TOKEN):
        obj = {
            "settings": settings,
            "summarizer": summarizer,
            "auth_transport": httpx.MockTransport(auth_server),
        }
        prefix = ["--token", token] if token else []
        return runner.invoke(cli, [*prefix, *args], obj=obj)

    return _invoke


def _created_id(result):
    # First line of a printed note is "<id>  <title>"
    for line in result.output.splitlines():
        if "  " in line and not line.startswith(" "):
            return line.split()[0]
    raise AssertionError(result.output)


def test_signin_prints_token(invoke):
    result = invoke("signin", "alice@example.com", "--password", "alice-password", token=None)
    assert result.exit_code == 0, result.output
    token = result.output.strip().splitlines()[-1]
    assert token.count(".") == 2


def test_signin_with_wrong_password(invoke):
    result = invoke("signin", "alice@example.com", "--password", "nope", token=None)
    assert result.exit_code == 1
    assert "Invalid email or password" in result.output


def test_commands_need_a_session(invoke):
    result = invoke("list", token=None)
    assert result.exit_code == 1
    assert "Not signed in" in result.output


def test_create_list_summarize_delete(invoke, summarizer):
    result = invoke("list")
    assert result.exit_code == 0
    assert "No notes yet" in result.output

    result = invoke("create", "--title", "Groceries", "--content", "Buy milk and eggs")
    assert result.exit_code == 0, result.output
    assert "Note created. Your note has been created successfully." in result.output
    note_id = _created_id(result)

    result = invoke("list")
    assert result.exit_code == 0
    assert note_id in result.output
    assert "Groceries" in result.output

    result = invoke("summarize", note_id)
    assert result.exit_code == 0, result.output
    assert "Note summarized successfully." in result.output
    assert GROCERY_SUMMARY in result.output
    assert summarizer.calls == 1

    result = invoke("delete", note_id)
    assert result.exit_code == 0
    assert "Note deleted. Your note has been deleted successfully." in result.output

    result = invoke("delete", note_id)
    assert result.exit_code == 1
    assert "Note not found" in result.output


def test_create_with_blank_title_is_not_saved(invoke):
    result = invoke("create", "--title", "  ", "--content", "body")
    assert result.exit_code == 1
    assert "Title is required" in result.output
    assert "No notes yet" in invoke("list").output


def test_edit_changes_title(invoke):
    note_id = _created_id(invoke("create", "--title", "Draft", "--content", "body"))

    result = invoke("edit", note_id, "--title", "Final")
    assert result.exit_code == 0, result.output
    assert "Note updated. Your note has been updated successfully." in result.output
    assert "Final" in invoke("list").output


def test_other_users_note_is_not_found(invoke):
    note_id = _created_id(invoke("create", "--title", "Mine", "--content", "body"))
    bob = make_token("user-bob", "bob@example.com")

    result = invoke("edit", note_id, "--title", "Stolen", token=bob)
    assert result.exit_code == 1
    assert "Note not found" in result.output
    assert "Mine" in invoke("list").output


def test_summarize_failure(invoke, summarizer):
    note_id = _created_id(invoke("create", "--title", "t", "--content", "c"))
    summarizer.fail = True

    result = invoke("summarize", note_id)
    assert result.exit_code == 1
    assert "Failed to summarize note. Please try again." in result.output


def test_signout(invoke, auth_server):
    result = invoke("signout")
    assert result.exit_code == 0
    assert "Signed out successfully" in result.output

    auth_server.fail_logout = True
    result = invoke("signout")
    assert result.exit_code == 1
    assert "Sign out failed. An error occurred. Please try again." in result.output


def test_serve_runs_asgi_app(invoke, monkeypatch):
    calls = []
    monkeypatch.setattr(cli_module.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))

    result = invoke("serve", "--port", "9001", token=None)
    assert result.exit_code == 0, result.output
    app, kwargs = calls[0]
    assert kwargs == {"host": "127.0.0.1", "port": 9001}
    assert app.other_asgi_app is not None
