"""Unit tests for ClientPresenter."""

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from fxa_oauth.cli.presenters.clients import ClientPresenter
from fxa_oauth.core.auth.exceptions import OAuthError, RequiredError


@pytest.fixture
def output():
    return StringIO()


@pytest.fixture
def presenter(output):
    return ClientPresenter(Console(file=output, width=200, force_terminal=False))


@pytest.mark.unit
class TestClientPresenter:
    def test_token(self, presenter, output):
        presenter.present_token({"access_token": "abc123", "scope": "profile"})
        assert output.getvalue() == "token: abc123\n"

    def test_clients_as_json(self, presenter, output):
        presenter.present_clients([{"id": "5901bd09376fadaa", "name": "Example"}])
        text = output.getvalue()
        assert '"id": "5901bd09376fadaa"' in text
        assert text.startswith("[")

    def test_clients_as_table(self, presenter, output):
        presenter.present_clients(
            [{"id": "5901bd09376fadaa", "name": "Example", "whitelisted": True}], as_table=True
        )
        text = output.getvalue()
        assert "OAuth Clients (1)" in text
        assert "5901bd09376fadaa" in text
        assert "yes" in text

    def test_deleted_and_aborted(self, presenter, output):
        presenter.present_deleted("5901bd09376fadaa")
        presenter.present_aborted()
        assert output.getvalue() == "Client 5901bd09376fadaa deleted.\nAborted.\n"

    def test_error_panel(self, presenter, output):
        presenter.present_error(
            OAuthError("Unknown client", code=400, errno=101), Path("/tmp/fxa-debug.log")
        )
        text = output.getvalue()
        assert "OAuth Error" in text
        assert "Unknown client" in text
        assert "Code: 400" in text
        assert "Additional logging details can be found in:" in text
        assert "/tmp/fxa-debug.log" in text

    def test_error_without_debug_log(self, presenter, output):
        presenter.present_error(RequiredError("-u or --user"), None)
        text = output.getvalue()
        assert "Required Error" in text
        assert "Additional logging" not in text
