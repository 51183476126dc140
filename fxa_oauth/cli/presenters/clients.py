"""Presenters for OAuth client and token display in CLI."""

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fxa_oauth.core.auth.exceptions import FxaError

logger = logging.getLogger(__name__)

CLIENT_COLUMNS = ("id", "name", "redirect_uri", "whitelisted", "can_grant")


class ClientPresenter:
    """Presenter for command results.

    Everything shown to the user is also logged at DEBUG level, so the
    debug log shows what the user saw if a later step fails.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def print(self, *parts: Any) -> None:
        logger.debug("p %s", parts)
        self.console.print(*parts, highlight=False, soft_wrap=True)

    def present_token(self, token: Mapping[str, Any]) -> None:
        self.print("token:", token.get("access_token"))

    def present_json(self, title: str, data: Any) -> None:
        self.print(title, json.dumps(data, indent=2))

    def present_clients(self, clients: Sequence[Mapping[str, Any]], as_table: bool = False) -> None:
        if not as_table:
            self.print(json.dumps(list(clients), indent=2))
            return

        table = Table(title=f"OAuth Clients ({len(clients)})")
        for column in CLIENT_COLUMNS:
            table.add_column(column, style="cyan" if column == "id" else None)
        for client in clients:
            table.add_row(*(_cell(client.get(column)) for column in CLIENT_COLUMNS))
        logger.debug("p clients %s", clients)
        self.console.print(table)

    def present_deleted(self, client_id: str) -> None:
        self.print(f"Client {client_id} deleted.")

    def present_aborted(self) -> None:
        self.print("Aborted.")

    def present_error(self, error: FxaError, debug_log: Path | None) -> None:
        body = f"[red]{escape(error.message)}[/red]"
        if error.code is not None:
            body += f"\n\nCode: {error.code}"
        if debug_log is not None:
            body += f"\n\nAdditional logging details can be found in:\n    {debug_log}"
        self.console.print(
            Panel(body, title=f"{error.name} Error", border_style="red"),
            highlight=False,
        )


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)
