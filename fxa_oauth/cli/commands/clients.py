"""OAuth client administration commands for the fxa-oauth CLI.

Every command here works with a temporary developer token that is
destroyed before the command returns.
"""

import logging
from typing import Any

import typer

from fxa_oauth.cli.runner import fail, get_state, run_with_client
from fxa_oauth.core.auth import FxaOAuthClient, ValidationError
from fxa_oauth.core.config import parse_bool

logger = logging.getLogger(__name__)

BOOLEAN_PROPERTIES = ("whitelisted", "can_grant")
CLIENT_PROPERTIES = ("name", "redirect_uri", "image_uri", *BOOLEAN_PROPERTIES)

# (property, prompt, default)
REGISTER_PROMPTS = (
    ("name", "name:", ""),
    ("redirect_uri", "redirect_uri:", ""),
    ("image_uri", "image_uri:", ""),
    ("whitelisted", "whitelisted:", "true"),
    ("can_grant", "Implicit grant permission?", "false"),
)


def coerce_property(prop: str, value: str) -> Any:
    """Convert a raw value to the type the server expects for prop."""
    if prop in BOOLEAN_PROPERTIES:
        return parse_bool(value)
    return value


def prompt_client() -> dict[str, Any]:
    """Prompt for the details of a new client, skipping blank answers."""
    results: dict[str, Any] = {}
    for prop, text, default in REGISTER_PROMPTS:
        answer = typer.prompt(
            text,
            default=default,
            show_default=bool(default),
            prompt_suffix=" ",
        )
        if answer:
            results[prop] = coerce_property(prop, answer)
    return results


def clients(
    ctx: typer.Context,
    table: bool = typer.Option(False, "--table", help="Show clients as a table instead of JSON"),
) -> None:
    """List all clients."""
    state = get_state(ctx)

    async def action(client: FxaOAuthClient) -> list[dict]:
        async with client.temporary_token() as token:
            return await client.list_clients(token)

    result = run_with_client(state, action)
    state.presenter.present_clients(result, as_table=table)


def register(ctx: typer.Context) -> None:
    """Register a new OAuth client."""
    state = get_state(ctx)
    presenter = state.presenter

    presenter.print("Fill in client details...")
    details = prompt_client()
    logger.debug("register client %s", details)
    presenter.present_json("Registering client:", details)
    presenter.print("")

    if not typer.confirm("Is this correct?", default=False):
        presenter.present_aborted()
        return

    async def action(client: FxaOAuthClient) -> dict:
        async with client.temporary_token() as token:
            return await client.register_client(token, details)

    registered = run_with_client(state, action)
    logger.debug("register complete %s", registered)
    presenter.present_json("Client registered:", registered)


def update(
    ctx: typer.Context,
    client_id: str = typer.Argument(..., help="Id of the client to update"),
    prop: str = typer.Argument(
        ..., metavar="PROPERTY", help=f"One of: {', '.join(CLIENT_PROPERTIES)}"
    ),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Update a property of a client."""
    state = get_state(ctx)
    if prop not in CLIENT_PROPERTIES:
        fail(
            state,
            ValidationError("PROPERTY", prop, f"must be one of: {', '.join(CLIENT_PROPERTIES)}"),
        )

    async def action(client: FxaOAuthClient) -> dict:
        async with client.temporary_token() as token:
            return await client.update_client(
                token, client_id, {prop: coerce_property(prop, value)}
            )

    run_with_client(state, action)
    logger.info('Client %s updated %s="%s".', client_id, prop, value)


def delete(
    ctx: typer.Context,
    client_id: str = typer.Argument(..., help="Id of the client to delete"),
) -> None:
    """Delete an OAuth client."""
    state = get_state(ctx)
    presenter = state.presenter

    async def action(client: FxaOAuthClient) -> bool:
        async with client.temporary_token() as token:
            info = await client.get_client(token, client_id)
            presenter.present_json("Delete", info)
            if not typer.confirm("Are you sure?", default=False):
                logger.info("delete-client no")
                return False
            logger.info("delete-client yes")
            result = await client.delete_client(token, client_id)
            logger.debug("delete-client %s", result)
            return True

    if run_with_client(state, action):
        presenter.present_deleted(client_id)
    else:
        presenter.present_aborted()
