"""Token command for the fxa-oauth CLI."""

import logging

import typer

from fxa_oauth.cli.runner import get_state, run_with_client
from fxa_oauth.core.auth import FxaOAuthClient

logger = logging.getLogger(__name__)


def token(
    ctx: typer.Context,
    client_id: str = typer.Argument(..., help="OAuth client id to issue the token for"),
    scope: str = typer.Argument(..., help="Space-separated scopes to request"),
) -> None:
    """Get an OAuth token.

    Example:
        fxa-oauth -u user@example.com token 5901bd09376fadaa profile
    """
    state = get_state(ctx)

    async def action(client: FxaOAuthClient) -> dict:
        return await client.get_token(client_id, scope)

    result = run_with_client(state, action)
    logger.debug("token %s", result)
    state.presenter.present_token(result)
