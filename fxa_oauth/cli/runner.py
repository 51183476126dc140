"""Shared plumbing for CLI commands.

Builds the OAuth client from configuration and prompts, runs a command's
coroutine against it, and turns failures into a reported error, a debug
log and a non-zero exit status.
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import NoReturn, TypeVar

import typer

from fxa_oauth.cli.presenters.clients import ClientPresenter
from fxa_oauth.core.auth import (
    FxaError,
    FxaOAuthClient,
    HttpClientConfig,
    HttpxHttpClient,
    UnexpectedError,
)
from fxa_oauth.core.auth.validation import require
from fxa_oauth.core.config import Config
from fxa_oauth.core.logging import DebugLogRecorder, remove_debug_log, write_debug_log

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CliState:
    """Per-invocation state, stored on the Typer context."""

    config: Config
    recorder: DebugLogRecorder
    presenter: ClientPresenter


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.obj
    if not isinstance(state, CliState):
        raise RuntimeError("CLI state not initialized; commands must run through the main app")
    return state


def get_password(config: Config) -> str:
    """Return FXA_PASSWORD, or prompt for it without echo."""
    if config.password:
        return config.password
    return typer.prompt("Password", hide_input=True, default="", show_default=False)


def make_client(config: Config) -> FxaOAuthClient:
    """Build a client for the configured account and servers.

    Raises:
        RequiredError: If a server URL, the user or the password is missing
    """
    require(config.auth_url, "--fxa or --env")
    require(config.oauth_url, "--url or --env")
    require(config.user, "-u or --user")
    logger.info("user %s", config.user)

    password = require(get_password(config), "password cannot be blank")
    return FxaOAuthClient(
        email=config.user,
        password=password,
        oauth_url=config.oauth_url,
        fxa_url=config.auth_url,
        http_client=HttpxHttpClient(HttpClientConfig(timeout=config.request_timeout)),
        deadline=config.auth_deadline,
        cli_client_id=config.client_id,
    )


async def _call(client: FxaOAuthClient, action: Callable[[FxaOAuthClient], Awaitable[T]]) -> T:
    async with client:
        return await action(client)


def run_with_client(state: CliState, action: Callable[[FxaOAuthClient], Awaitable[T]]) -> T:
    """Run action against a fresh client and report the outcome.

    On success a stale debug log is removed. On failure the error is
    reported, the debug log is written and the command exits with 1.
    """
    try:
        client = make_client(state.config)
        result = asyncio.run(_call(client, action))
    except (typer.Exit, typer.Abort):
        raise
    except FxaError as e:
        fail(state, e)
    except Exception as e:
        logger.debug("unexpected error", exc_info=True)
        fail(state, UnexpectedError(str(e) or type(e).__name__))

    remove_debug_log(state.config.debug_log)
    logger.info("ok")
    return result


def fail(state: CliState, error: FxaError) -> NoReturn:
    """Report error, write the debug log and exit with status 1."""
    if error.name == "Required":
        logger.error("A required parameter was not provided: %s", error.message)
    elif error.name == "Auth":
        logger.error("auth %s", error.message)
    elif error.name == "OAuth":
        logger.error("oauth %s", error.message)
    else:
        logger.error("%s %s", error.name.lower(), error.message)
    logger.debug("%r", error, exc_info=error)

    try:
        path = write_debug_log(
            state.recorder,
            state.config.debug_log,
            argv=sys.argv,
            version=_version(),
            code=error.code,
        )
    except OSError as e:
        logger.warning("could not write debug log: %s", e)
        path = None

    state.presenter.present_error(error, path)
    raise typer.Exit(1)


def _version() -> str:
    from fxa_oauth import __version__

    return __version__
