"""Main CLI entry point for fxa-oauth."""

import logging
import sys

import typer
from rich.console import Console

# Import command modules
from fxa_oauth.cli.commands import clients, token
from fxa_oauth.cli.presenters.clients import ClientPresenter
from fxa_oauth.cli.runner import CliState
from fxa_oauth.core.config import Config, ConfigError
from fxa_oauth.core.logging import configure_root_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fxa-oauth",
    help="FxA OAuth CLI - Tokens and client administration for Firefox Accounts",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Add commands
app.command(name="token")(token.token)
app.command(name="clients")(clients.clients)
app.command(name="register")(clients.register)
app.command(name="update")(clients.update)
app.command(name="delete")(clients.delete)


@app.command()
def version() -> None:
    """Show version information."""
    from fxa_oauth import __version__

    console = Console()
    console.print(f"[bold cyan]fxa-oauth[/bold cyan] version [green]{__version__}[/green]")


@app.callback()
def main(
    ctx: typer.Context,
    env: str = typer.Option(None, "--env", "-e", help="Server environment: prod, stage, stable, latest"),
    user: str = typer.Option(None, "--user", "-u", help="Account email address"),
    url: str = typer.Option(None, "--url", help="OAuth server URL (overrides --env)"),
    fxa: str = typer.Option(None, "--fxa", help="Auth server URL (overrides --env)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
) -> None:
    """FxA OAuth CLI."""
    console = Console()
    if verbose:
        log_level = "DEBUG"
    elif quiet:
        log_level = "WARNING"
    else:
        log_level = None

    try:
        config = Config.load().with_overrides(
            env=env, user=user, oauth_url=url, auth_url=fxa, log_level=log_level
        )
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]", highlight=False)
        raise typer.Exit(1) from None

    recorder = configure_root_logging(config.log_level)
    logger.debug("argv %s", sys.argv)
    logger.debug("env %s oauth %s auth %s", config.env, config.oauth_url, config.auth_url)

    ctx.obj = CliState(config=config, recorder=recorder, presenter=ClientPresenter(console))


if __name__ == "__main__":
    app()
