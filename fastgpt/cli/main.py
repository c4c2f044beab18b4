import asyncio
import logging
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from fastgpt.cli.repl import ask_and_render, repl_main
from fastgpt.config.config_manager import mask_api_key
from fastgpt.core.app import FastGPTApp
from fastgpt.session.session import Session
from fastgpt.utils.errors import (
    ConfigError,
    ConfigMissingError,
    FastGPTError,
    FileAccessError,
    HttpError,
    ProviderError,
    TransportError,
)
from fastgpt.utils.logging import get_logger, setup_logging

VERSION = "0.1.3"

console = Console()
logger = get_logger(__name__)


def error_title(e: FastGPTError) -> str:
    """Short panel title naming what went wrong."""
    if isinstance(e, ConfigMissingError):
        return "Missing API key"
    if isinstance(e, ConfigError):
        return "Configuration error"
    if isinstance(e, HttpError):
        return f"FastGPT API error (HTTP {e.status})"
    if isinstance(e, TransportError):
        return "FastGPT API unreachable"
    if isinstance(e, ProviderError):
        return "FastGPT API error"
    if isinstance(e, FileAccessError):
        return "File error"
    return "FastGPT error"


def fail(e: FastGPTError, debug_mode: bool = False) -> NoReturn:
    """Print a fatal error panel with its hints and exit with the error's code."""
    body = f"[red]{escape(str(e))}[/red]"
    hints = getattr(e, "__notes__", [])
    if hints:
        body += "\n\n" + "\n".join(f"[dim]Hint: {escape(note)}[/dim]" for note in hints)

    console.print(
        Panel(
            body,
            title=f"[bold]{error_title(e)}[/bold]",
            subtitle=f"[dim]exit code {e.exit_code}[/dim]",
            border_style="red",
        )
    )
    if debug_mode:
        logger.debug("Fatal error", exc_info=e)
    sys.exit(e.exit_code)


async def run_once(session: Session, query: str) -> None:
    """Answer a single query without entering the REPL."""
    try:
        await ask_and_render(session, query, console)
    finally:
        await session.pipeline.aclose()


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--set-api-key", default=None, metavar="KEY", help="Set API key (will be saved for future use)")
@click.option("--show-api-key", is_flag=True, default=False, help="Show current API key")
@click.option("--reset-api-key", is_flag=True, default=False, help="Reset stored API key")
@click.option(
    "--toggle-references",
    is_flag=True,
    default=False,
    help="Toggle showing references (saved for future use)",
)
@click.option("--cache/--no-cache", default=True, help="Whether to allow cached responses")
@click.option("--json", "json_mode", is_flag=True, default=False, help="Output raw JSON response")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.version_option(VERSION, prog_name="fastgpt")
@click.argument("query", nargs=-1)
def cli(set_api_key, show_api_key, reset_api_key, toggle_references, cache, json_mode, debug, query):
    """Kagi FastGPT CLI client

    \b
    Examples:
      fastgpt --set-api-key YOUR_KEY        # Save API key
      fastgpt                               # Start interactive session
      fastgpt "what is rust?"               # One-shot question
      fastgpt --json "what is rust?"        # Raw JSON response
      fastgpt --toggle-references           # Show/hide references
    """
    setup_logging(logging.DEBUG if debug else logging.WARNING)

    try:
        app = FastGPTApp()
        cfg = app.config_manager

        if reset_api_key:
            cfg.reset_api_key()
            console.print("[bright_yellow]API key has been reset.[/bright_yellow]")
            return

        if set_api_key:
            cfg.set_api_key(set_api_key)
            console.print("[bright_green]API key has been saved successfully![/bright_green]")
            return

        if show_api_key:
            api_key = cfg.get_api_key()
            if api_key:
                console.print(
                    f"[bright_blue]Current API key:[/bright_blue] "
                    f"[bright_cyan]{mask_api_key(api_key)}[/bright_cyan]"
                )
            else:
                console.print("[bright_yellow]No API key is currently set.[/bright_yellow]")
            return

        if toggle_references:
            state = "shown" if cfg.toggle_references() else "hidden"
            console.print(f"[bright_green]References will be {state}.[/bright_green]")
            return

        session = app.create_session(cache=cache, json_mode=json_mode)

        if query:
            asyncio.run(run_once(session, " ".join(query)))
        else:
            asyncio.run(repl_main(session))
    except FastGPTError as e:
        fail(e, debug_mode=debug)
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
