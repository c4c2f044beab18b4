"""Interactive REPL for the FastGPT client."""

import asyncio
import signal
from contextlib import contextmanager
from typing import Iterator, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.markup import escape

from fastgpt.cli import render
from fastgpt.session.dispatcher import REPL_COMMANDS, CommandKind, parse_command
from fastgpt.session.session import Session
from fastgpt.utils.errors import FastGPTError
from fastgpt.utils.logging import get_logger

logger = get_logger(__name__)

EXIT_HINT = "[bright_yellow]Use /exit or /quit to exit.[/bright_yellow]"

# Create completer for REPL commands
repl_completer = WordCompleter(
    list(REPL_COMMANDS),
    ignore_case=True,
    sentence=True,
)


class TrimmedHistory(InMemoryHistory):
    """Recall history that stores trimmed lines and ignores blank ones."""

    def append_string(self, string: str) -> None:
        string = string.strip()
        if string:
            super().append_string(string)


@contextmanager
def sigint_hint(out: Console) -> Iterator[None]:
    """Print the exit hint on Ctrl+C instead of cancelling the running command.

    The in-flight command keeps running until it completes or fails.
    """
    loop = asyncio.get_running_loop()
    previous = signal.getsignal(signal.SIGINT)
    try:
        loop.add_signal_handler(signal.SIGINT, out.print, EXIT_HINT)
    except (NotImplementedError, RuntimeError):
        # No loop signal handlers on Windows or outside the main thread
        yield
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


async def ask_and_render(session: Session, question: str, out: Optional[Console] = None) -> None:
    """Run one question through the session and print the answer."""
    out = out or render.console
    with out.status("[dim]Thinking...[/dim]"):
        response = await session.ask(question)

    if session.config.json_mode:
        render.print_json(response, out)
    else:
        render.print_answer(response, question, session.show_references, out)
    out.print()


async def handle_repl_command(line: str, session: Session, out: Optional[Console] = None) -> bool:
    """Parse and execute one input line.

    Args:
        line: Raw input line.
        session: Current session.
        out: Console to render to.

    Returns:
        False if should exit, True otherwise.

    Raises:
        FastGPTError: The command or question failed; the session is unchanged.
    """
    out = out or render.console
    command = parse_command(line)
    kind = command.kind

    if kind == CommandKind.NOOP:
        return True

    elif kind == CommandKind.EXIT:
        out.print("[bright_green]Goodbye![/bright_green]")
        return False

    elif kind == CommandKind.CLEAR_HISTORY:
        session.clear_history()
        render.print_banner(session.id, out)
        out.print("[bright_yellow]Conversation history cleared and screen reset.[/bright_yellow]")

    elif kind == CommandKind.SHOW_HISTORY:
        render.print_history(session.show_history(), out)

    elif kind == CommandKind.SHOW_HELP:
        render.print_help(out)

    elif kind == CommandKind.ADD_FILE:
        added = session.add_file(command.argument)
        _, total = session.list_files()
        out.print(
            f"[green]✓[/green] Added {added} file(s) from {escape(command.argument)} "
            f"[dim](context: {len(session.files)} file(s), {render.format_size(total)})[/dim]"
        )

    elif kind == CommandKind.REMOVE_FILE:
        for removed in session.remove_file(command.argument):
            out.print(f"[green]✓[/green] Removed {escape(removed.path)} from context")

    elif kind == CommandKind.LIST_FILES:
        files, total = session.list_files()
        render.print_files(files, total, out)

    elif kind == CommandKind.CLEAR_FILES:
        removed = session.clear_files()
        out.print(f"[bright_yellow]Cleared {removed} file(s) from context.[/bright_yellow]")

    elif kind == CommandKind.TOGGLE_REFERENCES:
        state = "shown" if session.toggle_references() else "hidden"
        out.print(f"[dim]References will be {state} for this session.[/dim]")

    elif kind == CommandKind.UNKNOWN:
        render.print_error(
            f"Unknown command: {command.argument}. Type /help for available commands.", out
        )

    else:
        await ask_and_render(session, command.argument, out)

    return True


async def repl_main(session: Session, out: Optional[Console] = None) -> None:
    """Interactive question loop.

    Every recoverable error is printed on one line and control returns to
    the prompt.
    Ctrl+C while a command runs prints the exit hint and lets the command
    finish.
    """
    out = out or render.console
    render.print_banner(session.id, out)

    # prompt_toolkit records accepted lines; TrimmedHistory drops the blank ones
    prompt_session = PromptSession(history=TrimmedHistory(), completer=repl_completer)

    try:
        while True:
            try:
                user_input = (await prompt_session.prompt_async(" ")).strip()
            except KeyboardInterrupt:
                out.print(EXIT_HINT)
                continue
            except EOFError:
                out.print("[bright_green]Goodbye![/bright_green]")
                break

            try:
                with sigint_hint(out):
                    keep_going = await handle_repl_command(user_input, session, out)
                if not keep_going:
                    break
            except FastGPTError as e:
                logger.debug(f"Command failed: {e!r}")
                render.print_error(str(e), out)
            except Exception as e:
                logger.exception(f"REPL error: {e}")
                render.print_error(str(e), out)
    finally:
        await session.pipeline.aclose()
