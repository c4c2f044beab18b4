"""Rich rendering of session data: banner, answers, history and file listings."""

import html
import re
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from fastgpt.providers.base import FastGPTResponse
from fastgpt.session.dispatcher import COMMAND_HELP
from fastgpt.session.models import ConversationEntry, FileContext

console = Console()

BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
ITALIC_RE = re.compile(r"\*(.*?)\*")
CODE_RE = re.compile(r"`(.*?)`")
CITATION_RE = re.compile(r"【(\d+)】")


def format_markdown_text(text: str) -> str:
    """Turn answer text into Rich markup.

    HTML entities are decoded, any literal Rich markup is escaped, then
    ``**bold**``, ``*italic*``, ``code`` spans and citation markers are styled.
    """
    formatted = escape(html.unescape(text))
    formatted = BOLD_RE.sub(r"[bold bright_white]\1[/bold bright_white]", formatted)
    formatted = ITALIC_RE.sub(r"[italic]\1[/italic]", formatted)
    formatted = CODE_RE.sub(r"[bright_white on grey23]\1[/bright_white on grey23]", formatted)
    formatted = CITATION_RE.sub(r"[bold cyan]【\1】[/bold cyan]", formatted)
    return formatted


def format_size(size: int) -> str:
    """Human readable byte count."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def print_help(out: Optional[Console] = None) -> None:
    out = out or console
    out.print("[bold bright_yellow]Available commands:[/bold bright_yellow]")
    for name, description in COMMAND_HELP:
        out.print(f"  [bright_cyan]{escape(name)}[/bright_cyan] - {description}")


def print_banner(session_id: str, out: Optional[Console] = None) -> None:
    """Clear the screen and show the session header with the command list."""
    out = out or console
    out.clear()
    out.print("[bright_blue]" + "=" * 80 + "[/bright_blue]")
    out.print("[bold bright_green]Kagi FastGPT CLI[/bold bright_green]")
    out.print(f"[dim]Session ID:[/dim] [bright_cyan]{session_id}[/bright_cyan]")
    out.print("[bright_blue]" + "=" * 80 + "[/bright_blue]")
    out.print()
    print_help(out)
    out.print()
    out.print("[bold bright_magenta]Tip:[/bold bright_magenta] Just start typing your question!")
    out.print()


def print_answer(
    response: FastGPTResponse,
    query: str,
    show_references: bool = True,
    out: Optional[Console] = None,
) -> None:
    """Render an answer with its references and usage footer."""
    out = out or console
    out.print("[bright_blue]" + "=" * 80 + "[/bright_blue]")
    out.print(f"[bold bright_green]Query:[/bold bright_green] {escape(query)}")
    out.print("[bright_blue]" + "=" * 80 + "[/bright_blue]")
    out.print()
    out.print(format_markdown_text(response.data.output))
    out.print()

    if show_references and response.data.references:
        out.print("[bold bright_yellow]References:[/bold bright_yellow]")
        out.print("[yellow]" + "-" * 40 + "[/yellow]")
        for i, reference in enumerate(response.data.references, start=1):
            out.print(
                f"[bright_cyan]{i}.[/bright_cyan] "
                f"[bold bright_white]{format_markdown_text(reference.title)}[/bold bright_white]"
            )
            out.print(f"   [underline blue]{escape(reference.url)}[/underline blue]")
            if reference.snippet:
                out.print(f"   [dim]{format_markdown_text(reference.snippet)}[/dim]")
            out.print()

    out.print("[bright_black]" + "-" * 80 + "[/bright_black]")
    out.print(
        f"[dim]Tokens:[/dim] [bright_magenta]{response.data.tokens}[/bright_magenta] | "
        f"[dim]Node:[/dim] [bright_magenta]{escape(response.meta.node)}[/bright_magenta] | "
        f"[dim]Time:[/dim] [bright_magenta]{response.meta.ms}ms[/bright_magenta]"
    )


def print_json(response: FastGPTResponse, out: Optional[Console] = None) -> None:
    """Print the raw response as indented JSON."""
    out = out or console
    out.print(response.model_dump_json(indent=2), markup=False, highlight=False, soft_wrap=True)


def print_history(entries: Sequence[ConversationEntry], out: Optional[Console] = None) -> None:
    out = out or console
    if not entries:
        out.print("[dim]No conversation history.[/dim]")
        return

    out.print("[bold bright_blue]Conversation History:[/bold bright_blue]")
    out.print("[bright_blue]" + "=" * 50 + "[/bright_blue]")
    for i, entry in enumerate(entries, start=1):
        out.print(
            f"[bright_cyan]{i}.[/bright_cyan] [bold bright_green]Q[/bold bright_green]: "
            f"{escape(entry.question)}"
        )
        out.print(f"   [bold bright_magenta]A[/bold bright_magenta]: [dim]{escape(entry.answer)}[/dim]")
        out.print()


def print_files(files: List[FileContext], total: int, out: Optional[Console] = None) -> None:
    out = out or console
    if not files:
        out.print("[dim]No files in context.[/dim]")
        return

    out.print("[bold bright_blue]Files in context:[/bold bright_blue]")
    for i, file_context in enumerate(files, start=1):
        out.print(
            f"[bright_cyan]{i}.[/bright_cyan] {escape(file_context.path)} "
            f"[dim]({format_size(file_context.size)})[/dim]"
        )
    out.print(f"[dim]Total: {len(files)} file(s), {format_size(total)}[/dim]")


def print_error(message: str, out: Optional[Console] = None) -> None:
    """Single-line diagnostic."""
    out = out or console
    out.print(f"[bold bright_red]Error:[/bold bright_red] {escape(message)}")
