"""Classify one line of REPL input as a command or a question.

Precedence, highest first:

1. blank line
2. exact-match commands (EXACT_COMMANDS)
3. commands taking a path argument (ARGUMENT_COMMANDS)
4. anything else starting with ``/`` is an unknown command
5. everything else is a question
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

from fastgpt.utils.errors import UsageError


class CommandKind(str, Enum):
    NOOP = "noop"
    EXIT = "exit"
    CLEAR_HISTORY = "clear_history"
    SHOW_HISTORY = "show_history"
    SHOW_HELP = "show_help"
    ADD_FILE = "add_file"
    REMOVE_FILE = "remove_file"
    LIST_FILES = "list_files"
    CLEAR_FILES = "clear_files"
    TOGGLE_REFERENCES = "toggle_references"
    UNKNOWN = "unknown"
    QUESTION = "question"


class Command(BaseModel):
    """Parsed input line."""

    kind: CommandKind
    argument: Optional[str] = None


EXACT_COMMANDS: Dict[str, CommandKind] = {
    "/exit": CommandKind.EXIT,
    "/quit": CommandKind.EXIT,
    "/clear": CommandKind.CLEAR_HISTORY,
    "/history": CommandKind.SHOW_HISTORY,
    "/help": CommandKind.SHOW_HELP,
    "/list-files": CommandKind.LIST_FILES,
    "/clear-files": CommandKind.CLEAR_FILES,
    "/references": CommandKind.TOGGLE_REFERENCES,
}

ARGUMENT_COMMANDS: Dict[str, CommandKind] = {
    "/add-file": CommandKind.ADD_FILE,
    "/remove-file": CommandKind.REMOVE_FILE,
}

# Help text, in display order
COMMAND_HELP = [
    ("/exit, /quit", "Exit the session"),
    ("/clear", "Clear conversation history and screen"),
    ("/history", "Show conversation history"),
    ("/add-file <path>", "Add a file or directory to the context"),
    ("/remove-file <path>", "Remove a file from the context"),
    ("/list-files", "List files in the context"),
    ("/clear-files", "Remove all files from the context"),
    ("/references", "Toggle showing references for this session"),
    ("/help", "Show this help"),
]

REPL_COMMANDS = sorted(set(EXACT_COMMANDS) | set(ARGUMENT_COMMANDS))


def parse_command(line: str) -> Command:
    """Parse one input line.

    Args:
        line: Raw input; surrounding whitespace is ignored.

    Returns:
        The classified command.

    Raises:
        UsageError: A path command was given without a path.
    """
    text = line.strip()

    if not text:
        return Command(kind=CommandKind.NOOP)

    kind = EXACT_COMMANDS.get(text)
    if kind is not None:
        return Command(kind=kind)

    for name, kind in ARGUMENT_COMMANDS.items():
        if text == name or text.startswith(name + " "):
            argument = text[len(name) :].strip()
            if not argument:
                raise UsageError(f"Usage: {name} <path>")
            return Command(kind=kind, argument=argument)

    if text.startswith("/"):
        return Command(kind=CommandKind.UNKNOWN, argument=text)

    return Command(kind=CommandKind.QUESTION, argument=text)
