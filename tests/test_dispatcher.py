"""Table-driven tests for REPL input classification."""

import pytest

from fastgpt.session.dispatcher import (
    ARGUMENT_COMMANDS,
    EXACT_COMMANDS,
    REPL_COMMANDS,
    Command,
    CommandKind,
    parse_command,
)
from fastgpt.utils.errors import UsageError

PARSE_CASES = [
    ("", CommandKind.NOOP, None),
    ("   ", CommandKind.NOOP, None),
    ("/exit", CommandKind.EXIT, None),
    ("/quit", CommandKind.EXIT, None),
    ("  /quit  ", CommandKind.EXIT, None),
    ("/clear", CommandKind.CLEAR_HISTORY, None),
    ("/history", CommandKind.SHOW_HISTORY, None),
    ("/help", CommandKind.SHOW_HELP, None),
    ("/add-file notes.txt", CommandKind.ADD_FILE, "notes.txt"),
    ("/add-file   my dir/notes.txt  ", CommandKind.ADD_FILE, "my dir/notes.txt"),
    ("/remove-file notes.txt", CommandKind.REMOVE_FILE, "notes.txt"),
    ("/list-files", CommandKind.LIST_FILES, None),
    ("/clear-files", CommandKind.CLEAR_FILES, None),
    ("/references", CommandKind.TOGGLE_REFERENCES, None),
    ("/bogus", CommandKind.UNKNOWN, "/bogus"),
    ("/add-filenotes.txt", CommandKind.UNKNOWN, "/add-filenotes.txt"),
    ("/clear now", CommandKind.UNKNOWN, "/clear now"),
    ("/EXIT", CommandKind.UNKNOWN, "/EXIT"),
    ("hello", CommandKind.QUESTION, "hello"),
    ("what is /etc/hosts?", CommandKind.QUESTION, "what is /etc/hosts?"),
]


@pytest.mark.parametrize("line,kind,argument", PARSE_CASES)
def test_parse_command(line, kind, argument):
    assert parse_command(line) == Command(kind=kind, argument=argument)


@pytest.mark.parametrize(
    "line",
    ["/add-file ", "/add-file", "/add-file    ", "/remove-file ", "/remove-file"],
)
def test_path_command_without_path_is_usage_error(line):
    """Test that an empty path is reported instead of dispatched."""
    with pytest.raises(UsageError) as exc_info:
        parse_command(line)
    assert "<path>" in str(exc_info.value)


class TestCommandTables:
    """Tests for the command tables."""

    def test_tables_do_not_overlap(self):
        assert not set(EXACT_COMMANDS) & set(ARGUMENT_COMMANDS)

    def test_all_commands_start_with_slash(self):
        for cmd in REPL_COMMANDS:
            assert cmd.startswith("/")
            assert cmd == cmd.lower()

    def test_completion_list_covers_both_tables(self):
        assert set(REPL_COMMANDS) == set(EXACT_COMMANDS) | set(ARGUMENT_COMMANDS)
