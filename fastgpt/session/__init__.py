"""Session state for the FastGPT client."""

from fastgpt.session.assembler import assemble_query
from fastgpt.session.dispatcher import Command, CommandKind, parse_command
from fastgpt.session.file_store import FileContextStore
from fastgpt.session.history import ConversationHistory
from fastgpt.session.models import ConversationEntry, FileContext
from fastgpt.session.session import Session

__all__ = [
    "Session",
    "ConversationEntry",
    "FileContext",
    "ConversationHistory",
    "FileContextStore",
    "Command",
    "CommandKind",
    "parse_command",
    "assemble_query",
]
