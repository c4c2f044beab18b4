"""Assemble the outbound query from file contexts, history and the new question.

The output layout is fixed::

    Attached files:
    --- BEGIN FILE: /abs/path ---
    <content>
    --- END FILE: /abs/path ---

    Previous conversation context:
    Q1: ...
    A1: ...

    Current question: <question>

Either block is omitted when empty. With no files and no history the question
is returned untouched.
"""

from typing import Sequence

from fastgpt.config.models import HISTORY_WINDOW
from fastgpt.session.models import ConversationEntry, FileContext

FILES_HEADER = "Attached files:"
HISTORY_HEADER = "Previous conversation context:"
QUESTION_PREFIX = "Current question: "


def format_file_block(file_context: FileContext) -> str:
    """Wrap one file in begin/end markers carrying its path."""
    return (
        f"--- BEGIN FILE: {file_context.path} ---\n"
        f"{file_context.content}\n"
        f"--- END FILE: {file_context.path} ---\n\n"
    )


def format_history_block(entries: Sequence[ConversationEntry]) -> str:
    """Number entries from 1, oldest first."""
    return "".join(
        f"Q{i}: {entry.question}\nA{i}: {entry.answer}\n\n"
        for i, entry in enumerate(entries, start=1)
    )


def assemble_query(
    file_contexts: Sequence[FileContext],
    history: Sequence[ConversationEntry],
    question: str,
    window: int = HISTORY_WINDOW,
) -> str:
    """Build the query string sent to the API.

    Args:
        file_contexts: Attached files in attach order.
        history: Conversation entries in chronological order. Only the last
            ``window`` are used.
        question: The raw user question.
        window: Maximum number of history entries to replay.

    Returns:
        The assembled query, or ``question`` itself when there is no context.
    """
    recent = list(history)[-window:] if window > 0 else []

    if not file_contexts and not recent:
        return question

    parts = []
    if file_contexts:
        parts.append(f"{FILES_HEADER}\n")
        parts.extend(format_file_block(fc) for fc in file_contexts)
    if recent:
        parts.append(f"{HISTORY_HEADER}\n")
        parts.append(format_history_block(recent))
    parts.append(f"{QUESTION_PREFIX}{question}")
    return "".join(parts)
