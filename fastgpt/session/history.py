"""Append-only conversation log with a bounded replay window."""

from typing import Iterator, List

from fastgpt.session.models import ConversationEntry


class ConversationHistory:
    """Ordered (question, answer) log; index is both insertion order and recency rank."""

    def __init__(self):
        self._entries: List[ConversationEntry] = []

    def append(self, question: str, answer: str) -> ConversationEntry:
        entry = ConversationEntry(question=question, answer=answer)
        self._entries.append(entry)
        return entry

    def windowed(self, n: int) -> List[ConversationEntry]:
        """Return the last ``n`` entries, oldest first."""
        if n <= 0:
            return []
        return self._entries[-n:]

    def all(self) -> List[ConversationEntry]:
        return list(self._entries)

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        removed = len(self._entries)
        self._entries = []
        return removed

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConversationEntry]:
        return iter(list(self._entries))
