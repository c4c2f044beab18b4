"""Pydantic models for in-memory session state."""

from pydantic import BaseModel


class ConversationEntry(BaseModel):
    """One successful question/answer round trip."""

    question: str  # raw user input, not the assembled query
    answer: str


class FileContext(BaseModel):
    """A local file attached to the session."""

    path: str  # canonical resolved path, unique within a store
    content: str
    size: int  # UTF-8 byte length of content at read time
