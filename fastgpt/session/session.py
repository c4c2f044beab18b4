"""Live state of one client run: history, attached files and configuration."""

import uuid
from typing import List, Tuple

from fastgpt.config.models import ClientConfig
from fastgpt.providers.base import AnswerPipeline, FastGPTResponse
from fastgpt.session.assembler import assemble_query
from fastgpt.session.file_store import FileContextStore
from fastgpt.session.history import ConversationHistory
from fastgpt.session.models import ConversationEntry, FileContext
from fastgpt.utils.logging import get_logger

logger = get_logger(__name__)


class Session:
    """Owns the file store and history and routes questions to the answer pipeline.

    Methods return data and never print; rendering is left to the caller.
    """

    def __init__(self, config: ClientConfig, pipeline: AnswerPipeline):
        self.id = str(uuid.uuid4())
        self.config = config
        self.pipeline = pipeline
        self.history = ConversationHistory()
        self.files = FileContextStore()
        logger.debug(f"Session {self.id} started")

    @property
    def show_references(self) -> bool:
        return self.config.show_references

    def build_query(self, question: str) -> str:
        """Assemble the outbound query for ``question`` from current state."""
        files, _ = self.files.list_files()
        recent = self.history.windowed(self.config.history_window)
        return assemble_query(files, recent, question, window=self.config.history_window)

    async def ask(self, question: str) -> FastGPTResponse:
        """Send ``question`` with context and record the answer.

        History is only appended after a successful round trip; pipeline
        errors propagate unchanged and leave the session as it was.
        """
        query = self.build_query(question)
        response = await self.pipeline.answer(query, cache=self.config.cache)
        self.history.append(question, response.data.output)
        logger.debug(f"History now holds {len(self.history)} entries")
        return response

    def add_file(self, path: str) -> int:
        return self.files.add_file(path)

    def remove_file(self, path: str) -> List[FileContext]:
        return self.files.remove_file(path)

    def list_files(self) -> Tuple[List[FileContext], int]:
        return self.files.list_files()

    def clear_files(self) -> int:
        return self.files.clear()

    def clear_history(self) -> int:
        return self.history.clear()

    def show_history(self) -> List[ConversationEntry]:
        return self.history.all()

    def toggle_references(self) -> bool:
        """Flip reference display for this session only."""
        self.config.show_references = not self.config.show_references
        return self.config.show_references
