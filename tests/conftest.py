"""
Shared pytest fixtures and helpers for FastGPT client tests.

The answer pipeline is replaced by FakePipeline so sessions can be driven
without network access.
"""

import io
from typing import List, Optional

import pytest
from rich.console import Console

from fastgpt.config.models import ClientConfig
from fastgpt.providers.base import AnswerPipeline, FastGPTResponse
from fastgpt.session.session import Session

# =============================================================================
# Helper Functions
# =============================================================================


def make_response(output: str = "Answer", references: Optional[list] = None, tokens: int = 42) -> FastGPTResponse:
    """Build a response in the API's wire shape."""
    return FastGPTResponse.model_validate(
        {
            "meta": {"id": "req-1", "node": "us-east", "ms": 1234},
            "data": {
                "output": output,
                "references": references or [],
                "tokens": tokens,
            },
        }
    )


class FakePipeline(AnswerPipeline):
    """Records queries and answers from a queue of responses or errors."""

    def __init__(self, results: Optional[list] = None):
        self.results = list(results or [])
        self.queries: List[str] = []
        self.cache_flags: List[bool] = []
        self.closed = False

    async def answer(self, query: str, cache: bool = True) -> FastGPTResponse:
        self.queries.append(query)
        self.cache_flags.append(cache)
        result = self.results.pop(0) if self.results else make_response()
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(api_key="test-key-123456")


@pytest.fixture
def pipeline() -> FakePipeline:
    return FakePipeline()


@pytest.fixture
def session(client_config, pipeline) -> Session:
    return Session(client_config, pipeline)


@pytest.fixture
def out() -> Console:
    """Console writing to a buffer; read it with ``out.file.getvalue()``."""
    return Console(file=io.StringIO(), width=240, force_terminal=False, color_system=None)


@pytest.fixture
def sample_dir(tmp_path):
    """Directory with two text files, an image and a subdirectory."""
    (tmp_path / "notes.md").write_text("# Notes\nhello", encoding="utf-8")
    (tmp_path / "script.py").write_text("print('hi')\n", encoding="utf-8")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "deep.txt").write_text("deep", encoding="utf-8")
    return tmp_path
