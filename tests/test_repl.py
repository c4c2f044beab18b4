"""Tests for REPL command handling."""

import asyncio
import os
import signal
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from conftest import FakePipeline, make_response
from fastgpt.cli.repl import TrimmedHistory, handle_repl_command, repl_completer, repl_main
from fastgpt.config.models import ClientConfig
from fastgpt.session.session import Session
from fastgpt.utils.errors import (
    DuplicateFileError,
    HttpError,
    NoSupportedFilesError,
    PathNotFoundError,
    UsageError,
)


def run(line, session, out):
    return asyncio.run(handle_repl_command(line, session, out))


class InterruptedPipeline(FakePipeline):
    """Delivers SIGINT to this process while an answer is in flight."""

    async def answer(self, query: str, cache: bool = True):
        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.sleep(0.1)
        return await super().answer(query, cache)


class TestHandleREPLCommand:
    """Tests for handle_repl_command function."""

    def test_blank_line_continues(self, session, out):
        assert run("   ", session, out) is True
        assert out.file.getvalue() == ""

    def test_exit_returns_false(self, session, out):
        assert run("/exit", session, out) is False
        assert "Goodbye!" in out.file.getvalue()

    def test_quit_returns_false(self, session, out):
        assert run("/quit", session, out) is False

    def test_help_lists_commands(self, session, out):
        assert run("/help", session, out) is True
        text = out.file.getvalue()
        assert "/add-file <path>" in text
        assert "/clear-files" in text

    def test_clear_empties_history_and_reprints_banner(self, session, out):
        session.history.append("q", "a")

        assert run("/clear", session, out) is True

        assert len(session.history) == 0
        text = out.file.getvalue()
        assert session.id in text
        assert "Conversation history cleared" in text

    def test_history_empty(self, session, out):
        run("/history", session, out)
        assert "No conversation history." in out.file.getvalue()

    def test_history_shows_entries(self, session, out):
        session.history.append("first q", "first a")
        session.history.append("second q", "second a")

        run("/history", session, out)

        text = out.file.getvalue()
        assert "1. Q: first q" in text
        assert "2. Q: second q" in text
        assert "A: second a" in text

    def test_add_file(self, session, out, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("hello", encoding="utf-8")

        assert run(f"/add-file {path}", session, out) is True

        assert len(session.files) == 1
        assert "Added 1 file(s)" in out.file.getvalue()

    def test_add_directory(self, session, out, sample_dir):
        run(f"/add-file {sample_dir}", session, out)
        assert len(session.files) == 2
        assert "Added 2 file(s)" in out.file.getvalue()

    def test_add_file_without_path_raises_usage(self, session, out):
        with pytest.raises(UsageError):
            run("/add-file ", session, out)
        assert len(session.files) == 0

    def test_add_missing_file_raises(self, session, out, tmp_path):
        with pytest.raises(PathNotFoundError):
            run(f"/add-file {tmp_path / 'missing.txt'}", session, out)

    def test_add_duplicate_raises(self, session, out, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("a", encoding="utf-8")
        run(f"/add-file {path}", session, out)

        with pytest.raises(DuplicateFileError):
            run(f"/add-file {path}", session, out)
        assert len(session.files) == 1

    def test_add_directory_without_supported_files(self, session, out, tmp_path):
        (tmp_path / "a.png").write_bytes(b"\x89PNG")
        with pytest.raises(NoSupportedFilesError):
            run(f"/add-file {tmp_path}", session, out)

    def test_remove_file(self, session, out, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("a", encoding="utf-8")
        session.add_file(str(path))

        run(f"/remove-file {path}", session, out)

        assert len(session.files) == 0
        assert "Removed" in out.file.getvalue()

    def test_list_files(self, session, out, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("abc", encoding="utf-8")
        session.add_file(str(path))

        run("/list-files", session, out)

        text = out.file.getvalue()
        assert "a.txt" in text
        assert "3 B" in text

    def test_list_files_empty(self, session, out):
        run("/list-files", session, out)
        assert "No files in context." in out.file.getvalue()

    def test_clear_files(self, session, out, sample_dir):
        session.add_file(str(sample_dir))
        run("/clear-files", session, out)
        assert len(session.files) == 0
        assert "Cleared 2 file(s)" in out.file.getvalue()

    def test_references_toggle(self, session, out):
        run("/references", session, out)
        assert session.show_references is False
        assert "hidden" in out.file.getvalue()

    def test_unknown_command_returns_true(self, session, out, pipeline):
        assert run("/bogus", session, out) is True
        assert "Unknown command: /bogus" in out.file.getvalue()
        assert pipeline.queries == []

    def test_question_renders_answer(self, session, out, pipeline):
        pipeline.results = [make_response(output="Forty-two")]

        assert run("meaning of life?", session, out) is True

        text = out.file.getvalue()
        assert "Query: meaning of life?" in text
        assert "Forty-two" in text
        assert session.show_history()[0].question == "meaning of life?"

    def test_question_json_mode(self, pipeline, out):
        session = Session(ClientConfig(api_key="k", json_mode=True), pipeline)
        pipeline.results = [make_response(output="raw")]

        run("q", session, out)

        text = out.file.getvalue()
        assert '"output": "raw"' in text
        assert "Query:" not in text

    def test_question_failure_propagates(self, session, out, pipeline):
        pipeline.results = [HttpError(503, "unavailable")]

        with pytest.raises(HttpError):
            run("q", session, out)
        assert len(session.history) == 0


class TestREPLMain:
    """Tests for the REPL loop."""

    def _prompt_with(self, lines):
        prompt_session = MagicMock()
        prompt_session.prompt_async = AsyncMock(side_effect=lines)
        return prompt_session

    def test_errors_do_not_end_loop(self, session, out, pipeline):
        """Test that recoverable errors print one line and the loop continues."""
        pipeline.results = [HttpError(500, "boom"), make_response(output="fine")]
        prompt_session = self._prompt_with(
            ["/add-file ", "/remove-file nope.txt", "first", "second", "/exit"]
        )

        with patch("fastgpt.cli.repl.PromptSession", return_value=prompt_session):
            asyncio.run(repl_main(session, out))

        text = out.file.getvalue()
        assert "Error: Usage: /add-file <path>" in text
        assert "Error: File not found in context: nope.txt" in text
        assert "Error: API request failed with status 500: boom" in text
        assert [e.question for e in session.show_history()] == ["second"]
        assert pipeline.closed is True

    def test_ctrl_c_returns_to_prompt(self, session, out):
        prompt_session = self._prompt_with([KeyboardInterrupt(), "/quit"])

        with patch("fastgpt.cli.repl.PromptSession", return_value=prompt_session):
            asyncio.run(repl_main(session, out))

        assert "Use /exit or /quit to exit." in out.file.getvalue()
        assert prompt_session.prompt_async.await_count == 2

    def test_ctrl_d_exits(self, session, out, pipeline):
        prompt_session = self._prompt_with([EOFError()])

        with patch("fastgpt.cli.repl.PromptSession", return_value=prompt_session):
            asyncio.run(repl_main(session, out))

        assert "Goodbye!" in out.file.getvalue()
        assert pipeline.closed is True

    @pytest.mark.skipif(sys.platform == "win32", reason="requires loop signal handlers")
    def test_ctrl_c_during_question_keeps_session(self, client_config, out):
        """Test that Ctrl+C while waiting for an answer returns to the prompt with state intact."""
        pipeline = InterruptedPipeline([make_response(output="finished anyway")])
        session = Session(client_config, pipeline)
        prompt_session = self._prompt_with(["q1", "/quit"])

        with patch("fastgpt.cli.repl.PromptSession", return_value=prompt_session):
            asyncio.run(repl_main(session, out))

        text = out.file.getvalue()
        assert "Use /exit or /quit to exit." in text
        assert "finished anyway" in text
        assert [e.question for e in session.show_history()] == ["q1"]
        assert prompt_session.prompt_async.await_count == 2
        assert pipeline.closed is True

    def test_prompt_uses_trimmed_history(self, session, out):
        prompt_session = self._prompt_with([EOFError()])

        with patch("fastgpt.cli.repl.PromptSession", return_value=prompt_session) as factory:
            asyncio.run(repl_main(session, out))

        assert isinstance(factory.call_args.kwargs["history"], TrimmedHistory)

    def test_recall_buffer_skips_blank_lines(self, session, out):
        """Test typed lines reach recall history trimmed, and blank lines not at all."""
        created = []

        with create_pipe_input() as pipe_input:

            def make_prompt(**kwargs):
                created.append(PromptSession(input=pipe_input, output=DummyOutput(), **kwargs))
                return created[-1]

            pipe_input.send_text("   \r  hello  \r/exit\r")
            with patch("fastgpt.cli.repl.PromptSession", side_effect=make_prompt):
                asyncio.run(repl_main(session, out))

        assert created[0].history.get_strings() == ["hello", "/exit"]
        assert [e.question for e in session.show_history()] == ["hello"]


class TestCompleter:
    """Tests for REPL tab completion."""

    def test_completer_words(self):
        assert "/add-file" in repl_completer.words
        assert "/exit" in repl_completer.words


class TestTrimmedHistory:
    """Tests for the prompt recall history."""

    def test_blank_lines_not_recorded(self):
        history = TrimmedHistory()
        history.append_string("   ")
        history.append_string("")
        assert history.get_strings() == []

    def test_lines_stored_trimmed(self):
        history = TrimmedHistory()
        history.append_string("  what is rust?  ")
        history.append_string("/help")
        assert history.get_strings() == ["what is rust?", "/help"]
