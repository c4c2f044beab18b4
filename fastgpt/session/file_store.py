"""Ordered store of files attached to a session."""

from pathlib import Path
from typing import Iterator, List, Tuple

from fastgpt.session.models import FileContext
from fastgpt.utils.errors import (
    DuplicateFileError,
    FileAccessError,
    FileReadError,
    NoSupportedFilesError,
    PathNotFoundError,
)
from fastgpt.utils.logging import get_logger
from fastgpt.utils.paths import canonical_path, has_supported_extension, resolve_existing_path

logger = get_logger(__name__)


def read_file_context(path: Path) -> FileContext:
    """Read a file fully as UTF-8 text.

    Raises:
        FileReadError: The file cannot be read or is not valid UTF-8.
    """
    try:
        raw = path.read_bytes()
        content = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise FileReadError(str(path), "not a UTF-8 text file") from None
    except OSError as e:
        raise FileReadError(str(path), e.strerror or str(e)) from e
    return FileContext(path=str(path), content=content, size=len(raw))


class FileContextStore:
    """Attached files, unique by canonical path, kept in attach order."""

    def __init__(self):
        self._files: List[FileContext] = []

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[FileContext]:
        return iter(list(self._files))

    def __contains__(self, path: str) -> bool:
        return self._find(str(canonical_path(path))) is not None

    def _find(self, path: str):
        for file_context in self._files:
            if file_context.path == path:
                return file_context
        return None

    def add_file(self, path: str) -> int:
        """Attach a file, or every supported file of a directory.

        Args:
            path: File or directory path as typed by the user.

        Returns:
            Number of files attached.

        Raises:
            PathNotFoundError: Path does not exist.
            FileReadError: Path is not a regular file or could not be read as text.
            DuplicateFileError: File is already attached.
            NoSupportedFilesError: Directory yielded no attachable file.
        """
        resolved = resolve_existing_path(path)
        if resolved.is_dir():
            return self.add_directory(str(resolved))
        if not resolved.is_file():
            raise FileReadError(str(resolved), "not a regular file")

        if self._find(str(resolved)) is not None:
            raise DuplicateFileError(str(resolved))

        file_context = read_file_context(resolved)
        self._files.append(file_context)
        logger.debug(f"Attached {file_context.path} ({file_context.size} bytes)")
        return 1

    def add_directory(self, path: str) -> int:
        """Attach the supported files directly inside a directory (not recursive).

        Unreadable and already attached files are skipped.

        Returns:
            Number of files attached.

        Raises:
            PathNotFoundError: Directory does not exist.
            FileReadError: Directory listing failed.
            NoSupportedFilesError: Nothing was attached.
        """
        directory = resolve_existing_path(path)
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise FileReadError(str(directory), e.strerror or str(e)) from e

        added = 0
        for entry in entries:
            if not entry.is_file() or not has_supported_extension(entry):
                continue
            canonical = entry.resolve()
            if self._find(str(canonical)) is not None:
                logger.debug(f"Skipping already attached file {canonical}")
                continue
            try:
                file_context = read_file_context(canonical)
            except FileAccessError as e:
                logger.debug(f"Skipping unreadable file: {e}")
                continue
            self._files.append(file_context)
            added += 1

        if added == 0:
            raise NoSupportedFilesError(str(directory))

        logger.debug(f"Attached {added} files from {directory}")
        return added

    def remove_file(self, path: str) -> List[FileContext]:
        """Detach the entry stored under ``path``.

        Both the literal string and its canonical form are matched, so
        ``notes.txt`` and ``./notes.txt`` name the same entry.

        Returns:
            The removed entries.

        Raises:
            PathNotFoundError: No attached file matches.
        """
        candidates = {path, str(canonical_path(path))}
        removed = [fc for fc in self._files if fc.path in candidates]
        if not removed:
            raise PathNotFoundError(path, f"File not found in context: {path}")

        self._files = [fc for fc in self._files if fc.path not in candidates]
        logger.debug(f"Detached {len(removed)} file(s) matching {path}")
        return removed

    def list_files(self) -> Tuple[List[FileContext], int]:
        """Return attached files in attach order and their total byte size."""
        files = list(self._files)
        return files, sum(fc.size for fc in files)

    def clear(self) -> int:
        """Detach everything and return how many files were removed."""
        removed = len(self._files)
        self._files = []
        return removed
