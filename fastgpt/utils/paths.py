"""Path canonicalization and extension policy for attached files.

Key functions:
- canonical_path(): expand ``~`` and resolve to an absolute path
- resolve_existing_path(): canonical_path() plus an existence check
- has_supported_extension(): text extension allow-list used by directory expansion
"""

from pathlib import Path

from fastgpt.utils.errors import PathNotFoundError

# Extensions picked up when a whole directory is attached
SUPPORTED_EXTENSIONS = frozenset(
    {
        "txt",
        "md",
        "rs",
        "py",
        "js",
        "ts",
        "html",
        "css",
        "json",
        "xml",
        "yml",
        "yaml",
        "toml",
        "sh",
        "bat",
    }
)


def canonical_path(path_str: str) -> Path:
    """Resolve to a canonical absolute path (handles ``~``, ``..`` and symlinks).

    The path does not have to exist.
    """
    return Path(path_str).expanduser().resolve()


def resolve_existing_path(path_str: str) -> Path:
    """Canonicalize ``path_str`` and verify it exists.

    Raises:
        PathNotFoundError: Path does not exist or cannot be resolved.

    Examples:
        >>> resolve_existing_path("missing.txt")
        PathNotFoundError: Path not found: missing.txt
    """
    try:
        path = canonical_path(path_str)
    except (OSError, RuntimeError) as e:
        raise PathNotFoundError(path_str, f"Invalid path: {path_str} ({e})") from e

    if not path.exists():
        raise PathNotFoundError(path_str)
    return path


def has_supported_extension(path: Path) -> bool:
    """Check the file extension against SUPPORTED_EXTENSIONS (case-insensitive).

    Examples:
        >>> has_supported_extension(Path("notes.MD"))
        True
        >>> has_supported_extension(Path("logo.png"))
        False
    """
    return path.suffix[1:].lower() in SUPPORTED_EXTENSIONS
