"""File context: every file under the app root, keyed by "./"-relative path."""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

# Source files under the app root, minus the +html and +native-intent documents
CONTEXT_FILTER = re.compile(
    r"^\./(?!(?:.*/)?\+(?:html|native-intent)\.[jt]sx?$).*\.[jt]sx?$"
)

# Directories to ignore when scanning for files
IGNORED_DIRECTORIES = frozenset({
    # === Version Control ===
    ".git",
    ".svn",
    ".hg",

    # === JavaScript / TypeScript ===
    "node_modules",
    ".npm",
    ".pnpm-store",
    ".yarn",
    ".cache",
    ".turbo",

    # === React Native / Expo ===
    ".expo",
    ".expo-shared",
    "Pods",

    # === IDEs ===
    ".idea",
    ".vscode",

    # === Build Outputs ===
    "dist",
    "build",
})


def to_context_key(relative_path: str | Path) -> str:
    """Normalize a root-relative path into a context key.

    Keys use POSIX separators and always start with "./".
    """
    key = Path(relative_path).as_posix()
    if key.startswith("./"):
        return key
    return f"./{key}"


def should_ignore_path(relative_path: Path) -> bool:
    """Check if a root-relative path should be ignored during scanning.

    Args:
        relative_path: Path relative to the scanned directory

    Returns:
        True if the path should be ignored
    """
    for part in relative_path.parts[:-1]:
        if part in IGNORED_DIRECTORIES:
            return True
        # Also ignore hidden directories
        if part.startswith(".") and part not in {".github", ".gitlab"}:
            return True
    return False


class FileContext:
    """Mutable mapping of context keys to the files they load.

    Seeded from a directory scan with `require_context` and kept up to date
    by the watch session through `add` and `delete`.
    """

    def __init__(self, root: Path, keys: list[str] | None = None):
        """Initialize the context.

        Args:
            root: Directory the keys are relative to
            keys: Initial context keys
        """
        self._root = root
        self._files: dict[str, Path] = {}
        for key in keys or []:
            self.add(key)

    @property
    def root(self) -> Path:
        """Directory the keys are relative to."""
        return self._root

    def keys(self) -> list[str]:
        """Get all known keys in sorted order."""
        return sorted(self._files)

    def add(self, key: str) -> None:
        """Track a file. Adding a known key is a no-op."""
        key = to_context_key(key)
        self._files[key] = self._root / key[2:]

    def delete(self, key: str) -> None:
        """Stop tracking a file. Unknown keys are ignored."""
        self._files.pop(to_context_key(key), None)

    def resolve(self, key: str) -> Path:
        """Get the absolute path behind a key.

        Raises:
            KeyError: If the key is not in the context
        """
        return self._files[to_context_key(key)]

    def load(self, key: str) -> str:
        """Read the current contents of a tracked file.

        Raises:
            KeyError: If the key is not in the context
        """
        return self.resolve(key).read_text(encoding="utf-8")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and to_context_key(key) in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"FileContext(root={str(self._root)!r}, files={len(self._files)})"


def require_context(
    directory: Path,
    recursive: bool = True,
    pattern: re.Pattern[str] = CONTEXT_FILTER,
) -> FileContext:
    """Build a file context from a directory scan.

    Args:
        directory: Directory to scan
        recursive: Whether to descend into subdirectories
        pattern: Regex a "./"-prefixed relative path must match to be included

    Returns:
        A context holding every matching file
    """
    context = FileContext(directory)
    if not directory.is_dir():
        logger.warning(f"Cannot scan {directory}: not a directory")
        return context

    candidates = directory.rglob("*") if recursive else directory.glob("*")
    for file_path in candidates:
        if not file_path.is_file():
            continue
        relative_path = file_path.relative_to(directory)
        if should_ignore_path(relative_path):
            continue
        key = to_context_key(relative_path)
        if pattern.search(key):
            context.add(key)

    logger.debug(f"Scanned {directory}: {len(context)} files")
    return context
