"""
Memory store: categorized, tagged facts kept in flat text files.

Each storage area (global or local) is a root directory. A category is
one ``<category>.txt`` file in that directory, encoded by tagmem.codec.
Nothing is cached between calls; every operation re-reads from disk.

Filesystem errors (permissions, disk full, ...) are not caught here.
A missing category file or area root is treated as empty.

There is no locking: concurrent read-modify-write calls on the same
file (remove_specific_memory) can lose updates. Callers that need
serialization must provide it.
"""

import logging
import os
import shutil
from pathlib import Path

from . import codec
from .errors import InvalidCategoryError

logger = logging.getLogger(__name__)


def _read_file(path: Path) -> str:
    # newline="" keeps a lone \r inside a body; undecodable bytes become U+FFFD
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def _write_file(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def area_name(is_global: bool) -> str:
    return "global" if is_global else "local"


def validate_category(category: str) -> None:
    """
    Reject category names that would escape the area root.

    Raises:
        InvalidCategoryError: for empty names, "." / "..", NUL,
            or names containing a path separator
    """
    if not category:
        raise InvalidCategoryError("Category name must not be empty")
    if category in (".", ".."):
        raise InvalidCategoryError(f"Invalid category name: {category!r}")
    if "\x00" in category:
        raise InvalidCategoryError("Category name must not contain NUL")
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in category for sep in separators):
        raise InvalidCategoryError(
            f"Category name must not contain a path separator: {category!r}"
        )


class MemoryStore:
    """
    File-backed memory store with a global and a local area.

    Args:
        global_root: Directory holding user-wide categories
        local_root: Directory holding project-scoped categories
    """

    def __init__(self, global_root: Path, local_root: Path):
        self.global_root = Path(global_root)
        self.local_root = Path(local_root)

    def root(self, is_global: bool) -> Path:
        """Area root directory."""
        return self.global_root if is_global else self.local_root

    def category_path(self, category: str, is_global: bool) -> Path:
        """Path of the file backing a category in the given area."""
        validate_category(category)
        return self.root(is_global) / f"{category}{codec.CATEGORY_SUFFIX}"

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def remember(
        self,
        category: str,
        body: str,
        tags: list[str],
        is_global: bool,
    ) -> None:
        """
        Append one memory to a category, creating the file on first use.

        The area root is created if it does not exist yet (it may have been
        skipped at startup when persistence is disabled).
        """
        path = self.category_path(category, is_global)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8", newline="") as f:
            f.write(codec.encode_append(tags, body))
        logger.debug("Appended to %s (%s), tags=%s", category, area_name(is_global), tags)

    def remove_specific_memory(
        self,
        category: str,
        substring: str,
        is_global: bool,
    ) -> None:
        """
        Remove every block of a category whose text contains ``substring``.

        No-op if the category does not exist. The file is rewritten even if
        no entries remain.
        """
        path = self.category_path(category, is_global)
        if not path.exists():
            return
        content = _read_file(path)
        _write_file(path, codec.filter_out(content, substring))
        logger.debug("Filtered %s (%s)", category, area_name(is_global))

    def clear_memory(self, category: str, is_global: bool) -> None:
        """Delete a category file. No-op if absent."""
        path = self.category_path(category, is_global)
        if path.exists():
            path.unlink()
            logger.debug("Deleted %s (%s)", category, area_name(is_global))

    def clear_all(self, is_global: bool) -> None:
        """
        Delete every category in an area.

        The area root is removed and recreated empty. Nothing happens if the
        root does not exist.
        """
        root = self.root(is_global)
        if root.exists():
            shutil.rmtree(root)
            root.mkdir(parents=True, exist_ok=True)
            logger.debug("Cleared %s area at %s", area_name(is_global), root)

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def retrieve(self, category: str, is_global: bool) -> dict[str, list[str]]:
        """Entries of one category grouped by tag key (empty if absent)."""
        path = self.category_path(category, is_global)
        if not path.exists():
            return {}
        return codec.decode(_read_file(path))

    def retrieve_all(self, is_global: bool) -> dict[str, list[str]]:
        """
        Entries of every category in an area, flattened per category.

        Returns:
            Mapping of category name -> entry bodies across all tag groups.
            Empty if the area root does not exist.
        """
        root = self.root(is_global)
        memories: dict[str, list[str]] = {}
        if not root.is_dir():
            return memories

        for path in sorted(root.iterdir()):
            if not path.name.endswith(codec.CATEGORY_SUFFIX) or not path.is_file():
                continue
            category = path.name[: -len(codec.CATEGORY_SUFFIX)]
            grouped = codec.decode(_read_file(path))
            memories[category] = codec.flatten(grouped)

        return memories

