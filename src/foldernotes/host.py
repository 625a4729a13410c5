"""Host-facing interfaces: file tree, notifications, error taxonomy.

The core never touches the filesystem directly. Everything goes through a
``FileTree`` the host provides (``foldernotes.vault.Vault`` on local disk,
an in-memory double in tests):

    tree.exists("Projects/Projects.md")   -> FileNode | None
    tree.read(note)                       -> str
    tree.write(note, text)
    tree.create("Projects/todo.md", "")   -> FileNode
    tree.list_folders() / tree.list_files()
    tree.register_filter(visibility)

Paths are vault-relative, ``/``-separated, with no leading slash. The vault
root itself is ``""``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
    from foldernotes.visibility import VisibilityFilter

FOLDER = "folder"
NOTE = "note"

NodeKind = Literal["folder", "note"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class FolderNotesError(Exception):
    """Base class for errors raised by foldernotes."""


class AlreadyExistsError(FolderNotesError, FileExistsError):
    """create() was called for a path that is already taken."""


class InvalidNameError(FolderNotesError, ValueError):
    """The host refused a path (illegal characters, missing parent, ...)."""


class InvalidTemplateError(FolderNotesError, ValueError):
    """A naming convention without exactly one placeholder."""


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def split_path(path: str) -> tuple[str, str]:
    """Split "a/b/c.md" into ("a/b", "c.md"). Top-level entries get ""."""
    parent, _, name = path.rpartition("/")
    return parent, name


def join_path(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def path_depth(path: str) -> int:
    """Number of segments: "A" -> 1, "A/B" -> 2, "" -> 0."""
    return len(path.split("/")) if path else 0


@dataclass(frozen=True)
class FileNode:
    """A folder or note in the host tree. Content lives in the tree, not here."""

    path: str
    kind: NodeKind

    @property
    def name(self) -> str:
        return split_path(self.path)[1]

    @property
    def parent_path(self) -> str:
        return split_path(self.path)[0]

    @property
    def is_folder(self) -> bool:
        return self.kind == FOLDER

    @property
    def is_note(self) -> bool:
        return self.kind == NOTE

    @property
    def depth(self) -> int:
        return path_depth(self.path)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

class FileTree(Protocol):
    """Minimal file-tree API the core depends on."""

    def exists(self, path: str) -> FileNode | None: ...

    def read(self, note: FileNode) -> str: ...

    def write(self, note: FileNode, text: str) -> None: ...

    def create(self, path: str, text: str) -> FileNode: ...

    def list_folders(self) -> list[FileNode]: ...

    def list_files(self) -> list[FileNode]: ...

    def register_filter(self, visibility: VisibilityFilter) -> None: ...


class Notifier(Protocol):
    """Ephemeral user-visible messages. Best effort."""

    def notice(self, message: str) -> None: ...


class LogNotifier:
    """Notifier that writes notices to the ``foldernotes.notice`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("foldernotes.notice")

    def notice(self, message: str) -> None:
        self.logger.info("%s", message)
