"""Vault: FileTree backed by a directory on local disk.

    vault = Vault("/path/to/vault")
    node = vault.exists("Projects")          # FileNode(path="Projects", kind="folder")
    vault.create("Projects/Projects.md", "# Projects")
    for folder in vault.list_folders(): ...

Excluded paths (``.obsidian/``, dotfiles, ... see config) do not exist as far
as the core is concerned. Only files with a note extension are listed or
dispatched as notes; exists() reports any other regular file too, so a folder
note whose name lacks a note extension is still seen as present.

Writes go to the file in place (no tmp + rename), so a watcher sees a single
CLOSE_WRITE on the existing path rather than a create/move pair.
"""

from __future__ import annotations

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

from foldernotes.host import FOLDER, NOTE, AlreadyExistsError, FileNode, InvalidNameError, join_path, split_path

if TYPE_CHECKING:
    from collections.abc import Iterator

    from foldernotes.config import FolderNotesConfig
    from foldernotes.visibility import VisibilityFilter

_ILLEGAL_NAME_CHARS = set('\\:*?"<>|')


def _check_name(name: str) -> None:
    if not name or name in (".", ".."):
        msg = f"invalid file name: {name!r}"
        raise InvalidNameError(msg)
    bad = sorted({c for c in name if c in _ILLEGAL_NAME_CHARS or ord(c) < 32})
    if bad:
        msg = f"file name {name!r} contains illegal characters: {''.join(bad)!r}"
        raise InvalidNameError(msg)


class Vault:
    """Local-directory FileTree."""

    def __init__(
        self,
        root: Path | str,
        *,
        exclude: list[str] | None = None,
        note_extensions: list[str] | None = None,
    ) -> None:
        self.root = Path(root)
        self.exclude = list(exclude or [])
        self.note_extensions = tuple(e.lower() for e in (note_extensions or [".md"]))
        self.filters: list[VisibilityFilter] = []

    @classmethod
    def from_config(cls, cfg: FolderNotesConfig) -> Vault:
        return cls(cfg.vault_dir, exclude=cfg.vault.exclude, note_extensions=cfg.vault.note_extensions)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def abs_path(self, path: str) -> Path:
        return self.root / path if path else self.root

    def rel_path(self, p: Path) -> str:
        return p.relative_to(self.root).as_posix()

    def is_excluded(self, path: str) -> bool:
        for raw in self.exclude:
            pat = raw.lstrip("/")
            if fnmatch(path, pat) or fnmatch(path + "/", pat):
                return True
            if pat.startswith("**/") and fnmatch(path, pat[3:]):
                return True
        return False

    def is_note_path(self, path: str) -> bool:
        return path.lower().endswith(self.note_extensions)

    # ------------------------------------------------------------------
    # FileTree
    # ------------------------------------------------------------------

    def exists(self, path: str) -> FileNode | None:
        if not path or self.is_excluded(path):
            return None
        p = self.abs_path(path)
        if p.is_dir():
            return FileNode(path, FOLDER)
        if p.is_file():
            return FileNode(path, NOTE)
        return None

    def read(self, note: FileNode) -> str:
        return self.abs_path(note.path).read_text(encoding="utf-8")

    def write(self, note: FileNode, text: str) -> None:
        with self.abs_path(note.path).open("w", encoding="utf-8") as f:
            f.write(text)

    def create(self, path: str, text: str) -> FileNode:
        """Create a new note. Raises AlreadyExistsError if the path is taken."""
        parent, name = split_path(path)
        _check_name(name)
        if parent and not self.abs_path(parent).is_dir():
            msg = f"parent folder does not exist: {parent!r}"
            raise InvalidNameError(msg)
        try:
            with self.abs_path(path).open("x", encoding="utf-8") as f:
                f.write(text)
        except FileExistsError as exc:
            msg = f"File already exists: {path}"
            raise AlreadyExistsError(msg) from exc
        return FileNode(path, NOTE)

    def walk(self, start: str = "") -> Iterator[FileNode]:
        """Yield every non-excluded folder and note under start, top-down, sorted by name."""
        if start and self.is_excluded(start):
            return
        for dirpath, dirnames, filenames in os.walk(self.abs_path(start)):
            rel_dir = "" if Path(dirpath) == self.root else self.rel_path(Path(dirpath))
            dirnames[:] = sorted(d for d in dirnames if not self.is_excluded(join_path(rel_dir, d)))
            if rel_dir:
                yield FileNode(rel_dir, FOLDER)
            for fname in sorted(filenames):
                rel = join_path(rel_dir, fname)
                if self.is_note_path(rel) and not self.is_excluded(rel):
                    yield FileNode(rel, NOTE)

    def list_folders(self) -> list[FileNode]:
        return [n for n in self.walk() if n.is_folder]

    def list_files(self) -> list[FileNode]:
        return [n for n in self.walk() if n.is_note]

    def register_filter(self, visibility: VisibilityFilter) -> None:
        self.filters.append(visibility)

    def iter_visible(self) -> Iterator[FileNode]:
        """walk() minus anything a registered filter hides."""
        for node in self.walk():
            if node.is_note and any(f.is_hidden(node.path) for f in self.filters):
                continue
            yield node
