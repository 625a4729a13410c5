"""Folder notes: one companion note per folder, linked to the parent's note.

    manager = FolderNoteManager(tree, settings, notifier)
    manager.ensure_folder_note(folder)          # Projects/ -> Projects/Projects.md
    manager.link_to_parent_folder_note(folder)  # prepend [[Parent]] to it

Uniqueness is by existence-check-before-create. A concurrent creator that
wins the race shows up as AlreadyExistsError from the tree and is treated the
same as "already there".
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from foldernotes import links
from foldernotes.host import AlreadyExistsError, LogNotifier
from foldernotes.naming import folder_note_path

if TYPE_CHECKING:
    from foldernotes.config import Settings
    from foldernotes.host import FileNode, FileTree, Notifier

logger = logging.getLogger("foldernotes.manager")


class EnsureOutcome(enum.Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class FolderNoteManager:
    """Creates folder notes and links them upward one level."""

    def __init__(self, tree: FileTree, settings: Settings, notifier: Notifier | None = None) -> None:
        self.tree = tree
        self.settings = settings
        self.notifier = notifier or LogNotifier()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def folder_note_path(self, folder: FileNode) -> str:
        return folder_note_path(folder.path, folder.name, self.settings.naming_convention)

    def folder_note_for(self, folder: FileNode) -> FileNode | None:
        return self.tree.exists(self.folder_note_path(folder))

    def parent_folder(self, node: FileNode) -> FileNode | None:
        """The folder directly containing node, or None at the vault root."""
        return self.folder_at(node.parent_path)

    def folder_at(self, path: str) -> FileNode | None:
        if not path:
            return None
        found = self.tree.exists(path)
        if found is None or not found.is_folder:
            return None
        return found

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def ensure_folder_note(self, folder: FileNode) -> EnsureOutcome:
        """Create the folder note for folder unless one is already there."""
        path = self.folder_note_path(folder)
        logger.debug("checking folder note: %s", path)

        if self.tree.exists(path) is not None:
            logger.debug("folder note already exists: %s", path)
            return EnsureOutcome.ALREADY_EXISTS

        try:
            self.tree.create(path, f"# {folder.name}")
        except AlreadyExistsError:
            logger.info("folder note appeared concurrently: %s", path)
            return EnsureOutcome.ALREADY_EXISTS
        except Exception:
            logger.error("failed to create folder note: %s", path)
            raise

        logger.info("folder note created: %s", path)
        self.notifier.notice(f"Folder note created for {folder.name}")
        return EnsureOutcome.CREATED

    def link_to_parent_folder_note(self, folder: FileNode) -> bool:
        """Prepend [[parent]] to folder's note. True if the note was rewritten."""
        parent = self.parent_folder(folder)
        if parent is None or self.folder_note_for(parent) is None:
            return False

        note = self.folder_note_for(folder)
        if note is None:
            return False

        strict = self.settings.strict_links
        content = self.tree.read(note)
        if links.has_link(content, parent.name, strict=strict):
            return False

        self.tree.write(note, links.prepend(content, parent.name))
        logger.info("linked %s to parent folder note %s", folder.path, parent.path)
        self.notifier.notice(f"Linked {folder.name} to its parent folder note: {parent.name}")
        return True
