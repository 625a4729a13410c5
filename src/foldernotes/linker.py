"""Keep each note linked to its enclosing folder's note.

Link state of a note only moves forward:

    unlinked --attach_to_parent--> linked(parent) --relink--> linked(new parent)

relink() only rewrites an existing link. A note that was never linked (for
instance created before its folder had a folder note) stays unlinked when it
moves.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from foldernotes import links
from foldernotes.host import LogNotifier, split_path

if TYPE_CHECKING:
    from foldernotes.config import Settings
    from foldernotes.host import FileNode, FileTree, Notifier
    from foldernotes.manager import FolderNoteManager

logger = logging.getLogger("foldernotes.linker")


class LinkSynchronizer:
    def __init__(
        self,
        tree: FileTree,
        settings: Settings,
        manager: FolderNoteManager,
        notifier: Notifier | None = None,
    ) -> None:
        self.tree = tree
        self.settings = settings
        self.manager = manager
        self.notifier = notifier or LogNotifier()

    def attach_to_parent(self, note: FileNode) -> bool:
        """Prepend [[parent]] to note if its folder has a folder note.

        Returns True when the note was rewritten. The folder note itself is
        left alone.
        """
        parent = self.manager.parent_folder(note)
        if parent is None:
            return False

        folder_note = self.manager.folder_note_for(parent)
        if folder_note is None or folder_note.path == note.path:
            return False

        content = self.tree.read(note)
        if links.has_link(content, parent.name, strict=self.settings.strict_links):
            return False

        self.tree.write(note, links.prepend(content, parent.name))
        logger.info("linked %s to %s", note.path, folder_note.path)
        self.notifier.notice(f"Linked {parent.name} in {note.name}")
        return True

    def relink(self, note: FileNode, old_path: str) -> bool:
        """Point note's [[old parent]] link at its new parent after a move."""
        old_parent = self.manager.folder_at(split_path(old_path)[0])
        new_parent = self.manager.parent_folder(note)
        if old_parent is None or new_parent is None:
            return False
        if old_parent.name == new_parent.name:
            return False
        if self.manager.folder_note_for(new_parent) is None:
            logger.debug("%s has no folder note, leaving %s as is", new_parent.path, note.path)
            return False

        strict = self.settings.strict_links
        content = self.tree.read(note)
        if not links.has_link(content, old_parent.name, strict=strict):
            logger.debug("no link to %s in %s, leaving it unlinked", old_parent.name, note.path)
            return False

        self.tree.write(note, links.replace_link(content, old_parent.name, new_parent.name, strict=strict))
        logger.info("relinked %s: %s -> %s", note.path, old_parent.name, new_parent.name)
        self.notifier.notice(f"Updated link to {new_parent.name} in {note.name}")
        return True
