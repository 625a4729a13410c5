"""FolderNotes: the event surface the host drives.

    app = FolderNotes(vault, settings)
    app.start()                          # filter + optional reconciliation
    app.on_create(FileNode("Projects", "folder"))
    app.on_rename(FileNode("Archive/todo.md", "note"), "Projects/todo.md")

Handlers run to completion one at a time; the host is expected to call them
serially.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from foldernotes.host import LogNotifier
from foldernotes.linker import LinkSynchronizer
from foldernotes.manager import FolderNoteManager
from foldernotes.reconcile import ReconcileReport, reconcile_all
from foldernotes.visibility import VisibilityFilter

if TYPE_CHECKING:
    from foldernotes.config import Settings
    from foldernotes.host import FileNode, FileTree, Notifier

logger = logging.getLogger("foldernotes.plugin")


class FolderNotes:
    """Routes file-tree events to the folder-note manager and link synchronizer."""

    def __init__(self, tree: FileTree, settings: Settings, notifier: Notifier | None = None) -> None:
        self.tree = tree
        self.settings = settings
        self.notifier = notifier or LogNotifier()
        self.manager = FolderNoteManager(tree, settings, self.notifier)
        self.linker = LinkSynchronizer(tree, settings, self.manager, self.notifier)
        self.visibility = VisibilityFilter.from_template(settings.naming_convention)

    def start(self) -> ReconcileReport | None:
        """Register the visibility filter, then reconcile if initialize_on_load."""
        self.tree.register_filter(self.visibility)
        logger.info("hiding folder notes matching %s", self.visibility.pattern)
        if self.settings.initialize_on_load:
            return self.initialize()
        return None

    def initialize(self, *, until_stable: bool = False) -> ReconcileReport:
        report = reconcile_all(
            self.tree.list_folders(),
            self.tree.list_files(),
            self.manager,
            self.linker,
            until_stable=until_stable,
        )
        self.notifier.notice("Folder Notes: Initialization complete.")
        return report

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_create(self, node: FileNode) -> None:
        if node.is_folder:
            self.manager.ensure_folder_note(node)
            self.manager.link_to_parent_folder_note(node)
        else:
            self.linker.attach_to_parent(node)

    def on_rename(self, node: FileNode, old_path: str) -> None:
        if node.is_note:
            self.linker.relink(node, old_path)
