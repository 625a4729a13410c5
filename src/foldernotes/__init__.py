"""Folder notes for a Markdown vault.

Every folder gets a companion note named after it, and every note links to
its enclosing folder's note:

    Projects/
        Projects.md      # "# Projects"          <- folder note
        todo.md          # "[[Projects]]\n\n..."  <- linked on create
        Web/
            Web.md       # "[[Projects]]\n\n# Web"

Links follow notes when they move between folders. Folder notes are hidden
from listings.

The core (naming, links, manager, linker, reconcile, visibility) only talks to
a FileTree; vault.Vault is the local-disk host and watcher drives it.
"""

from foldernotes.config import FolderNotesConfig, Settings, init_config, load_config
from foldernotes.host import AlreadyExistsError, FileNode, FileTree, InvalidNameError, InvalidTemplateError
from foldernotes.plugin import FolderNotes
from foldernotes.vault import Vault

__all__ = [
    "AlreadyExistsError",
    "FileNode",
    "FileTree",
    "FolderNotes",
    "FolderNotesConfig",
    "InvalidNameError",
    "InvalidTemplateError",
    "Settings",
    "Vault",
    "init_config",
    "load_config",
]
