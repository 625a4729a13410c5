"""Bulk reconciliation: bring an existing tree into the folder-noted, linked state.

Folders are processed shallow-to-deep so that a parent's folder note exists
before its children try to link to it. ``until_stable=True`` additionally
repeats whole passes until one changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from foldernotes.manager import EnsureOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from foldernotes.host import FileNode
    from foldernotes.linker import LinkSynchronizer
    from foldernotes.manager import FolderNoteManager

logger = logging.getLogger("foldernotes.reconcile")

_DEFAULT_MAX_PASSES = 10


@dataclass
class ReconcileReport:
    folder_notes_created: int = 0
    folder_notes_linked: int = 0
    notes_linked: int = 0
    passes: int = 0

    @property
    def changes(self) -> int:
        return self.folder_notes_created + self.folder_notes_linked + self.notes_linked


def top_down(folders: Iterable[FileNode]) -> list[FileNode]:
    """Sort folders by depth, then path."""
    return sorted(folders, key=lambda f: (f.depth, f.path))


def _run_pass(
    folders: list[FileNode],
    files: list[FileNode],
    manager: FolderNoteManager,
    linker: LinkSynchronizer,
    report: ReconcileReport,
) -> int:
    before = report.changes
    for folder in folders:
        if manager.ensure_folder_note(folder) is EnsureOutcome.CREATED:
            report.folder_notes_created += 1
        if manager.link_to_parent_folder_note(folder):
            report.folder_notes_linked += 1
    for note in files:
        if linker.attach_to_parent(note):
            report.notes_linked += 1
    report.passes += 1
    return report.changes - before


def reconcile_all(
    folders: Iterable[FileNode],
    files: Iterable[FileNode],
    manager: FolderNoteManager,
    linker: LinkSynchronizer,
    *,
    until_stable: bool = False,
    max_passes: int = _DEFAULT_MAX_PASSES,
) -> ReconcileReport:
    """Ensure + link every folder (top-down), then attach every note.

    ``files`` is the snapshot taken by the caller; folder notes created during
    the pass are picked up by the folder step itself.
    """
    ordered = top_down(folders)
    notes = [f for f in files if f.is_note]
    report = ReconcileReport()

    changed = _run_pass(ordered, notes, manager, linker, report)
    while until_stable and changed and report.passes < max_passes:
        changed = _run_pass(ordered, notes, manager, linker, report)

    if until_stable and changed:
        logger.warning("reconcile: still changing after %d passes", report.passes)
    logger.info(
        "reconcile: %d folder notes created, %d linked to parent, %d notes linked (%d passes)",
        report.folder_notes_created,
        report.folder_notes_linked,
        report.notes_linked,
        report.passes,
    )
    return report
