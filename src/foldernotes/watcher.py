"""Vault watcher: turns filesystem changes into FolderNotes events.

Run in the foreground:
    python -m foldernotes.watcher [CONFIG_ROOT]
    foldernotes watch

inotify (Linux, inotify_simple):
    CREATE|ISDIR             -> folder created (subtree replayed, watches added)
    CREATE, then CLOSE_WRITE -> note created, handled once its content is written
    MOVED_FROM + MOVED_TO    -> note renamed (cookie-paired); directories only
                                re-point their watches
    MOVED_TO alone           -> moved in from outside: treated as created
    non-note -> note move    -> saved through a temp file: treated as created

A MOVED_FROM is kept for one extra read before it counts as moved out.

Falls back to snapshot polling if inotify is unavailable (macOS, Docker). A
path that appears with the inode of a path that vanished is a rename.

On startup the vault is reconciled first when initialize_on_load is set.
SIGHUP reloads foldernotes.toml (naming convention, visibility filter, ...).
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from foldernotes.config import load_config
from foldernotes.host import FOLDER, NOTE, FileNode, FolderNotesError, join_path, path_depth
from foldernotes.plugin import FolderNotes
from foldernotes.vault import Vault

if TYPE_CHECKING:
    from collections.abc import Iterable

    from foldernotes.config import FolderNotesConfig
    from foldernotes.host import Notifier

logger = logging.getLogger("foldernotes.watcher")

_INOTIFY_TIMEOUT_MS = 5000

# ---------------------------------------------------------------------------
# SIGHUP config reload
# ---------------------------------------------------------------------------

# Mutable container so the signal handler and loop can share state without globals.
_reload_state: list[bool] = [False]     # [0] = SIGHUP reload requested


class _ReloadRequestedError(Exception):
    """Raised from within a watcher loop to trigger a config reload."""


def _handle_sighup(signum: int, frame: object) -> None:  # noqa: ARG001
    _reload_state[0] = True
    logger.info("SIGHUP received, config reload requested")


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeEvent:
    kind: str                    # create | rename
    node: FileNode
    old_path: str | None = None


def dispatch(app: FolderNotes, event: TreeEvent) -> None:
    """Hand one event to app. Failures are logged; the loop keeps going."""
    try:
        if event.kind == "rename" and event.old_path is not None:
            app.on_rename(event.node, event.old_path)
        else:
            app.on_create(event.node)
        logger.debug("%s handled: %s", event.kind, event.node.path)
    except Exception:
        logger.exception("failed to handle %s: %s", event.kind, event.node.path)


def _subtree_events(vault: Vault, folder_path: str) -> list[TreeEvent]:
    """Create events for a folder that appeared with content already inside."""
    nodes = list(vault.walk(folder_path))
    folders = sorted((n for n in nodes if n.is_folder), key=lambda n: (n.depth, n.path))
    notes = [n for n in nodes if n.is_note]
    return [TreeEvent("create", n) for n in (*folders, *notes)]


# ---------------------------------------------------------------------------
# inotify watcher
# ---------------------------------------------------------------------------

class InotifyWatcher:
    """Maps raw inotify events onto TreeEvents. One instance per INotify."""

    def __init__(self, app: FolderNotes, vault: Vault, inotify: Any, flags: Any) -> None:
        self.app = app
        self.vault = vault
        self.inotify = inotify
        self.flags = flags
        self.mask = flags.CREATE | flags.CLOSE_WRITE | flags.MOVED_FROM | flags.MOVED_TO
        self.watched: dict[int, str] = {}               # wd -> vault-relative dir
        self.pending_new: set[str] = set()              # created, not yet closed
        self.moves: dict[int, tuple[str, bool]] = {}    # cookie -> (old path, is_dir)
        self.stale_moves: set[int] = set()              # cookies already carried over once

    def add_watch(self, rel_dir: str) -> None:
        try:
            wd = self.inotify.add_watch(str(self.vault.abs_path(rel_dir)), self.mask)
        except OSError:
            logger.warning("cannot watch %s", rel_dir or "<vault root>")
            return
        self.watched[wd] = rel_dir

    def add_tree(self, rel_dir: str = "") -> None:
        if not rel_dir:
            self.add_watch("")
        for node in self.vault.walk(rel_dir):
            if node.is_folder:
                self.add_watch(node.path)

    def _retarget(self, old_dir: str, new_dir: str) -> None:
        prefix = old_dir + "/"
        for wd, rel in list(self.watched.items()):
            if rel == old_dir or rel.startswith(prefix):
                self.watched[wd] = new_dir + rel[len(old_dir):]

    def _forget(self, old_dir: str) -> None:
        prefix = old_dir + "/"
        for wd, rel in list(self.watched.items()):
            if rel == old_dir or rel.startswith(prefix):
                del self.watched[wd]
                with contextlib.suppress(OSError):
                    self.inotify.rm_watch(wd)

    def _folder_appeared(self, path: str) -> list[TreeEvent]:
        self.add_tree(path)
        return _subtree_events(self.vault, path)

    def translate(self, event: Any) -> list[TreeEvent]:
        flags = self.flags
        if event.mask & flags.IGNORED:
            self.watched.pop(event.wd, None)
            return []

        rel_dir = self.watched.get(event.wd)
        if rel_dir is None or not event.name:
            return []
        path = join_path(rel_dir, event.name)
        if self.vault.is_excluded(path):
            return []
        is_dir = bool(event.mask & flags.ISDIR)

        if event.mask & flags.CREATE:
            if is_dir:
                return self._folder_appeared(path)
            if self.vault.is_note_path(path):
                self.pending_new.add(path)

        elif event.mask & flags.CLOSE_WRITE:
            if path in self.pending_new:
                self.pending_new.discard(path)
                return [TreeEvent("create", FileNode(path, NOTE))]

        elif event.mask & flags.MOVED_FROM:
            self.moves[event.cookie] = (path, is_dir)

        elif event.mask & flags.MOVED_TO:
            moved = self.moves.pop(event.cookie, None)
            if moved is None:
                if is_dir:
                    return self._folder_appeared(path)
                if self.vault.is_note_path(path):
                    return [TreeEvent("create", FileNode(path, NOTE))]
            elif is_dir:
                self._retarget(moved[0], path)
            elif self.vault.is_note_path(path):
                if not self.vault.is_note_path(moved[0]):
                    # Saved via a temp file (todo.md.tmp -> todo.md).
                    return [TreeEvent("create", FileNode(path, NOTE))]
                return [TreeEvent("rename", FileNode(path, NOTE), old_path=moved[0])]
        return []

    def handle_batch(self, events: Iterable[Any]) -> None:
        for raw in events:
            for event in self.translate(raw):
                dispatch(self.app, event)
        # The two halves of a move can land in consecutive reads, so a
        # MOVED_FROM waits one more batch before it counts as leaving the vault.
        for cookie in self.stale_moves & self.moves.keys():
            old_path, is_dir = self.moves.pop(cookie)
            if is_dir:
                self._forget(old_path)
        self.stale_moves = set(self.moves)


def watch_inotify(app: FolderNotes, vault: Vault) -> None:
    """Watch using inotify_simple (Linux). Blocks until a reload is requested."""
    import inotify_simple  # type: ignore[import]

    inotify = inotify_simple.INotify()
    watcher = InotifyWatcher(app, vault, inotify, inotify_simple.flags)  # type: ignore[attr-defined]
    watcher.add_tree()
    logger.info("inotify watching %s (%d dirs)", vault.root, len(watcher.watched))

    while True:
        watcher.handle_batch(inotify.read(timeout=_INOTIFY_TIMEOUT_MS))
        if _reload_state[0]:
            raise _ReloadRequestedError


# ---------------------------------------------------------------------------
# Polling fallback
# ---------------------------------------------------------------------------

Snapshot = dict[str, tuple[int, bool]]     # path -> (inode, is_dir)


def take_snapshot(vault: Vault) -> Snapshot:
    snapshot: Snapshot = {}
    for node in vault.walk():
        try:
            st = os.stat(vault.abs_path(node.path))
        except OSError:
            continue
        snapshot[node.path] = (st.st_ino, node.is_folder)
    return snapshot


def diff_snapshots(old: Snapshot, new: Snapshot) -> list[TreeEvent]:
    """Events for paths in new but not old. Folders first, shallow first."""
    vanished = {entry: path for path, entry in old.items() if path not in new}
    appeared = sorted(new.keys() - old.keys(), key=lambda p: (not new[p][1], path_depth(p), p))

    events: list[TreeEvent] = []
    for path in appeared:
        entry = new[path]
        node = FileNode(path, FOLDER if entry[1] else NOTE)
        old_path = vanished.pop(entry, None)
        if old_path is not None:
            events.append(TreeEvent("rename", node, old_path=old_path))
        else:
            events.append(TreeEvent("create", node))
    return events


def watch_poll(app: FolderNotes, vault: Vault, interval: float = 1.0) -> None:
    """Polling fallback for macOS/Docker. Diffs a vault snapshot every interval seconds."""
    logger.info("polling %s interval=%.1fs", vault.root, interval)
    snapshot = take_snapshot(vault)
    while True:
        time.sleep(interval)
        current = take_snapshot(vault)
        for event in diff_snapshots(snapshot, current):
            dispatch(app, event)
        snapshot = current

        if _reload_state[0]:
            raise _ReloadRequestedError


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(cfg: FolderNotesConfig, notifier: Notifier | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    vault = Vault.from_config(cfg)
    app = FolderNotes(vault, cfg.settings, notifier)
    try:
        app.start()
    except (FolderNotesError, OSError) as exc:
        logger.error("startup reconciliation of %s failed: %s", vault.root, exc)
        raise
    try:
        watch_inotify(app, vault)
    except ImportError:
        logger.warning("inotify_simple not available, falling back to polling")
        watch_poll(app, vault, interval=cfg.watch.poll_interval)


def _reload_config(config_root: Path | None, previous: FolderNotesConfig) -> FolderNotesConfig:
    """Re-read foldernotes.toml; a broken file keeps the running config."""
    try:
        return load_config(config_root)
    except (FolderNotesError, tomllib.TOMLDecodeError) as exc:
        logger.error("config reload failed, keeping previous settings: %s", exc)
        return previous


def run_from_config(config_root: Path | None = None, notifier: Notifier | None = None) -> None:
    """Load foldernotes.toml and start the watcher. Handles SIGHUP for live config reload."""
    import signal as _signal

    if hasattr(_signal, "SIGHUP"):
        _signal.signal(_signal.SIGHUP, _handle_sighup)

    cfg = load_config(config_root)
    while True:
        _reload_state[0] = False
        try:
            run(cfg, notifier)
            break  # run() loops forever normally; break only if it exits cleanly
        except _ReloadRequestedError:
            logger.info("Reloading config from %s", config_root or Path.cwd())
            cfg = _reload_config(config_root, cfg)


if __name__ == "__main__":
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    run_from_config(root)
