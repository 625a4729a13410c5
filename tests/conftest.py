"""Shared fixtures: an in-memory FileTree and a recording notifier."""

from __future__ import annotations

import pytest

from foldernotes.config import Settings
from foldernotes.host import FOLDER, NOTE, AlreadyExistsError, FileNode, InvalidNameError, split_path
from foldernotes.plugin import FolderNotes


class MemoryTree:
    """FileTree double keeping folders and note text in dicts."""

    def __init__(self) -> None:
        self.folders: set[str] = set()
        self.notes: dict[str, str] = {}
        self.filters: list = []
        self.writes: list[str] = []

    def add_folder(self, path: str) -> FileNode:
        parts = path.split("/")
        for i in range(1, len(parts) + 1):
            self.folders.add("/".join(parts[:i]))
        return FileNode(path, FOLDER)

    def add_note(self, path: str, text: str = "") -> FileNode:
        parent = split_path(path)[0]
        if parent:
            self.add_folder(parent)
        self.notes[path] = text
        return FileNode(path, NOTE)

    def move(self, old_path: str, new_path: str) -> FileNode:
        self.notes[new_path] = self.notes.pop(old_path)
        return FileNode(new_path, NOTE)

    # FileTree

    def exists(self, path: str) -> FileNode | None:
        if path in self.folders:
            return FileNode(path, FOLDER)
        if path in self.notes:
            return FileNode(path, NOTE)
        return None

    def read(self, note: FileNode) -> str:
        return self.notes[note.path]

    def write(self, note: FileNode, text: str) -> None:
        self.notes[note.path] = text
        self.writes.append(note.path)

    def create(self, path: str, text: str) -> FileNode:
        if path in self.notes or path in self.folders:
            raise AlreadyExistsError(f"File already exists: {path}")
        parent, name = split_path(path)
        if "|" in name or (parent and parent not in self.folders):
            raise InvalidNameError(path)
        self.notes[path] = text
        return FileNode(path, NOTE)

    def list_folders(self) -> list[FileNode]:
        return [FileNode(p, FOLDER) for p in sorted(self.folders)]

    def list_files(self) -> list[FileNode]:
        return [FileNode(p, NOTE) for p in sorted(self.notes)]

    def register_filter(self, visibility) -> None:
        self.filters.append(visibility)


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notice(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def tree() -> MemoryTree:
    return MemoryTree()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app(tree: MemoryTree, settings: Settings, notifier: RecordingNotifier) -> FolderNotes:
    return FolderNotes(tree, settings, notifier)
