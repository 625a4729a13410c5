"""Tests for LinkSynchronizer: attach on create, relink on move."""

import pytest

from foldernotes.config import Settings
from foldernotes.linker import LinkSynchronizer
from foldernotes.manager import FolderNoteManager


@pytest.fixture
def linker(tree, settings, notifier):
    return LinkSynchronizer(tree, settings, FolderNoteManager(tree, settings, notifier), notifier)


class TestAttachToParent:
    def test_prepends_parent_link(self, tree, linker, notifier):
        tree.add_note("Projects/Projects.md", "# Projects")
        note = tree.add_note("Projects/todo.md", "- buy milk")
        assert linker.attach_to_parent(note)
        assert tree.notes["Projects/todo.md"] == "[[Projects]]\n\n- buy milk"
        assert notifier.messages == ["Linked Projects in todo.md"]

    def test_no_folder_note_leaves_note_unlinked(self, tree, linker):
        note = tree.add_note("Projects/todo.md", "- buy milk")
        assert not linker.attach_to_parent(note)
        assert tree.notes["Projects/todo.md"] == "- buy milk"

    def test_already_linked(self, tree, linker):
        tree.add_note("Projects/Projects.md", "# Projects")
        note = tree.add_note("Projects/todo.md", "see [[Projects]]")
        assert not linker.attach_to_parent(note)
        assert tree.writes == []

    def test_folder_note_is_not_linked_to_itself(self, tree, linker):
        note = tree.add_note("Projects/Projects.md", "# Projects")
        assert not linker.attach_to_parent(note)
        assert tree.notes["Projects/Projects.md"] == "# Projects"

    def test_top_level_note(self, tree, linker):
        note = tree.add_note("inbox.md", "hello")
        assert not linker.attach_to_parent(note)

    def test_strict_mode_links_despite_code_mention(self, tree, notifier):
        settings = Settings(strict_links=True)
        linker = LinkSynchronizer(tree, settings, FolderNoteManager(tree, settings, notifier), notifier)
        tree.add_note("P/P.md", "# P")
        note = tree.add_note("P/x.md", "`[[P]]` is how you link")
        assert linker.attach_to_parent(note)
        assert tree.notes["P/x.md"].startswith("[[P]]\n\n")


class TestRelink:
    def test_moves_link_to_new_parent(self, tree, linker, notifier):
        tree.add_note("Projects/Projects.md", "# Projects")
        tree.add_note("Archive/Archive.md", "# Archive")
        tree.add_note("Projects/todo.md", "[[Projects]]\n\n- buy milk")
        note = tree.move("Projects/todo.md", "Archive/todo.md")

        assert linker.relink(note, "Projects/todo.md")
        assert tree.notes["Archive/todo.md"] == "[[Archive]]\n\n- buy milk"
        assert notifier.messages == ["Updated link to Archive in todo.md"]

    def test_unlinked_note_stays_unlinked(self, tree, linker):
        tree.add_note("Archive/Archive.md", "# Archive")
        tree.add_note("Projects/todo.md", "- buy milk")
        note = tree.move("Projects/todo.md", "Archive/todo.md")

        assert not linker.relink(note, "Projects/todo.md")
        assert tree.notes["Archive/todo.md"] == "- buy milk"

    def test_target_without_folder_note(self, tree, linker):
        tree.add_note("Projects/Projects.md", "# Projects")
        tree.add_folder("Drafts")
        tree.add_note("Projects/todo.md", "[[Projects]]\n\nbody")
        note = tree.move("Projects/todo.md", "Drafts/todo.md")

        assert not linker.relink(note, "Projects/todo.md")
        assert tree.notes["Drafts/todo.md"] == "[[Projects]]\n\nbody"

    def test_move_to_or_from_root_is_noop(self, tree, linker):
        tree.add_note("Projects/Projects.md", "# Projects")
        tree.add_note("Projects/todo.md", "[[Projects]]")
        note = tree.move("Projects/todo.md", "todo.md")
        assert not linker.relink(note, "Projects/todo.md")

        back = tree.move("todo.md", "Projects/todo.md")
        assert not linker.relink(back, "todo.md")
        assert tree.writes == []

    def test_rename_within_folder(self, tree, linker):
        tree.add_note("Projects/Projects.md", "# Projects")
        tree.add_note("Projects/todo.md", "[[Projects]]")
        note = tree.move("Projects/todo.md", "Projects/done.md")
        assert not linker.relink(note, "Projects/todo.md")
        assert tree.writes == []

    def test_only_first_occurrence_rewritten(self, tree, linker):
        tree.add_note("Projects/Projects.md", "# Projects")
        tree.add_note("Archive/Archive.md", "# Archive")
        tree.add_note("Projects/todo.md", "[[Projects]]\n\nsee also [[Projects]]")
        note = tree.move("Projects/todo.md", "Archive/todo.md")
        linker.relink(note, "Projects/todo.md")
        assert tree.notes["Archive/todo.md"] == "[[Archive]]\n\nsee also [[Projects]]"
