"""Tests for link marker detection and rewriting."""

import pytest

from foldernotes.links import find_link, has_link, marker, prepend, replace_link


def test_marker():
    assert marker("Projects") == "[[Projects]]"


class TestHasLink:
    def test_present(self):
        assert has_link("see [[Projects]] for more", "Projects")

    def test_absent(self):
        assert not has_link("see Projects for more", "Projects")
        assert not has_link("", "Projects")

    def test_substring_mode_counts_code_and_bracket_runs(self):
        assert has_link("`[[Projects]]`", "Projects")
        assert has_link("[[[Projects]]]", "Projects")

    def test_strict_mode_ignores_inline_code(self):
        assert not has_link("use `[[Projects]]` syntax", "Projects", strict=True)

    def test_strict_mode_ignores_fenced_code(self):
        content = "intro\n```\n[[Projects]]\n```\noutro\n"
        assert not has_link(content, "Projects", strict=True)
        assert has_link(content + "[[Projects]]\n", "Projects", strict=True)

    def test_strict_mode_ignores_longer_bracket_runs(self):
        assert not has_link("[[[Projects]]]", "Projects", strict=True)

    def test_strict_mode_plain_link(self):
        assert has_link("[[Projects]]\n\nbody", "Projects", strict=True)

    def test_name_is_not_a_regex(self):
        assert has_link("[[a.b (1)]]", "a.b (1)", strict=True)
        assert not has_link("[[axb (1)]]", "a.b (1)", strict=True)


class TestPrepend:
    @pytest.mark.parametrize("content", ["", "body", "# Title\n\ntext", "[[Other]]"])
    def test_has_link_after_prepend(self, content):
        assert has_link(prepend(content, "Projects"), "Projects")

    def test_format(self):
        assert prepend("body", "Projects") == "[[Projects]]\n\nbody"

    def test_unconditional(self):
        once = prepend("body", "P")
        assert prepend(once, "P") == "[[P]]\n\n[[P]]\n\nbody"


class TestReplaceLink:
    def test_replaces_first_only(self):
        content = "[[A]] and [[A]]"
        assert replace_link(content, "A", "B") == "[[B]] and [[A]]"

    def test_noop_when_absent(self):
        assert replace_link("nothing here", "A", "B") == "nothing here"

    def test_round_trip(self):
        content = "[[Projects]]\n\n# todo\n- item"
        there = replace_link(content, "Projects", "Archive")
        assert there == "[[Archive]]\n\n# todo\n- item"
        assert replace_link(there, "Archive", "Projects") == content

    def test_strict_skips_code(self):
        content = "`[[A]]`\n[[A]]"
        assert replace_link(content, "A", "B", strict=True) == "`[[A]]`\n[[B]]"
        assert replace_link(content, "A", "B") == "`[[B]]`\n[[A]]"


def test_find_link_span():
    assert find_link("xx[[A]]", "A") == (2, 7)
    assert find_link("xx", "A") is None
