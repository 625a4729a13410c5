"""Hide folder notes from file listings.

The rule is derived once from the naming convention (placeholder -> ``*``)
and handed to the host's presentation layer via ``FileTree.register_filter``.
Changing the naming convention takes effect after a reload.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING

from foldernotes.host import split_path
from foldernotes.naming import PLACEHOLDER, resolve

if TYPE_CHECKING:
    from collections.abc import Iterable

    from foldernotes.host import FileNode


@dataclass(frozen=True)
class VisibilityFilter:
    template: str
    pattern: str

    @classmethod
    def from_template(cls, template: str) -> VisibilityFilter:
        return cls(template=template, pattern=template.replace(PLACEHOLDER, "*", 1))

    def is_hidden(self, path: str) -> bool:
        """True for a file named after its own parent folder per the template."""
        parent, name = split_path(path)
        if not parent:
            return False
        if not fnmatchcase(name, self.pattern):
            return False
        return name == resolve(self.template, split_path(parent)[1])

    def filter(self, nodes: Iterable[FileNode]) -> list[FileNode]:
        return [n for n in nodes if n.is_folder or not self.is_hidden(n.path)]
