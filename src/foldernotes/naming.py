"""Folder-note naming convention: template + folder name -> file name."""

from __future__ import annotations

from foldernotes.host import InvalidTemplateError, join_path

PLACEHOLDER = "{{folderName}}"
DEFAULT_NAMING_CONVENTION = f"{PLACEHOLDER}.md"


def resolve(template: str, folder_name: str) -> str:
    """Substitute folder_name for the placeholder. No escaping is done."""
    return template.replace(PLACEHOLDER, folder_name, 1)


def validate_template(template: str) -> str:
    """Return template unchanged, or raise InvalidTemplateError."""
    count = template.count(PLACEHOLDER)
    if count != 1:
        msg = f"naming convention must contain {PLACEHOLDER} exactly once (found {count}): {template!r}"
        raise InvalidTemplateError(msg)
    # Folder notes live directly inside their folder.
    if "/" in template:
        msg = f"naming convention must resolve to a plain file name: {template!r}"
        raise InvalidTemplateError(msg)
    return template


def folder_note_path(folder_path: str, folder_name: str, template: str) -> str:
    """Path of the folder note that lives directly inside folder_path."""
    return join_path(folder_path, resolve(template, folder_name))
