"""FolderNotesConfig: project-local config for a folder-notes vault.

foldernotes.toml lives at the project root (usually the vault root itself):

    [foldernotes]
    initialize_on_load = true            # reconcile the whole vault at startup
    naming_convention = "{{folderName}}.md"
    strict_links = false                 # ignore [[links]] inside code

    [vault]
    path = "."                           # relative to foldernotes.toml
    exclude = [".obsidian/**", ".git/**", ".trash/**", "**/.*"]
    note_extensions = [".md"]

    [watch]
    poll_interval = 1.0                  # seconds, polling fallback only

A missing file means defaults for everything. Settings are changed through
``foldernotes config`` which rewrites the file via save_settings().
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from foldernotes.naming import DEFAULT_NAMING_CONVENTION, validate_template

_CONFIG_FILENAME = "foldernotes.toml"

_DEFAULT_EXCLUDE = [".obsidian/**", ".git/**", ".trash/**", "**/.*"]
_DEFAULT_NOTE_EXTENSIONS = [".md"]


@dataclass
class Settings:
    """User-facing plugin settings."""

    initialize_on_load: bool = True
    naming_convention: str = DEFAULT_NAMING_CONVENTION
    strict_links: bool = False          # word-boundary/code-aware link matching

    def __post_init__(self) -> None:
        validate_template(self.naming_convention)


@dataclass
class VaultConfig:
    path: str = "."                     # relative to config root
    exclude: list[str] = field(default_factory=lambda: list(_DEFAULT_EXCLUDE))
    note_extensions: list[str] = field(default_factory=lambda: list(_DEFAULT_NOTE_EXTENSIONS))


@dataclass
class WatchConfig:
    poll_interval: float = 1.0


@dataclass
class FolderNotesConfig:
    """Resolved configuration for a vault."""

    root: Path                          # directory that contains foldernotes.toml
    settings: Settings = field(default_factory=Settings)
    vault: VaultConfig = field(default_factory=VaultConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME

    @property
    def vault_dir(self) -> Path:
        return (self.root / self.vault.path).resolve()


def load_config(root: Path | str | None = None) -> FolderNotesConfig:
    """Load foldernotes.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    fn_section = raw.get("foldernotes", {})
    vault_section = raw.get("vault", {})
    watch_section = raw.get("watch", {})

    return FolderNotesConfig(
        root=root_path,
        settings=Settings(
            initialize_on_load=bool(fn_section.get("initialize_on_load", True)),
            naming_convention=str(fn_section.get("naming_convention", DEFAULT_NAMING_CONVENTION)),
            strict_links=bool(fn_section.get("strict_links", False)),
        ),
        vault=VaultConfig(
            path=str(vault_section.get("path", ".")),
            exclude=list(vault_section.get("exclude", _DEFAULT_EXCLUDE)),
            note_extensions=list(vault_section.get("note_extensions", _DEFAULT_NOTE_EXTENSIONS)),
        ),
        watch=WatchConfig(
            poll_interval=float(watch_section.get("poll_interval", 1.0)),
        ),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for foldernotes.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        # JSON string escapes are valid TOML basic-string escapes.
        return json.dumps(value)
    if isinstance(value, list):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    return repr(value)


def render_config(cfg: FolderNotesConfig) -> str:
    s, v, w = cfg.settings, cfg.vault, cfg.watch
    return f"""\
[foldernotes]
initialize_on_load = {_toml_value(s.initialize_on_load)}
naming_convention = {_toml_value(s.naming_convention)}
strict_links = {_toml_value(s.strict_links)}

[vault]
path = {_toml_value(v.path)}
exclude = {_toml_value(v.exclude)}
note_extensions = {_toml_value(v.note_extensions)}

[watch]
poll_interval = {_toml_value(w.poll_interval)}
"""


def save_settings(cfg: FolderNotesConfig) -> Path:
    """Persist cfg to foldernotes.toml (comments in an existing file are not kept)."""
    cfg.config_path.write_text(render_config(cfg), encoding="utf-8")
    return cfg.config_path


def init_config(root: Path) -> Path:
    """Write a default foldernotes.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"foldernotes.toml already exists at {config_path}"
        raise FileExistsError(msg)
    return save_settings(FolderNotesConfig(root=root))
