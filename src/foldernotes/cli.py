"""foldernotes CLI: folder notes for a Markdown vault.

Commands:
    foldernotes init                 create foldernotes.toml
    foldernotes config [OPTIONS]     show or change settings
    foldernotes reconcile            create/link folder notes for the whole vault
    foldernotes watch                keep the vault linked as files come and go
    foldernotes tree [--all]         list the vault, folder notes hidden
"""

from __future__ import annotations

import contextlib
from pathlib import Path

import click

from foldernotes.config import FolderNotesConfig, init_config, load_config, save_settings
from foldernotes.host import FolderNotesError
from foldernotes.naming import validate_template
from foldernotes.plugin import FolderNotes
from foldernotes.vault import Vault

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class EchoNotifier:
    """Notifier that prints notices to the terminal. Best effort: a closed
    stdout does not fail the operation that was already done."""

    def notice(self, message: str) -> None:
        with contextlib.suppress(OSError):
            click.echo(message)


def _load_cfg() -> FolderNotesConfig:
    try:
        return load_config()
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _vault(cfg: FolderNotesConfig) -> Vault:
    if not cfg.vault_dir.is_dir():
        msg = f"vault directory not found: {cfg.vault_dir}"
        raise click.ClickException(msg)
    return Vault.from_config(cfg)


def _show_settings(cfg: FolderNotesConfig) -> None:
    s = cfg.settings
    click.echo(f"Config             : {cfg.config_path}")
    click.echo(f"Vault              : {cfg.vault_dir}")
    click.echo(f"Initialize on load : {s.initialize_on_load}")
    click.echo(f"Naming convention  : {s.naming_convention}")
    click.echo(f"Strict links       : {s.strict_links}")


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="foldernotes")
def cli() -> None:
    """Companion notes for every folder."""


@cli.command()
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
def init(root: str) -> None:
    """Create foldernotes.toml with default settings."""
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("foldernotes.toml already exists, skipping init")
    _show_settings(load_config(root_path))


@cli.command("config")
@click.option("--initialize-on-load/--no-initialize-on-load", default=None,
              help="Reconcile existing folders and notes when the watcher starts.")
@click.option("--naming-convention", default=None,
              help="Folder note file name; use {{folderName}} as the placeholder.")
@click.option("--strict-links/--no-strict-links", default=None,
              help="Ignore links inside code and longer bracket runs.")
def config_cmd(initialize_on_load: bool | None, naming_convention: str | None, strict_links: bool | None) -> None:
    """Show settings, or change and save them."""
    cfg = _load_cfg()
    changed = False
    if initialize_on_load is not None:
        cfg.settings.initialize_on_load = initialize_on_load
        changed = True
    if naming_convention is not None:
        try:
            cfg.settings.naming_convention = validate_template(naming_convention)
        except FolderNotesError as exc:
            raise click.ClickException(str(exc)) from exc
        changed = True
    if strict_links is not None:
        cfg.settings.strict_links = strict_links
        changed = True

    if changed:
        path = save_settings(cfg)
        click.echo(f"Saved {path}")
        click.echo("Restart the watcher (or send it SIGHUP) to apply.")
    _show_settings(cfg)


@cli.command()
@click.option("--until-stable", is_flag=True, help="Repeat passes until nothing changes.")
@click.option("-q", "--quiet", is_flag=True, help="Only print the summary.")
def reconcile(until_stable: bool, quiet: bool) -> None:
    """Create missing folder notes and link everything to its folder note."""
    cfg = _load_cfg()
    vault = _vault(cfg)
    app = FolderNotes(vault, cfg.settings, None if quiet else EchoNotifier())
    try:
        report = app.initialize(until_stable=until_stable)
    except (FolderNotesError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(
        f"Created {report.folder_notes_created} folder notes, "
        f"linked {report.folder_notes_linked} folder notes and {report.notes_linked} notes "
        f"({report.passes} pass{'es' if report.passes != 1 else ''})"
    )


@cli.command()
def watch() -> None:
    """Watch the vault in the foreground (Ctrl-C to stop)."""
    from foldernotes.watcher import run_from_config

    cfg = _load_cfg()
    _vault(cfg)
    click.echo(f"Watching {cfg.vault_dir}")
    try:
        run_from_config(cfg.root, EchoNotifier())
    except KeyboardInterrupt:
        click.echo("Stopped")
    except (FolderNotesError, OSError) as exc:
        raise click.ClickException(f"watch stopped: {exc}") from exc


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Include folder notes.")
def tree(show_all: bool) -> None:
    """List folders and notes, with folder notes hidden."""
    cfg = _load_cfg()
    vault = _vault(cfg)
    app = FolderNotes(vault, cfg.settings)
    if not show_all:
        vault.register_filter(app.visibility)
    for node in vault.iter_visible():
        indent = "  " * (node.depth - 1)
        suffix = "/" if node.is_folder else ""
        click.echo(f"{indent}{node.name}{suffix}")


if __name__ == "__main__":
    cli()
