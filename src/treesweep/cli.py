"""CLI interface for Treesweep."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable

import click

from treesweep.core.engine import TraversalEngine
from treesweep.core.paths import DirectoryPath, FilePath
from treesweep.core.tracker import PERIODS, Tracker
from treesweep.models.hooks import TraversalHooks
from treesweep.models.run_summary import RunSummary
from treesweep.settings import Settings, SettingsError
from treesweep.storage import clear_history
from treesweep.tasks import DirectoryHunter, FilePurger, TreeCopier, TreeLister, TreeMover, wipe
from treesweep.utils import bytes_to_human, format_elapsed, format_relative_time

RunTask = Callable[[bool, TraversalHooks | None], RunSummary]

_ROOT = click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _default_dry_run(dry_run: bool | None) -> bool:
    if dry_run is not None:
        return dry_run
    return bool(Settings.instance().get("traversal.dry_run", False))


def _echo_hooks() -> TraversalHooks:
    """Hooks that print each removal and warning as it happens."""

    def on_file_delete(file: FilePath, engine: TraversalEngine, size: int) -> None:
        click.echo(f"  {click.style('✗', fg='red')} {engine.virtual_path(file)} ({bytes_to_human(size)})")

    def on_directory_deleted(directory: DirectoryPath, engine: TraversalEngine) -> None:
        click.echo(f"  {click.style('✗', fg='red')} {engine.virtual_path(directory)}/")

    def on_warning(message: str) -> None:
        click.echo(f"  {click.style('!', fg='yellow')} {message}")

    return TraversalHooks(
        on_file_delete=on_file_delete,
        on_directory_deleted=on_directory_deleted,
        on_warning=on_warning,
    )


def _print_summary(summary: RunSummary, elapsed: float) -> None:
    freed = click.style(bytes_to_human(summary.bytes_deleted), fg="green", bold=True)
    verb = "Would free" if summary.dry_run else "Freed"
    click.echo(
        f"\n{verb} {freed}: {summary.files_deleted:,} files, "
        f"{summary.directories_deleted:,} directories "
        f"(visited {summary.directories_visited:,} directories, {summary.files_visited:,} files "
        f"in {format_elapsed(elapsed)})"
    )
    if summary.warnings:
        click.echo(click.style(f"{len(summary.warnings)} warning(s)", fg="yellow"))
    click.echo()


def _run_destructive(task: RunTask, label: str, dry_run: bool, yes: bool, as_json: bool) -> None:
    """Preview with a dry run, confirm, then run for real and record the result."""
    if as_json and not (dry_run or yes):
        raise click.UsageError("--json needs --yes or --dry-run, there is no prompt in JSON mode")
    if not dry_run and not yes:
        preview = task(True, None)
        if preview.files_deleted == 0 and preview.directories_deleted == 0:
            click.echo("Nothing to delete.")
            return
        click.echo(
            f"\n{label}: {preview.files_deleted:,} files, {preview.directories_deleted:,} directories, "
            f"{click.style(bytes_to_human(preview.bytes_deleted), fg='green', bold=True)}\n"
        )
        if not click.confirm("Delete?", default=False):
            click.echo("Aborted.")
            return

    if not as_json:
        icon = "🔍" if dry_run else "🧹"
        click.echo(f"\n{click.style(icon, bold=True)} {label}{' (dry run)' if dry_run else ''}...\n")

    started = time.monotonic()
    summary = task(dry_run, None if as_json else _echo_hooks())
    elapsed = time.monotonic() - started

    tracker = Tracker()
    tracker.record([summary])
    tracker.save_session()

    if as_json:
        status = "dry_run" if dry_run else "deleted"
        click.echo(json.dumps({"status": status, "result": summary.to_dict()}, indent=2))
        return

    _print_summary(summary, elapsed)
    if dry_run:
        click.echo("(dry run, nothing was deleted)")


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Treesweep: walk directory trees, hunt and delete what you don't need."""
    _setup_logging(verbose)


# ── walk ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=_ROOT)
@click.option("--files", "file_pattern", default=None, help="Only list files matching this pattern, e.g. '*.txt'")
@click.option("--dirs", "dir_pattern", default=None, help="Only list files in directories matching this pattern")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def walk(root: Path, file_pattern: str | None, dir_pattern: str | None, as_json: bool) -> None:
    """List a tree (read-only) and summarize what was found."""
    lister = TreeLister(root, file_pattern=file_pattern, directory_pattern=dir_pattern)
    lines = lister.run()
    statistics = lister.engine.statistics

    if as_json:
        data = {
            "root": str(root),
            "directory_count": statistics.directory_count,
            "file_count": statistics.total_file_count,
            "total_file_size": statistics.total_file_size,
            "entries": [
                {
                    "virtual_path": e.virtual_path,
                    "type": e.object_type.name.lower(),
                    "size_bytes": e.file_size,
                    "action": e.action,
                }
                for e in statistics
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    for line in lines:
        click.echo(line)
    click.echo()
    click.echo(statistics.dump(), nl=False)
    click.echo(
        f"\nTotal: {statistics.total_file_count:,} files, "
        f"{click.style(bytes_to_human(statistics.total_file_size), fg='green', bold=True)}\n"
    )


# ── hunt ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=_ROOT)
@click.argument("names", nargs=-1)
@click.option("--contents", is_flag=True, help="Empty matching directories instead of removing them")
@click.option("--dry-run/--no-dry-run", default=None, help="Show what would be deleted without doing it")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def hunt(
    root: Path,
    names: tuple[str, ...],
    contents: bool,
    dry_run: bool | None,
    yes: bool,
    as_json: bool,
) -> None:
    """Delete every directory named NAMES under ROOT."""
    directory_names = list(names) or list(Settings.instance().get("hunt.directory_names", []))
    if not directory_names:
        raise click.UsageError("No directory names given and none configured in hunt.directory_names")

    def task(dry: bool, hooks: TraversalHooks | None) -> RunSummary:
        hunter = DirectoryHunter(root, directory_names, delete_contents=contents, dry_run=dry, hooks=hooks)
        return hunter.run()

    label = f"Hunting {', '.join(directory_names)}"
    _run_destructive(task, label, _default_dry_run(dry_run), yes, as_json)


# ── purge ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=_ROOT)
@click.argument("patterns", nargs=-1)
@click.option("--dry-run/--no-dry-run", default=None, help="Show what would be deleted without doing it")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def purge(root: Path, patterns: tuple[str, ...], dry_run: bool | None, yes: bool, as_json: bool) -> None:
    """Delete files matching PATTERNS (e.g. '*.tmp') anywhere under ROOT."""
    file_patterns = list(patterns) or list(Settings.instance().get("purge.patterns", []))
    if not file_patterns:
        raise click.UsageError("No patterns given and none configured in purge.patterns")

    def task(dry: bool, hooks: TraversalHooks | None) -> RunSummary:
        return FilePurger(root, file_patterns, dry_run=dry, hooks=hooks).run()

    label = f"Purging {', '.join(file_patterns)}"
    _run_destructive(task, label, _default_dry_run(dry_run), yes, as_json)


# ── wipe ─────────────────────────────────────────────────────────────────

@main.command("wipe")
@click.argument("root", type=_ROOT)
@click.option("--keep-root", is_flag=True, help="Empty ROOT but keep the directory itself")
@click.option("--dry-run/--no-dry-run", default=None, help="Show what would be deleted without doing it")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def wipe_cmd(root: Path, keep_root: bool, dry_run: bool | None, yes: bool, as_json: bool) -> None:
    """Recursively delete ROOT and everything in it."""

    def task(dry: bool, hooks: TraversalHooks | None) -> RunSummary:
        return wipe(root, keep_root=keep_root, dry_run=dry, hooks=hooks)

    label = f"Emptying {root}" if keep_root else f"Wiping {root}"
    _run_destructive(task, label, _default_dry_run(dry_run), yes, as_json)


# ── copy / move ──────────────────────────────────────────────────────────

_DESTINATION = click.Path(file_okay=False, resolve_path=True, path_type=Path)


def _make_transfer(factory: Callable[[], TreeCopier | TreeMover]) -> TreeCopier | TreeMover:
    try:
        return factory()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="DESTINATION") from e


def _run_transfer(transfer: TreeCopier | TreeMover, verbs: tuple[str, str], as_json: bool) -> None:
    started = time.monotonic()
    try:
        summary = transfer.run()
    except FileExistsError as e:
        raise click.ClickException(f"{e.strerror}: {e.filename}") from e
    elapsed = time.monotonic() - started

    if as_json:
        status = "dry_run" if summary.dry_run else "done"
        click.echo(json.dumps({"status": status, "result": summary.to_dict()}, indent=2))
        return

    size = click.style(bytes_to_human(summary.bytes_transferred), fg="green", bold=True)
    prefix = verbs[1] if summary.dry_run else verbs[0]
    click.echo(
        f"\n{prefix} {summary.files_transferred:,} files ({size}) to {summary.destination}, "
        f"{summary.directories_created:,} new directories (in {format_elapsed(elapsed)})"
    )
    if summary.warnings:
        click.echo(click.style(f"{len(summary.warnings)} warning(s)", fg="yellow"))
    click.echo()


@main.command("copy")
@click.argument("source", type=_ROOT)
@click.argument("destination", type=_DESTINATION)
@click.option("--overwrite", is_flag=True, help="Replace files that already exist in DESTINATION")
@click.option("--dry-run", is_flag=True, help="Show what would be copied without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def copy_cmd(source: Path, destination: Path, overwrite: bool, dry_run: bool, as_json: bool) -> None:
    """Copy SOURCE and everything in it to DESTINATION."""
    copier = _make_transfer(lambda: TreeCopier(source, destination, overwrite=overwrite, dry_run=dry_run))
    _run_transfer(copier, ("Copied", "Would copy"), as_json)


@main.command("move")
@click.argument("source", type=_ROOT)
@click.argument("destination", type=_DESTINATION)
@click.option("--dry-run/--no-dry-run", default=None, help="Show what would be moved without doing it")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def move_cmd(source: Path, destination: Path, dry_run: bool | None, yes: bool, as_json: bool) -> None:
    """Move SOURCE and everything in it to DESTINATION."""
    dry_run = _default_dry_run(dry_run)
    mover = _make_transfer(lambda: TreeMover(source, destination, dry_run=dry_run))
    if not (dry_run or yes):
        if as_json:
            raise click.UsageError("--json needs --yes or --dry-run, there is no prompt in JSON mode")
        if not click.confirm(f"Move {source} to {destination}?", default=False):
            click.echo("Aborted.")
            return
    _run_transfer(mover, ("Moved", "Would move"), as_json)


# ── stats ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--period", "-p", default="all", type=click.Choice(PERIODS))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--reset", is_flag=True, help="Forget all recorded runs")
def stats(period: str, as_json: bool, reset: bool) -> None:
    """Show space freed statistics."""
    if reset:
        if not click.confirm("Forget all recorded runs?", default=False):
            click.echo("Aborted.")
            return
        click.echo("History cleared." if clear_history() else "No history to clear.")
        return

    tracker = Tracker()
    data = tracker.get_stats(period)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"\n{click.style('📊', bold=True)} Statistics ({period})\n")
    click.echo(f"  Bytes deleted:  {click.style(bytes_to_human(data['bytes_deleted']), fg='green', bold=True)}")
    click.echo(f"  Files deleted:  {data['files_deleted']:,}")
    click.echo(f"  Dirs deleted:   {data['directories_deleted']:,}")
    click.echo(f"  Sessions:       {data['session_count']}")
    click.echo(f"  Lifetime total: {click.style(bytes_to_human(data['lifetime_bytes_deleted']), fg='cyan', bold=True)}")

    last = tracker.get_last_run_time()
    if last:
        click.echo(f"  Last run:       {format_relative_time(last)}")

    if data["per_root"]:
        click.echo("\n  Per-root breakdown:")
        for root, rstats in sorted(data["per_root"].items(), key=lambda x: x[1]["bytes_deleted"], reverse=True):
            click.echo(
                f"    {root:40s} {bytes_to_human(rstats['bytes_deleted']):>10s}  "
                f"({rstats['files_deleted']:,} files, {rstats['runs']} runs, last {format_relative_time(rstats['last_run'])})"
            )
    click.echo()


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Read and change persistent settings."""


@config.command("get")
@click.argument("key")
def config_get(key: str) -> None:
    """Print the value of KEY (dot notation, e.g. hunt.directory_names)."""
    value = Settings.instance().get(key)
    if value is None:
        click.echo(f"Setting '{key}' is not set.", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(value))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set KEY to VALUE.  VALUE is parsed as JSON when possible."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    settings = Settings.instance()
    try:
        settings.set(key, parsed)
    except SettingsError as e:
        raise click.BadParameter(str(e), param_hint="VALUE") from e
    click.echo(f"{key} = {json.dumps(parsed)}  ({settings.path})")


@config.command("unset")
@click.argument("key")
def config_unset(key: str) -> None:
    """Remove KEY so its default applies again."""
    if not Settings.instance().unset(key):
        click.echo(f"Setting '{key}' is not set.", err=True)
        raise SystemExit(1)
    click.echo(f"{key} reset to default")


@config.command("list")
def config_list() -> None:
    """Show every effective setting."""
    settings = Settings.instance()
    click.echo(f"# {settings.path}")
    click.echo(json.dumps(settings.as_dict(), indent=2))
