"""vaultsync CLI — materialize a virtual tree manifest onto disk."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from vaultsync import __version__
from vaultsync.errors import SyncError
from vaultsync.utils.paths import child_path

console = Console()

_ACTION_STYLE = {"added": "green", "updated": "yellow", "deleted": "red"}


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Path to vaultsync.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Log every filesystem mutation")
@click.pass_context
def main(ctx, config_path: str | None, verbose: bool):
    """vaultsync — project a virtual content tree onto the filesystem.

    A manifest (YAML) describes the virtual tree; the target directory is
    the physical parent of the manifest's root node.
    """
    from vaultsync.config import load_config

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_config(config_path)
    except SyncError as e:
        raise click.ClickException(str(e))


# ── Sync ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("manifest")
@click.argument("target")
@click.option("--node", "-n", default=None, help="Aggregate path of the node to sync (default: root)")
@click.option("--recursive/--no-recursive", default=True, help="Also sync the node's subtree")
@click.pass_obj
def sync(config, manifest: str, target: str, node: str | None, recursive: bool):
    """Sync MANIFEST's tree into the TARGET directory."""
    from vaultsync.sync.result import SyncResult
    from vaultsync.tree.manifest import find_node

    console.print(f"\n[bold blue]vaultsync[/] — Syncing {manifest} into {target}\n")

    root = _load(manifest)
    start = root
    if node:
        start = find_node(root, node)
        if start is None:
            raise click.ClickException(f"No node '{node}' in {manifest}")

    parent_dir = _physical_parent(Path(target), start)
    result = SyncResult()
    tree_sync = config.create_tree_sync()
    try:
        tree_sync.sync(result, parent_dir, start, recursive=recursive)
    except (SyncError, OSError) as e:
        _report(result, config, label=f"sync {start.aggregate_path} (failed)")
        raise click.ClickException(str(e))

    _report(result, config, label=f"sync {start.aggregate_path}")


# ── Delete ───────────────────────────────────────────────────────────


@main.command()
@click.argument("manifest")
@click.argument("deleted_file")
@click.option("--parent", "-p", "parent_path", required=True, help="Aggregate path of the deleted file's parent node")
@click.pass_obj
def delete(config, manifest: str, deleted_file: str, parent_path: str):
    """Delete DELETED_FILE and re-sync its parent node from MANIFEST."""
    from vaultsync.sync.result import SyncResult
    from vaultsync.tree.manifest import find_node

    console.print(f"\n[bold blue]vaultsync[/] — Deleting {deleted_file}\n")

    root = _load(manifest)
    parent_node = find_node(root, parent_path)
    if parent_node is None:
        raise click.ClickException(f"No node '{parent_path}' in {manifest}")

    parent_dir = Path(deleted_file).absolute().parent
    result = SyncResult()
    tree_sync = config.create_tree_sync()
    try:
        tree_sync.sync_after_delete(result, parent_dir, parent_node, deleted_file)
    except (SyncError, OSError) as e:
        _report(result, config, label=f"delete {deleted_file} (failed)")
        raise click.ClickException(str(e))

    _report(result, config, label=f"delete {deleted_file}")


# ── History ──────────────────────────────────────────────────────────


@main.command()
@click.option("--run", "run_id", default=None, help="Show the entries of one run")
@click.pass_obj
def history(config, run_id: str | None):
    """List recorded sync runs."""
    from vaultsync.sync.history import SyncHistoryStore

    if config.history_dir is None:
        console.print("[yellow]History is disabled; set history_dir in vaultsync.yaml.[/]")
        return

    store = SyncHistoryStore(config.history_dir)
    if run_id:
        result = store.load_result(run_id)
        if not result:
            raise click.ClickException(f"No recorded run '{run_id}'")
        _print_result(result, title=f"Run {run_id} ({result.summary()})")
        return

    records = store.get_history()
    if not records:
        console.print("[yellow]No recorded runs.[/]")
        return

    table = Table(title="Sync history")
    table.add_column("Run", style="dim")
    table.add_column("Recorded")
    table.add_column("Label", style="cyan")
    table.add_column("Action")
    table.add_column("Physical path")

    for record in records:
        action = record.entry.action.value
        table.add_row(
            record.run_id,
            record.recorded_at[:19],
            record.label,
            f"[{_ACTION_STYLE[action]}]{action}[/]",
            record.entry.physical_path,
        )
    console.print(table)


# ── Helpers ──────────────────────────────────────────────────────────


def _load(manifest: str):
    from vaultsync.tree.manifest import load_manifest

    try:
        return load_manifest(manifest)
    except (SyncError, OSError) as e:
        raise click.ClickException(str(e))


def _physical_parent(target: Path, node) -> Path:
    """Map the physical parent of ``node`` below ``target``, which holds the tree root."""
    parent = node.parent
    if parent is None:
        return target
    if parent.aggregate == node.aggregate:
        # related members sit beside their owner
        return _physical_parent(target, parent)
    parent_dir = _physical_parent(target, parent)
    if parent.primary_artifact is None:
        return parent_dir
    return child_path(parent_dir, parent.primary_artifact.platform_path)


def _report(result, config, label: str) -> None:
    from vaultsync.sync.history import SyncHistoryStore

    if not result:
        console.print("[green]Up to date[/] — no changes.")
    else:
        _print_result(result, title=f"Changes ({result.summary()})")

    if config.history_dir is not None:
        SyncHistoryStore(config.history_dir).record(result, label=label)


def _print_result(result, title: str) -> None:
    table = Table(title=title)
    table.add_column("#", style="dim", width=4)
    table.add_column("Action")
    table.add_column("Logical path", style="cyan")
    table.add_column("Physical path")
    for i, entry in enumerate(result, start=1):
        action = entry.action.value
        table.add_row(
            str(i),
            f"[{_ACTION_STYLE[action]}]{action}[/]",
            entry.logical_path,
            entry.physical_path,
        )
    console.print(table)


if __name__ == "__main__":
    main()
