"""Tree sync — materialize virtual nodes onto the physical directory tree.

The reconciler walks the virtual tree and the filesystem in lock-step:
missing ancestor directories are created first, then the node's related
set is written as one unit, then (optionally) its children are visited.
Every mutation is appended to the caller's :class:`SyncResult`.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from vaultsync.errors import ArtifactCollisionError
from vaultsync.sync.result import SyncAction, SyncOperation, SyncResult
from vaultsync.sync.sync_log import SyncLog
from vaultsync.tree.models import Artifact, VaultNode
from vaultsync.utils.copy import LS_NATIVE, copy_artifact
from vaultsync.utils.mime import MimeTypes
from vaultsync.utils.paths import child_path, join_logical, repository_name

logger = logging.getLogger(__name__)


class TreeSync:
    """Reconciles virtual nodes against the filesystem.

    The instance keeps no state between calls; each top-level ``sync`` or
    ``sync_after_delete`` tracks the physical paths it has written on its
    own, so one instance can serve syncs of disjoint trees.
    """

    def __init__(
        self,
        sync_log: Optional[SyncLog] = None,
        mime_types: Optional[MimeTypes] = None,
        line_feed: bytes = LS_NATIVE,
    ) -> None:
        self.sync_log = sync_log or SyncLog()
        self.mime_types = mime_types or MimeTypes()
        self.line_feed = line_feed

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def sync(
        self,
        result: SyncResult,
        parent_dir: str | Path,
        node: VaultNode,
        recursive: bool = False,
    ) -> None:
        """Materialize ``node`` (and its subtree if ``recursive``) below ``parent_dir``.

        Args:
            result: Log that receives one entry per filesystem mutation.
            parent_dir: Physical directory that is the node's parent on disk.
            node: Virtual node to materialize.
            recursive: Also materialize the node's children.

        Raises:
            ArtifactCollisionError: Two artifacts map to the same path.
            OSError: Writing a file failed. Entries already added stay in
                ``result``; nothing is rolled back.
        """
        self._sync(result, Path(parent_dir).absolute(), node, recursive, {})

    def sync_after_delete(
        self,
        result: SyncResult,
        parent_dir: str | Path,
        parent_node: VaultNode,
        deleted_file: str | Path,
    ) -> None:
        """Delete ``deleted_file`` and re-sync ``parent_node`` non-recursively.

        ``parent_dir`` is the physical directory of ``parent_node``; the
        re-sync regenerates the parent's artifacts that depend on its
        children without descending into the remaining children.
        """
        parent_dir = Path(parent_dir).absolute()
        self._delete_file(result, parent_node, Path(deleted_file).absolute())
        self.sync(result, parent_dir.parent, parent_node, recursive=False)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _sync(
        self,
        result: SyncResult,
        parent_dir: Path,
        node: VaultNode,
        recursive: bool,
        claimed: dict[Path, tuple],
    ) -> None:
        parent = node.parent
        if not parent_dir.exists() and parent is not None:
            if parent.aggregate == node.aggregate:
                # related members live beside their owner, not inside it
                self._sync(result, parent_dir, parent, False, claimed)
            else:
                self._sync(result, parent_dir.parent, parent, False, claimed)

        for related in node.related_set:
            for index, artifact in enumerate(related.artifacts):
                target = child_path(parent_dir, artifact.platform_path)
                if not self._claim(claimed, target, related, artifact):
                    continue
                if index == 0 and related.is_directory:
                    self._create_directory(result, target, related)
                else:
                    self._write_file(result, target, related, artifact)

        if not (recursive and node.is_directory):
            return

        node_dir = self._node_dir(parent_dir, node)
        if not node_dir.is_dir():
            logger.debug("skipping children of %s: %s is not a directory", node.aggregate_path, node_dir)
            return

        for child in node.children:
            if child.aggregate == node.aggregate:
                # written with the related set above
                continue
            self._sync(result, node_dir, child, True, claimed)

    @staticmethod
    def _node_dir(parent_dir: Path, node: VaultNode) -> Path:
        primary = node.primary_artifact
        if primary is None:
            return parent_dir
        return child_path(parent_dir, primary.platform_path)

    @staticmethod
    def _claim(claimed: dict[Path, tuple], target: Path, node: VaultNode, artifact: Artifact) -> bool:
        """Reserve ``target`` for ``artifact``; False if it was already written this pass."""
        owner = claimed.get(target)
        if owner is None:
            claimed[target] = (node, artifact)
            return True
        if owner[0] is node and owner[1] is artifact:
            return False
        raise ArtifactCollisionError(
            target,
            f"{owner[0].aggregate_path} ({owner[1].platform_path})",
            f"{node.aggregate_path} ({artifact.platform_path})",
        )

    def _create_directory(self, result: SyncResult, target: Path, node: VaultNode) -> None:
        try:
            target.mkdir()
        except FileExistsError:
            if not target.is_dir():
                self.sync_log.error(f"sync cannot create directory {target}")
            return
        except OSError as e:
            self.sync_log.error(f"sync cannot create directory {target}: {e}")
            return
        self.sync_log.log("A file://%s/", target)
        result.add_entry(node.aggregate_path, target, SyncOperation.MATERIALIZE, SyncAction.ADDED)

    def _write_file(self, result: SyncResult, target: Path, node: VaultNode, artifact: Artifact) -> None:
        action = SyncAction.UPDATED if target.exists() else SyncAction.ADDED
        line_feed = None if self.mime_types.is_binary(artifact.content_type) else self.line_feed
        if not copy_artifact(artifact, target, line_feed):
            return
        self.sync_log.log("%s file://%s", action.code, target)
        result.add_entry(node.aggregate_path, target, SyncOperation.MATERIALIZE, action)

    def _delete_file(self, result: SyncResult, parent_node: VaultNode, target: Path) -> None:
        logical_path = join_logical(parent_node.aggregate_path, repository_name(target.name))
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        self.sync_log.log("D file://%s", target)
        result.add_entry(logical_path, target, SyncOperation.DELETE, SyncAction.DELETED)
