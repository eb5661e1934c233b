"""Result log — the ordered record of every filesystem mutation of a sync.

Entries are appended by the reconciler in the order the mutations happen
and are never removed or changed afterwards, so the log can be used for
reporting and auditing as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator


class SyncOperation(Enum):
    """Kind of filesystem mutation."""

    MATERIALIZE = "materialize"
    DELETE = "delete"


class SyncAction(Enum):
    """What the mutation did to the physical path."""

    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"

    @property
    def code(self) -> str:
        return self.value[0].upper()


@dataclass(frozen=True)
class SyncResultEntry:
    """A single mutation: logical path, physical path and what happened."""

    logical_path: str
    physical_path: str
    operation: SyncOperation
    action: SyncAction

    def __str__(self) -> str:
        return f"{self.action.code} {self.physical_path} ({self.logical_path})"


class SyncResult:
    """Append-only, ordered log of sync mutations."""

    def __init__(self) -> None:
        self._entries: list[SyncResultEntry] = []

    def add_entry(
        self,
        logical_path: str,
        physical_path: str | Path,
        operation: SyncOperation,
        action: SyncAction | None = None,
    ) -> SyncResultEntry:
        """Append an entry and return it.

        ``action`` defaults to ``DELETED`` for deletions and ``ADDED``
        otherwise.
        """
        if action is None:
            action = SyncAction.DELETED if operation == SyncOperation.DELETE else SyncAction.ADDED
        entry = SyncResultEntry(
            logical_path=logical_path,
            physical_path=str(physical_path),
            operation=operation,
            action=action,
        )
        self._entries.append(entry)
        return entry

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[SyncResultEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[SyncResultEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def by_logical_path(self, logical_path: str) -> list[SyncResultEntry]:
        return [e for e in self._entries if e.logical_path == logical_path]

    def by_physical_path(self, physical_path: str | Path) -> list[SyncResultEntry]:
        key = str(physical_path)
        return [e for e in self._entries if e.physical_path == key]

    @property
    def materialized(self) -> list[SyncResultEntry]:
        return [e for e in self._entries if e.operation == SyncOperation.MATERIALIZE]

    @property
    def deleted(self) -> list[SyncResultEntry]:
        return [e for e in self._entries if e.operation == SyncOperation.DELETE]

    def summary(self) -> str:
        counts = {action: 0 for action in SyncAction}
        for entry in self._entries:
            counts[entry.action] += 1
        if not self._entries:
            return "no changes"
        return ", ".join(
            f"{count} {action.value}" for action, count in counts.items() if count
        )
