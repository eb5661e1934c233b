"""Sync history — persisted, auditable copies of result logs.

Every recorded sync run is appended to ``history.jsonl`` as one JSON line
per result entry, tagged with the run id and time, so past runs can be
listed and replayed for reporting.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from vaultsync.sync.result import SyncAction, SyncOperation, SyncResult, SyncResultEntry


@dataclass
class HistoryRecord:
    """A result entry as stored in the history."""

    run_id: str
    recorded_at: str
    label: str
    entry: SyncResultEntry


class SyncHistoryStore:
    """Stores and retrieves recorded sync runs.

    Storage layout:
        <base_dir>/history.jsonl
    """

    HISTORY_FILE = "history.jsonl"

    def __init__(self, base_dir: Optional[str | Path] = None):
        if base_dir is None:
            base_dir = Path.home() / ".vaultsync"
        self.base_dir = Path(base_dir)
        self.history_file = self.base_dir / self.HISTORY_FILE

    def record(self, result: SyncResult, label: str = "") -> str:
        """Append every entry of ``result`` and return the new run id."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        run_id = uuid.uuid4().hex[:16]
        recorded_at = datetime.now(timezone.utc).isoformat()

        with open(self.history_file, "a", encoding="utf-8") as f:
            for entry in result:
                f.write(
                    json.dumps(
                        {
                            "run_id": run_id,
                            "recorded_at": recorded_at,
                            "label": label,
                            "logical_path": entry.logical_path,
                            "physical_path": entry.physical_path,
                            "operation": entry.operation.value,
                            "action": entry.action.value,
                        }
                    )
                    + "\n"
                )
        return run_id

    def get_history(self, run_id: str | None = None) -> list[HistoryRecord]:
        """Retrieve stored entries in recording order, optionally for one run."""
        if not self.history_file.exists():
            return []

        records = []
        with open(self.history_file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                data = json.loads(line)
                if run_id and data.get("run_id") != run_id:
                    continue
                records.append(
                    HistoryRecord(
                        run_id=data["run_id"],
                        recorded_at=data.get("recorded_at", ""),
                        label=data.get("label", ""),
                        entry=SyncResultEntry(
                            logical_path=data["logical_path"],
                            physical_path=data["physical_path"],
                            operation=SyncOperation(data["operation"]),
                            action=SyncAction(data["action"]),
                        ),
                    )
                )
        return records

    def get_runs(self) -> list[str]:
        """Return recorded run ids, oldest first."""
        seen: list[str] = []
        for record in self.get_history():
            if record.run_id not in seen:
                seen.append(record.run_id)
        return seen

    def load_result(self, run_id: str) -> SyncResult:
        """Rebuild the result log of a recorded run."""
        result = SyncResult()
        for record in self.get_history(run_id):
            e = record.entry
            result.add_entry(e.logical_path, e.physical_path, e.operation, e.action)
        return result
