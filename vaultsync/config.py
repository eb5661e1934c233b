"""Configuration — YAML settings for the reconciler and its collaborators.

Example ``vaultsync.yaml``::

    line_separator: lf        # native | lf | crlf
    text_types: [application/x-custom]
    binary_types: [application/pdf]
    log_file: .vlt-sync.log
    history_dir: ~/.vaultsync
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from vaultsync.errors import ConfigError
from vaultsync.sync.sync_log import SyncLog
from vaultsync.sync.tree_sync import TreeSync
from vaultsync.utils.copy import line_separator
from vaultsync.utils.mime import MimeTypes

DEFAULT_CONFIG_FILE = "vaultsync.yaml"


@dataclass
class SyncConfig:
    """Settings used to build a :class:`TreeSync`."""

    line_separator: str = "native"
    text_types: list[str] = field(default_factory=list)
    binary_types: list[str] = field(default_factory=list)
    log_file: Optional[Path] = None
    history_dir: Optional[Path] = None

    @property
    def line_feed(self) -> bytes:
        return line_separator(self.line_separator)

    def create_sync_log(self) -> SyncLog:
        return SyncLog(log_file=self.log_file)

    def create_tree_sync(self, sync_log: Optional[SyncLog] = None) -> TreeSync:
        return TreeSync(
            sync_log=sync_log or self.create_sync_log(),
            mime_types=MimeTypes(text_types=self.text_types, binary_types=self.binary_types),
            line_feed=self.line_feed,
        )


def load_config(path: str | Path | None = None) -> SyncConfig:
    """Load settings from a YAML file.

    Without ``path``, ``vaultsync.yaml`` in the working directory is used if
    present; a missing default file yields the defaults.
    """
    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.exists():
            return SyncConfig()
    path = Path(path)

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    separator = str(data.get("line_separator", "native"))
    line_separator(separator)

    return SyncConfig(
        line_separator=separator,
        text_types=_string_list(data, "text_types"),
        binary_types=_string_list(data, "binary_types"),
        log_file=_optional_path(data.get("log_file"), path.parent),
        history_dir=_optional_path(data.get("history_dir"), path.parent),
    )


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return value


def _optional_path(value, base: Path) -> Optional[Path]:
    if not value:
        return None
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else base / path
