"""Exception types raised by vaultsync.

Filesystem failures are not wrapped: they surface as the built-in
``OSError`` subclasses raised by ``pathlib`` and ``shutil``.
"""


class SyncError(Exception):
    """Base class for vaultsync errors."""


class ArtifactCollisionError(SyncError):
    """Two different artifacts map onto the same physical path in one pass."""

    def __init__(self, physical_path, first: str, second: str):
        self.physical_path = physical_path
        self.first = first
        self.second = second
        super().__init__(
            f"{physical_path} is produced by both {first} and {second}"
        )


class ConfigError(SyncError):
    """Invalid configuration or manifest content."""
