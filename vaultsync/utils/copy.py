"""Artifact copy — write artifact content to disk, translating line endings.

Text content is rewritten with a single line separator; binary content is
copied byte for byte. A file whose bytes already match is left untouched so
that repeated syncs do not rewrite unchanged files.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from vaultsync.errors import ConfigError
from vaultsync.tree.models import Artifact

LS_NATIVE = os.linesep.encode("ascii")

LINE_SEPARATORS = {
    "native": LS_NATIVE,
    "lf": b"\n",
    "crlf": b"\r\n",
}

_LINE_END = re.compile(rb"\r\n|\r|\n")


def line_separator(name: str) -> bytes:
    """Return the separator bytes for ``native``, ``lf`` or ``crlf``."""
    try:
        return LINE_SEPARATORS[name.lower()]
    except KeyError:
        raise ConfigError(
            f"Invalid line separator '{name}'. Must be one of: {sorted(LINE_SEPARATORS)}"
        )


def normalize_line_endings(data: bytes, line_feed: bytes) -> bytes:
    """Replace every CRLF, CR and LF in ``data`` with ``line_feed``."""
    return _LINE_END.sub(line_feed, data)


def render_artifact(artifact: Artifact, line_feed: Optional[bytes] = None) -> bytes:
    """Read the artifact content, normalizing line endings if ``line_feed`` is set."""
    with artifact.open() as stream:
        data = stream.read()
    if line_feed is not None:
        data = normalize_line_endings(data, line_feed)
    return data


def copy_artifact(artifact: Artifact, target: Path, line_feed: Optional[bytes] = None) -> bool:
    """Materialize ``artifact`` at ``target``.

    Returns True if the file was written, False if it already held the
    same bytes. Read and write failures propagate.
    """
    data = render_artifact(artifact, line_feed)
    if _same_content(target, data):
        return False

    target.write_bytes(data)
    if artifact.last_modified is not None:
        mtime = artifact.last_modified.timestamp()
        os.utime(target, (mtime, mtime))
    return True


def _same_content(target: Path, data: bytes) -> bool:
    if not target.is_file():
        return False
    if target.stat().st_size != len(data):
        return False
    return target.read_bytes() == data
