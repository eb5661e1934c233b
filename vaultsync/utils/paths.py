"""Path mapping between repository names and filesystem paths.

None of the helpers here touch the filesystem.
"""

from __future__ import annotations

from pathlib import Path

# Characters that cannot appear in a platform (filesystem) name
RESERVED_CHARS = '%\\/:*?"<>|'


def split_platform_path(platform_path: str) -> list[str]:
    """Split a ``/``-separated platform path into its non-empty segments."""
    return [seg for seg in platform_path.split("/") if seg]


def child_path(base: str | Path, platform_path: str) -> Path:
    """Resolve a ``/``-separated platform path beneath ``base``.

    Segments are joined one by one, so ``child_path(root, "a/b")`` equals
    ``root / "a" / "b"`` on every platform.
    """
    path = Path(base)
    for seg in split_platform_path(platform_path):
        path = path / seg
    return path


def join_logical(parent: str, name: str) -> str:
    """Join a logical (repository) path and a child name."""
    if not parent or parent == "/":
        return "/" + name
    return parent.rstrip("/") + "/" + name


def platform_name(repository_name: str) -> str:
    """Escape a repository name into a filesystem-safe name.

    A namespaced name such as ``jcr:content`` becomes ``_jcr_content``;
    a name already starting with ``_`` gets an extra leading ``_``. Any
    remaining reserved character is percent-encoded.
    """
    name = repository_name
    prefix = ""
    colon = name.find(":")
    if colon > 0 and _is_plain(name[:colon]):
        prefix = "_" + name[:colon] + "_"
        name = name[colon + 1:]
    elif name.startswith("_"):
        prefix = "_"

    escaped = []
    for ch in name:
        if ch in RESERVED_CHARS:
            escaped.append(f"%{ord(ch):02x}")
        else:
            escaped.append(ch)
    return prefix + "".join(escaped)


def repository_name(platform: str) -> str:
    """Inverse of :func:`platform_name`."""
    name = platform
    prefix = ""
    if name.startswith("__"):
        name = name[1:]
    elif _looks_namespaced(name):
        end = name.index("_", 1)
        prefix = name[1:end] + ":"
        name = name[end + 1:]
    return prefix + _unescape(name)


def platform_path(repository_path: str) -> str:
    """Map a ``/``-separated repository path segment by segment."""
    return "/".join(platform_name(seg) for seg in repository_path.split("/"))


def _is_plain(segment: str) -> bool:
    return bool(segment) and all(ch.isalnum() or ch in "-." for ch in segment)


def _looks_namespaced(name: str) -> bool:
    """True for names shaped like ``_ns_rest``."""
    if not name.startswith("_"):
        return False
    end = name.find("_", 1)
    return end > 1 and _is_plain(name[1:end])


def _unescape(name: str) -> str:
    out = []
    i = 0
    while i < len(name):
        ch = name[i]
        if ch == "%" and _is_hex(name[i + 1:i + 3]):
            out.append(chr(int(name[i + 1:i + 3], 16)))
            i += 3
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _is_hex(value: str) -> bool:
    return len(value) == 2 and all(c in "0123456789abcdefABCDEF" for c in value)
