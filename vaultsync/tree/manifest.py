"""Manifest loader — build a virtual tree from a YAML description.

Example::

    root:
      path: /content/site
      kind: directory
      related:
        - path: /content/site/index.html
          content_type: text/html
          text: "<html></html>"
      children:
        - path: /content/site/images
          kind: directory
          children:
            - path: /content/site/images/logo.png
              source: assets/logo.png

``name`` overrides the platform path of a node's primary artifact. It
defaults to the escaped last segment of ``path``; for related members it is
placed beneath the owner's platform path. Related members join the owner's
aggregate and are listed among its children as well.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml

from vaultsync.errors import ConfigError
from vaultsync.tree.models import Artifact, NodeKind, VirtualNode
from vaultsync.utils.mime import guess_content_type
from vaultsync.utils.paths import platform_name, platform_path

VALID_KINDS = {k.value for k in NodeKind}


def load_manifest(path: str | Path) -> VirtualNode:
    """Load a manifest file and return its root node."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not isinstance(data, dict) or "root" not in data:
        raise ConfigError(f"{path}: missing top-level 'root' key")

    return build_tree(data["root"], base_dir=path.parent)


def build_tree(data: dict, base_dir: str | Path = ".") -> VirtualNode:
    """Build a virtual tree from already-parsed manifest data."""
    return _build_node(data, Path(base_dir), parent=None, owner_name=None)


def find_node(root: VirtualNode, aggregate_path: str) -> Optional[VirtualNode]:
    """Return the first node of ``root``'s tree with the given aggregate path."""
    wanted = aggregate_path.rstrip("/") or "/"
    for node in root.walk():
        if node.aggregate_path == wanted:
            return node
    return None


def _build_node(
    data: dict,
    base_dir: Path,
    parent: Optional[VirtualNode],
    owner_name: Optional[str],
) -> VirtualNode:
    if not isinstance(data, dict) or not data.get("path"):
        raise ConfigError(f"Manifest node missing 'path': {data!r}")

    aggregate_path = str(data["path"]).rstrip("/") or "/"
    kind = data.get("kind", NodeKind.LEAF.value)
    if kind not in VALID_KINDS:
        raise ConfigError(
            f"Invalid kind '{kind}' for {aggregate_path}. Must be one of: {sorted(VALID_KINDS)}"
        )

    default_name = _default_name(aggregate_path, parent, owner_name)
    name = str(data.get("name") or default_name)

    node = VirtualNode(aggregate_path=aggregate_path, kind=NodeKind(kind))
    if node.is_directory:
        node.artifacts.append(Artifact(platform_path=name))
    else:
        node.artifacts.append(_content_artifact(data, name, base_dir))
    for extra in _node_list(data, "artifacts", aggregate_path):
        if not isinstance(extra, dict) or not extra.get("name"):
            raise ConfigError(f"Artifact of {aggregate_path} missing 'name': {extra!r}")
        node.artifacts.append(_content_artifact(extra, str(extra["name"]), base_dir))

    if parent is not None:
        parent.add_child(node)

    members = [
        _build_node(member, base_dir, node, owner_name=name)
        for member in _node_list(data, "related", aggregate_path)
    ]
    if members:
        node.relate(*members)

    for child in _node_list(data, "children", aggregate_path):
        _build_node(child, base_dir, node, owner_name=None)

    return node


def _default_name(aggregate_path: str, parent: Optional[VirtualNode], owner_name: Optional[str]) -> str:
    """Platform path of a node's primary artifact when the manifest names none.

    Related members are placed beneath their owner's platform path, keeping
    every segment of their path below the owner.
    """
    if owner_name is None:
        return platform_name(aggregate_path.rsplit("/", 1)[-1])
    prefix = parent.aggregate_path.rstrip("/") + "/"
    if aggregate_path.startswith(prefix):
        relative = aggregate_path[len(prefix):]
    else:
        relative = aggregate_path.rsplit("/", 1)[-1]
    return f"{owner_name}/{platform_path(relative)}"


def _node_list(data: dict, key: str, aggregate_path: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' of {aggregate_path} must be a list")
    return value


def _content_artifact(data: dict, name: str, base_dir: Path) -> Artifact:
    content_type = data.get("content_type") or guess_content_type(name)
    if "source" in data:
        source = Path(str(data["source"])).expanduser()
        if not source.is_absolute():
            source = base_dir / source
        return Artifact(platform_path=name, content_type=content_type, source=source)
    text = data.get("text", "")
    return Artifact(
        platform_path=name,
        content_type=content_type,
        data=str(text).encode("utf-8"),
    )
