"""Virtual tree data models — nodes, artifacts and the node capability protocol.

A virtual node is one logical entry of the content tree. It projects onto
disk through its artifacts: the first (primary) artifact is the node's own
directory or content file, further artifacts are auxiliary metadata files
written next to it. Nodes that must be written together as one unit share a
related set and a controlling aggregate.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Callable, Hashable, Optional, Protocol, Sequence


class NodeKind(Enum):
    """Whether a node projects onto a directory or a file."""

    DIRECTORY = "directory"
    LEAF = "leaf"


@dataclass
class Artifact:
    """One physical projection of a virtual node.

    Content comes from exactly one source: in-memory ``data``, a ``source``
    file, or a ``loader`` called at materialization time (for content that
    depends on the state of the tree, such as a listing of the children).
    Directory artifacts carry no content.
    """

    platform_path: str  # "/"-separated, relative to the parent's directory
    content_type: Optional[str] = None
    data: Optional[bytes] = None
    source: Optional[Path] = None
    loader: Optional[Callable[[], bytes]] = None
    last_modified: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.platform_path.rstrip("/").rsplit("/", 1)[-1]

    def open(self) -> BinaryIO:
        """Open the artifact content as a binary stream."""
        if self.loader is not None:
            return io.BytesIO(self.loader())
        if self.source is not None:
            return open(self.source, "rb")
        return io.BytesIO(self.data or b"")


class VaultNode(Protocol):
    """What the reconciler needs to know about a node of the virtual tree."""

    aggregate_path: str

    @property
    def is_directory(self) -> bool: ...

    @property
    def artifacts(self) -> Sequence[Artifact]: ...

    @property
    def primary_artifact(self) -> Optional[Artifact]: ...

    @property
    def related_set(self) -> Sequence["VaultNode"]: ...

    @property
    def aggregate(self) -> Hashable: ...

    @property
    def children(self) -> Sequence["VaultNode"]: ...

    @property
    def parent(self) -> Optional["VaultNode"]: ...


@dataclass(eq=False)
class VirtualNode:
    """In-memory node of the virtual content tree.

    Nodes compare by identity. ``related`` lists every member of the node's
    unit, the node itself included; an empty list means the node stands
    alone. ``controlling_aggregate`` defaults to the node's own aggregate
    path.
    """

    aggregate_path: str
    kind: NodeKind = NodeKind.LEAF
    artifacts: list[Artifact] = field(default_factory=list)
    related: list[VirtualNode] = field(default_factory=list)
    controlling_aggregate: Optional[Hashable] = None
    children: list[VirtualNode] = field(default_factory=list)
    parent: Optional[VirtualNode] = field(default=None, repr=False)

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def name(self) -> str:
        return self.aggregate_path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def primary_artifact(self) -> Optional[Artifact]:
        return self.artifacts[0] if self.artifacts else None

    @property
    def related_set(self) -> list[VirtualNode]:
        return self.related or [self]

    @property
    def aggregate(self) -> Hashable:
        if self.controlling_aggregate is not None:
            return self.controlling_aggregate
        return self.aggregate_path

    def add_child(self, child: VirtualNode) -> VirtualNode:
        """Append a child and point its parent reference at this node."""
        child.parent = self
        self.children.append(child)
        return child

    def relate(self, *members: VirtualNode) -> None:
        """Bind ``members`` into this node's unit under its aggregate."""
        group = [self] + [m for m in members if m is not self]
        aggregate = self.aggregate
        for member in group:
            member.related = group
            member.controlling_aggregate = aggregate

    def walk(self):
        """Yield this node and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()
