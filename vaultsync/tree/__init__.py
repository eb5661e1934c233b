"""Virtual content tree — the logical hierarchy projected onto disk."""

from vaultsync.tree.models import Artifact, NodeKind, VaultNode, VirtualNode

__all__ = [
    "Artifact",
    "NodeKind",
    "VaultNode",
    "VirtualNode",
]
