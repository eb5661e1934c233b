"""Tree sync — the layer that projects a virtual content tree onto disk.

This package provides the primitives for:
- Reconciliation: materializing virtual nodes and their subtrees as files
- Result logs: ordered, append-only records of every filesystem mutation
- Sync logs: the logging collaborator reporting each mutation
- History: persisted result logs for auditing past runs
"""
