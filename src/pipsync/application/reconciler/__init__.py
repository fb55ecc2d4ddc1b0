"""
Entry reconciliation package.

Modules:
- base: EntryHandler / EntryReconciler contracts
- identifier: identifier resolution
- serializer: deterministic document ordering
- operations: per-document element operations
- single / multi: reconciler strategies
"""
