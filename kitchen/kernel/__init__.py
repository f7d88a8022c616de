"""
Kitchen Kernel — the storage-facing core.

Four components:
  table_store  — key/value rows with version tags (memory + Postgres adapters)
  codec        — aggregate <-> stored JSON text
  policies     — (aggregate, input) → PolicyResult  (pure, deterministic)
  engine       — read-modify-write guarded by the version tag
"""

from kitchen.kernel.codec import AggregateCodec, CodecError
from kitchen.kernel.engine import UpdateEngine
from kitchen.kernel.table_store import KeyPredicate, MemoryTableStore, StoreOutcome, StoreStatus, TableStore
from kitchen.kernel.types import MENUS, RECIPES, SHOPPING_LISTS, OperationResult, PolicyResult, Reason

__all__ = [
    "AggregateCodec",
    "CodecError",
    "UpdateEngine",
    "KeyPredicate",
    "MemoryTableStore",
    "StoreOutcome",
    "StoreStatus",
    "TableStore",
    "RECIPES",
    "MENUS",
    "SHOPPING_LISTS",
    "OperationResult",
    "PolicyResult",
    "Reason",
]
