"""Storage for component records and the serialised analysis artifact."""

from .component_store import ComponentStore, StoreFrozenError
from .context_file import ContextNotFoundError, read_context, write_context

__all__ = [
    "ComponentStore",
    "ContextNotFoundError",
    "StoreFrozenError",
    "read_context",
    "write_context",
]
