"""Store container.

Definitions, live instances and the roots that own them. The mapping
helpers only rely on :func:`resolve` being idempotent per (definition, root).
"""

from pystoremap.store.definition import StoreDefinition, define_store
from pystoremap.store.instance import Store
from pystoremap.store.root import StoreRoot, create_root, get_active_root, resolve, set_active_root

__all__ = [
    "Store",
    "StoreDefinition",
    "StoreRoot",
    "create_root",
    "define_store",
    "get_active_root",
    "resolve",
    "set_active_root",
]
