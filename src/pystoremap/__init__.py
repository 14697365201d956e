"""pystoremap - Map reactive stores onto components as computed properties and methods."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pystoremap")
except PackageNotFoundError:
    __version__ = "0+local"
from pystoremap._reactivity import Computed, Effect, Ref, Scheduler, next_tick, untracked
from pystoremap.component import (
    ComponentDefinition,
    ComponentInstance,
    ComputedAccessor,
    define_component,
    mount,
)
from pystoremap.config import MapHelpersConfig, configure, get_config, set_map_store_suffix
from pystoremap.exceptions import (
    ComponentDefinitionError,
    NoActiveRootError,
    ReactiveRecursionError,
    SelectionError,
    StoreDefinitionError,
    StoreMapConfigError,
    StoreMapError,
)
from pystoremap.helpers import map_actions, map_getters, map_state, map_stores, map_writable_state
from pystoremap.selection import AliasMap, NameList
from pystoremap.store import (
    Store,
    StoreDefinition,
    StoreRoot,
    create_root,
    define_store,
    get_active_root,
    resolve,
    set_active_root,
)

__all__ = [
    "__version__",
    "AliasMap",
    "ComponentDefinition",
    "ComponentDefinitionError",
    "ComponentInstance",
    "Computed",
    "ComputedAccessor",
    "Effect",
    "MapHelpersConfig",
    "NameList",
    "NoActiveRootError",
    "ReactiveRecursionError",
    "Ref",
    "Scheduler",
    "SelectionError",
    "Store",
    "StoreDefinition",
    "StoreDefinitionError",
    "StoreMapConfigError",
    "StoreMapError",
    "StoreRoot",
    "configure",
    "create_root",
    "define_component",
    "define_store",
    "get_active_root",
    "get_config",
    "map_actions",
    "map_getters",
    "map_state",
    "map_stores",
    "map_writable_state",
    "mount",
    "next_tick",
    "resolve",
    "set_active_root",
    "set_map_store_suffix",
    "untracked",
]
