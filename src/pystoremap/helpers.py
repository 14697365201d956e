"""Helpers mapping stores onto components.

Each helper returns a plain ``dict`` to be spread into a component's
``computed`` or ``methods``::

    Counter = define_component(
        computed={
            **map_stores(use_main),
            **map_state(use_main, ["n", "double"]),
            **map_writable_state(use_main, {"count": "n"}),
        },
        methods=map_actions(use_main, {"inc": "increment"}),
    )

The generated accessors hold no cache of their own. They re-resolve the
store on every evaluation and rely on :func:`pystoremap.store.resolve`
returning the same instance per root, and on the host's computed values
for memoization.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pystoremap.component import ComputedAccessor, root_of
from pystoremap.config import MapHelpersConfig, get_config, set_map_store_suffix
from pystoremap.exceptions import SelectionError
from pystoremap.selection import FnAccess, NameAccess, as_selection, names_only, normalize
from pystoremap.store.definition import StoreDefinition
from pystoremap.store.root import resolve

_logger = logging.getLogger(__name__)

_ARRAY_WARNING = (
    'Directly pass all stores to "map_stores()" without putting them in an array:\n'
    "Replace\n"
    "\tmap_stores([use_auth, use_cart])\n"
    "with\n"
    "\tmap_stores(use_auth, use_cart)\n"
    "No store accessor was generated."
)

__all__ = [
    "map_actions",
    "map_getters",
    "map_state",
    "map_stores",
    "map_writable_state",
    "set_map_store_suffix",
]


def map_stores(*stores: StoreDefinition, config: MapHelpersConfig | None = None) -> dict[str, ComputedAccessor]:
    """Expose each store as ``<store id><suffix>``.

    The suffix is read from *config* (or the shared configuration) now,
    not when the accessors are read.
    """
    if any(isinstance(store, (list, tuple)) for store in stores):
        _logger.warning(_ARRAY_WARNING)
        return {}

    suffix = (config if config is not None else get_config()).store_suffix
    mapped: dict[str, ComputedAccessor] = {}
    for store in stores:
        _check_definition(store, "map_stores")
        mapped[f"{store.id}{suffix}"] = ComputedAccessor(getter=_store_getter(store))
    return mapped


def map_state(store: StoreDefinition, selection: Any) -> dict[str, ComputedAccessor]:
    """Expose state fields and getters as read-only computed properties.

    *selection* is a list of names, or a mapping of alias to either a
    name or a selector function called as ``fn(store, component)``.
    """
    _check_definition(store, "map_state")
    return {
        entry.exposed_name: ComputedAccessor(getter=_state_getter(store, entry.access))
        for entry in normalize(as_selection(selection))
    }


#: Same helper under its historical name.
map_getters = map_state


def map_writable_state(store: StoreDefinition, selection: Any) -> dict[str, ComputedAccessor]:
    """Expose state fields as computed properties that write back into the store.

    Only plain names are accepted; getters are not writable and
    selector functions are rejected.
    """
    _check_definition(store, "map_writable_state")
    mapped: dict[str, ComputedAccessor] = {}
    for exposed_name, field_name in names_only(as_selection(selection), helper="map_writable_state"):
        mapped[exposed_name] = ComputedAccessor(
            getter=_field_getter(store, field_name),
            setter=_field_setter(store, field_name),
        )
    return mapped


def map_actions(store: StoreDefinition, selection: Any) -> dict[str, Callable[..., Any]]:
    """Expose store actions as component methods.

    Arguments, return values and exceptions pass through unchanged.
    """
    _check_definition(store, "map_actions")
    return {
        exposed_name: _action_method(store, action_name)
        for exposed_name, action_name in names_only(as_selection(selection), helper="map_actions")
    }


def _check_definition(store: Any, helper: str) -> None:
    if not isinstance(store, StoreDefinition):
        raise SelectionError(f"{helper}() expects store definitions, got {type(store).__name__}")


def _store_getter(definition: StoreDefinition) -> Callable[[Any], Any]:
    def get_store(component: Any) -> Any:
        return resolve(definition, root_of(component))

    return get_store


def _field_getter(definition: StoreDefinition, name: str) -> Callable[[Any], Any]:
    def get_field(component: Any) -> Any:
        return getattr(resolve(definition, root_of(component)), name)

    return get_field


def _field_setter(definition: StoreDefinition, name: str) -> Callable[[Any, Any], None]:
    def set_field(component: Any, value: Any) -> None:
        setattr(resolve(definition, root_of(component)), name, value)

    return set_field


def _state_getter(definition: StoreDefinition, access: NameAccess | FnAccess) -> Callable[[Any], Any]:
    if isinstance(access, NameAccess):
        return _field_getter(definition, access.name)

    selector = access.fn

    def select(component: Any) -> Any:
        return selector(resolve(definition, root_of(component)), component)

    return select


def _action_method(definition: StoreDefinition, name: str) -> Callable[..., Any]:
    def call_action(component: Any, *args: Any, **kwargs: Any) -> Any:
        return getattr(resolve(definition, root_of(component)), name)(*args, **kwargs)

    call_action.__name__ = name
    call_action.__qualname__ = f"{definition.id}.{name}"
    return call_action
