"""Store roots and idempotent store resolution.

A root owns at most one live :class:`Store` per store id. Resolving the
same definition against the same root always returns the identical
instance; the state factory runs once per (definition, root).

Resolution is a reactive read: it tracks the root's generation, bumped
by :meth:`StoreRoot.dispose`, and the active root. Computed values that
resolved a store are invalidated when either changes and re-resolve.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Mapping

from pystoremap._reactivity import Ref
from pystoremap.exceptions import NoActiveRootError
from pystoremap.store.definition import StoreDefinition
from pystoremap.store.instance import Store

_logger = logging.getLogger(__name__)


class StoreRoot:
    """Scope under which store instances are created and shared."""

    def __init__(self) -> None:
        self._stores: dict[str, Store] = {}
        self._generation = Ref(0)

    def resolve(self, definition: StoreDefinition) -> Store:
        """Return the instance for *definition*, creating it on first use."""
        # Reading the generation subscribes the caller to dispose().
        _ = self._generation.value
        store = self._stores.get(definition.id)
        if store is None:
            _logger.debug("Creating store id=%s", definition.id)
            store = Store(definition, self)
            self._stores[definition.id] = store
        return store

    @property
    def stores(self) -> Mapping[str, Store]:
        """Read-only view of the instances created so far, by store id."""
        return types.MappingProxyType(self._stores)

    def dispose(self) -> None:
        """Drop every instance; later resolutions create fresh ones."""
        _logger.debug("Disposing root with %d store(s)", len(self._stores))
        self._stores.clear()
        self._generation.value = self._generation.peek() + 1

    def __repr__(self) -> str:
        return f"<StoreRoot stores={sorted(self._stores)}>"


_active_root: Ref[StoreRoot | None] = Ref(None)


def create_root() -> StoreRoot:
    return StoreRoot()


def set_active_root(root: StoreRoot | None) -> StoreRoot | None:
    """Make *root* the fallback for resolutions without a root.

    Returns the previously active root.
    """
    previous = _active_root.peek()
    _active_root.value = root
    return previous


def get_active_root() -> StoreRoot | None:
    return _active_root.value


def resolve(definition: StoreDefinition, root: StoreRoot | None = None) -> Store:
    """Resolve the live store for *definition* under *root* (or the active root)."""
    if root is None:
        root = _active_root.value
    if root is None:
        raise NoActiveRootError(
            f"cannot resolve store {definition.id!r}: no root given and no active root set"
        )
    return root.resolve(definition)
