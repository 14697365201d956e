"""Custom exception hierarchy for pystoremap."""

from __future__ import annotations


class StoreMapError(Exception):
    """Base exception for all pystoremap errors."""


class StoreMapConfigError(StoreMapError):
    """Invalid mapping-layer configuration."""


class StoreDefinitionError(StoreMapError, ValueError):
    """A store definition is inconsistent.

    Raised when getter, action and state field names collide, or when
    one of them shadows an attribute the store instance reserves for
    itself (``store_id``, ``state``, ``patch``, ...).
    """

    def __init__(self, message: str, *, store_id: str = "") -> None:
        self.store_id = store_id
        super().__init__(message)


class ComponentDefinitionError(StoreMapError, ValueError):
    """A component declares the same name twice across data/computed/methods."""


class SelectionError(StoreMapError, TypeError):
    """A selection has the wrong shape for the helper it was passed to.

    ``map_writable_state()`` and ``map_actions()`` only accept plain
    names; selector functions are rejected when the mapping is defined,
    not when it is first read.
    """


class NoActiveRootError(StoreMapError, RuntimeError):
    """A store was resolved without an explicit root and none is active."""


class ReactiveRecursionError(StoreMapError, RuntimeError):
    """An effect kept re-triggering itself during a single flush."""
