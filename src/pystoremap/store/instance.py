"""Live store instances.

State fields are :class:`~pystoremap._reactivity.Ref` cells, getters are
:class:`~pystoremap._reactivity.Computed` values and actions are methods
bound to the instance. All three are reached by attribute access.
"""

from __future__ import annotations

import functools
import types
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pystoremap._reactivity import Computed, Ref
from pystoremap.exceptions import StoreDefinitionError

if TYPE_CHECKING:
    from pystoremap.store.definition import StoreDefinition
    from pystoremap.store.root import StoreRoot

_RESERVED_NAMES: frozenset[str] = frozenset({"store_id", "root", "state", "patch", "reset"})


class Store:
    """A reactive state container resolved from a :class:`StoreDefinition`.

    Reading ``store.<field>`` inside a computed value or an effect makes
    it a dependency; assigning ``store.<field> = value`` notifies every
    reader. Getters and actions cannot be assigned.
    """

    def __init__(self, definition: StoreDefinition, root: StoreRoot) -> None:
        initial = definition.state() if definition.state is not None else {}
        _check_names(definition, initial)

        object.__setattr__(self, "_definition", definition)
        object.__setattr__(self, "_root", root)
        object.__setattr__(self, "_refs", {key: Ref(value) for key, value in initial.items()})
        object.__setattr__(
            self,
            "_getters",
            {name: Computed(functools.partial(fn, self)) for name, fn in definition.getters.items()},
        )
        object.__setattr__(
            self,
            "_actions",
            {name: types.MethodType(fn, self) for name, fn in definition.actions.items()},
        )

    @property
    def store_id(self) -> str:
        return self._definition.id

    @property
    def root(self) -> StoreRoot:
        return self._root

    @property
    def state(self) -> dict[str, Any]:
        """Snapshot of the state fields."""
        return {key: ref.value for key, ref in self._refs.items()}

    def patch(self, values: Mapping[str, Any]) -> None:
        """Assign several state fields."""
        unknown = sorted(set(values) - set(self._refs))
        if unknown:
            raise AttributeError(f"store {self.store_id!r} has no state field(s) {', '.join(unknown)}")
        for key, value in values.items():
            self._refs[key].value = value

    def reset(self) -> None:
        """Restore every state field to the value produced by the state factory."""
        factory = self._definition.state
        self.patch(factory() if factory is not None else {})

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; guard internals during __init__.
        if name.startswith("_"):
            raise AttributeError(name)
        ref = self._refs.get(name)
        if ref is not None:
            return ref.value
        getter = self._getters.get(name)
        if getter is not None:
            return getter.value
        action = self._actions.get(name)
        if action is not None:
            return action
        raise AttributeError(f"store {self.store_id!r} has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        ref = self._refs.get(name)
        if ref is not None:
            ref.value = value
            return
        if name in self._getters:
            raise AttributeError(f"getter {name!r} of store {self.store_id!r} is read-only")
        if name in self._actions:
            raise AttributeError(f"action {name!r} of store {self.store_id!r} cannot be replaced")
        raise AttributeError(f"store {self.store_id!r} has no state field {name!r}")

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._refs, *self._getters, *self._actions})

    def __repr__(self) -> str:
        return f"<Store id={self.store_id!r}>"


def _check_names(definition: StoreDefinition, initial: dict[str, Any]) -> None:
    members = {
        "state field": set(initial),
        "getter": set(definition.getters),
        "action": set(definition.actions),
    }
    for kind, names in members.items():
        reserved = sorted(names & _RESERVED_NAMES)
        if reserved:
            raise StoreDefinitionError(
                f"store {definition.id!r} uses reserved {kind} name(s) {', '.join(reserved)}",
                store_id=definition.id,
            )
        private = sorted(name for name in names if name.startswith("_"))
        if private:
            raise StoreDefinitionError(
                f"store {definition.id!r} {kind} name(s) {', '.join(private)} must not start with '_'",
                store_id=definition.id,
            )
    clashing = sorted(members["state field"] & (members["getter"] | members["action"]))
    if clashing:
        raise StoreDefinitionError(
            f"store {definition.id!r} declares {', '.join(clashing)} both as state and as getter/action",
            store_id=definition.id,
        )
