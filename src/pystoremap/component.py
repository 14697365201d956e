"""Component host.

Components declare ``data`` (local reactive fields), ``computed``
properties, ``methods`` and an optional ``render`` function. The
accessor mappings returned by the helpers in :mod:`pystoremap.helpers`
plug straight into ``computed`` and ``methods``.

Every computed getter, setter and method receives the mounted
:class:`ComponentInstance` as its first argument. Mapped accessors use
its ``store_root`` to resolve stores.
"""

from __future__ import annotations

import functools
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pystoremap._reactivity import Computed, Effect, Ref, Scheduler
from pystoremap.exceptions import ComponentDefinitionError
from pystoremap.store.root import StoreRoot, get_active_root


@dataclass(frozen=True, slots=True)
class ComputedAccessor:
    """Declaration of a computed property.

    ``getter(component)`` produces the value; ``setter(component, value)``,
    when present, makes the property assignable.
    """

    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None] | None = None

    @property
    def writable(self) -> bool:
        return self.setter is not None


@dataclass(frozen=True)
class ComponentDefinition:
    name: str
    data: Callable[[], dict[str, Any]] | None = None
    computed: Mapping[str, ComputedAccessor] = field(default_factory=dict)
    methods: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    render: Callable[[Any], str] | None = None


def define_component(
    *,
    name: str = "anonymous",
    data: Callable[[], dict[str, Any]] | None = None,
    computed: Mapping[str, ComputedAccessor | Callable[[Any], Any]] | None = None,
    methods: Mapping[str, Callable[..., Any]] | None = None,
    render: Callable[[Any], str] | None = None,
) -> ComponentDefinition:
    """Declare a component.

    Plain callables in ``computed`` are read-only computed properties.
    Names must be unique across ``computed`` and ``methods``; clashes
    with ``data`` fields are reported on mount.
    """
    accessors = {
        key: value if isinstance(value, ComputedAccessor) else ComputedAccessor(getter=value)
        for key, value in (computed or {}).items()
    }
    methods = dict(methods or {})
    shared = sorted(set(accessors) & set(methods))
    if shared:
        raise ComponentDefinitionError(
            f"component {name!r} declares {', '.join(shared)} as both computed and method"
        )
    return ComponentDefinition(name=name, data=data, computed=accessors, methods=methods, render=render)


class ComponentInstance:
    """A mounted component.

    Attribute reads resolve data fields, then computed properties, then
    methods. Assigning a data field or a writable computed property goes
    through the reactive system.
    """

    def __init__(
        self,
        definition: ComponentDefinition,
        store_root: StoreRoot | None,
        scheduler: Scheduler | None = None,
    ) -> None:
        initial = definition.data() if definition.data is not None else {}
        shared = sorted(set(initial) & (set(definition.computed) | set(definition.methods)))
        if shared:
            raise ComponentDefinitionError(
                f"component {definition.name!r} declares {', '.join(shared)} both as data and computed/method"
            )

        object.__setattr__(self, "store_root", store_root)
        object.__setattr__(self, "_definition", definition)
        object.__setattr__(self, "_data", {key: Ref(value) for key, value in initial.items()})
        object.__setattr__(
            self,
            "_computed",
            {
                key: Computed(
                    functools.partial(accessor.getter, self),
                    functools.partial(accessor.setter, self) if accessor.setter is not None else None,
                )
                for key, accessor in definition.computed.items()
            },
        )
        object.__setattr__(
            self,
            "_methods",
            {key: types.MethodType(fn, self) for key, fn in definition.methods.items()},
        )
        object.__setattr__(self, "_text", "")
        object.__setattr__(self, "_effect", None)
        if definition.render is not None:
            object.__setattr__(self, "_effect", Effect(self._render, scheduler))

    def _render(self) -> None:
        object.__setattr__(self, "_text", self._definition.render(self))

    def text(self) -> str:
        """Output of the latest render (empty without a render function)."""
        return self._text

    def unmount(self) -> None:
        """Stop rendering and detach every computed property from its sources."""
        if self._effect is not None:
            self._effect.stop()
        for computed in self._computed.values():
            computed.stop()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        ref = self._data.get(name)
        if ref is not None:
            return ref.value
        computed = self._computed.get(name)
        if computed is not None:
            return computed.value
        method = self._methods.get(name)
        if method is not None:
            return method
        raise AttributeError(f"component {self._definition.name!r} has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        ref = self._data.get(name)
        if ref is not None:
            ref.value = value
            return
        computed = self._computed.get(name)
        if computed is not None:
            if not computed.writable:
                raise AttributeError(
                    f"computed property {name!r} of component {self._definition.name!r} is read-only"
                )
            computed.value = value
            return
        raise AttributeError(f"component {self._definition.name!r} has no assignable attribute {name!r}")

    def __repr__(self) -> str:
        return f"<ComponentInstance {self._definition.name!r}>"


def mount(
    definition: ComponentDefinition,
    root: StoreRoot | None = None,
    *,
    scheduler: Scheduler | None = None,
) -> ComponentInstance:
    """Instantiate *definition*; the first render (if any) runs immediately."""
    return ComponentInstance(definition, root, scheduler)


def root_of(component: Any) -> StoreRoot | None:
    """Root a component resolves stores under, falling back to the active root."""
    root = getattr(component, "store_root", None)
    return root if root is not None else get_active_root()
