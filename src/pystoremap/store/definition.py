"""Store definitions ("tokens").

A definition is an immutable description of a store family: its id, a
factory producing the initial state, its getters and its actions. Live
instances are created from it lazily, once per root.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pystoremap.exceptions import StoreDefinitionError

if TYPE_CHECKING:
    from pystoremap.store.instance import Store
    from pystoremap.store.root import StoreRoot

StateFactory = Callable[[], dict[str, Any]]
Getter = Callable[[Any], Any]
Action = Callable[..., Any]


class StoreDefinition(BaseModel):
    """Identifies a store and knows how to build it.

    Calling the definition resolves the live instance for a root::

        use_main = define_store("main", state=lambda: {"n": 0})
        store = use_main(root)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., description="Unique store id")
    state: StateFactory | None = Field(default=None, description="Factory for the initial state")
    getters: dict[str, Getter] = Field(default_factory=dict, description="Derived values, called with the store")
    actions: dict[str, Action] = Field(
        default_factory=dict,
        description="Callables invoked with the store as first argument",
    )

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        store_id = value.strip()
        if not store_id:
            raise ValueError("store id must be non-empty")
        return store_id

    def __call__(self, root: StoreRoot | None = None) -> Store:
        from pystoremap.store.root import resolve

        return resolve(self, root)

    def __hash__(self) -> int:
        # getters/actions are dicts; the id identifies a store family.
        return hash((type(self), self.id))

    def __repr__(self) -> str:
        return f"StoreDefinition(id={self.id!r})"


def define_store(
    store_id: str,
    *,
    state: StateFactory | None = None,
    getters: Mapping[str, Getter] | None = None,
    actions: Mapping[str, Action] | None = None,
) -> StoreDefinition:
    """Define a store.

    Getter and action names must be distinct. Clashes with state fields
    can only be detected once the state factory runs, when the first
    instance is created.
    """
    getters = dict(getters or {})
    actions = dict(actions or {})
    shared = sorted(set(getters) & set(actions))
    if shared:
        raise StoreDefinitionError(
            f"store {store_id!r} declares {', '.join(shared)} as both getter and action",
            store_id=store_id,
        )
    return StoreDefinition(id=store_id, state=state, getters=getters, actions=actions)
