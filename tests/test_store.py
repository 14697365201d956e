from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from pystoremap import (
    NoActiveRootError,
    StoreDefinitionError,
    create_root,
    define_store,
    resolve,
    set_active_root,
)
from pystoremap._reactivity import Effect, Scheduler


def _counting_store(calls: list[str]) -> Any:
    def state() -> dict[str, Any]:
        calls.append("state")
        return {"n": 0, "label": "counter"}

    def double(store: Any) -> int:
        calls.append("double")
        return store.n * 2

    def increment(store: Any, by: int = 1) -> int:
        store.n += by
        return store.n

    return define_store("counter", state=state, getters={"double": double}, actions={"increment": increment})


def test_resolve_is_idempotent_per_root() -> None:
    calls: list[str] = []
    use_counter = _counting_store(calls)
    root = create_root()

    first = resolve(use_counter, root)
    second = resolve(use_counter, root)
    third = use_counter(root)

    assert first is second is third
    assert calls == ["state"]


def test_each_root_gets_its_own_instance() -> None:
    calls: list[str] = []
    use_counter = _counting_store(calls)
    one, two = create_root(), create_root()

    resolve(use_counter, one).n = 5

    assert resolve(use_counter, one) is not resolve(use_counter, two)
    assert resolve(use_counter, two).n == 0
    assert calls == ["state", "state"]


def test_dispose_drops_instances() -> None:
    calls: list[str] = []
    use_counter = _counting_store(calls)
    root = create_root()
    before = resolve(use_counter, root)

    root.dispose()

    assert dict(root.stores) == {}
    assert resolve(use_counter, root) is not before


def test_stores_view_is_read_only() -> None:
    root = create_root()
    resolve(define_store("cart"), root)
    assert list(root.stores) == ["cart"]
    with pytest.raises(TypeError):
        root.stores["other"] = None  # type: ignore[index]


def test_resolve_without_root_uses_active_root() -> None:
    use_cart = define_store("cart")
    with pytest.raises(NoActiveRootError):
        resolve(use_cart)

    root = create_root()
    assert set_active_root(root) is None
    assert use_cart() is resolve(use_cart, root)


def test_store_id_is_normalized() -> None:
    assert define_store("  main ").id == "main"
    with pytest.raises(ValidationError):
        define_store("   ")


def test_getter_and_action_names_must_differ() -> None:
    with pytest.raises(StoreDefinitionError):
        define_store("main", getters={"x": lambda store: 1}, actions={"x": lambda store: None})


def test_state_clash_is_reported_on_creation() -> None:
    use_main = define_store("main", state=lambda: {"x": 1}, getters={"x": lambda store: 2})
    with pytest.raises(StoreDefinitionError) as exc_info:
        resolve(use_main, create_root())
    assert exc_info.value.store_id == "main"


@pytest.mark.parametrize("state", [{"state": 1}, {"store_id": "x"}, {"_hidden": 1}])
def test_reserved_or_private_names_are_rejected(state: dict[str, Any]) -> None:
    use_main = define_store("main", state=lambda: dict(state))
    with pytest.raises(StoreDefinitionError):
        resolve(use_main, create_root())


def test_getters_are_memoized_until_state_changes() -> None:
    calls: list[str] = []
    store = resolve(_counting_store(calls), create_root())

    assert store.double == 0
    assert store.double == 0
    assert calls == ["state", "double"]

    store.label = "renamed"
    assert store.double == 0
    assert calls == ["state", "double"]

    store.n = 4
    assert store.double == 8
    assert calls == ["state", "double", "double"]


def test_actions_receive_the_store() -> None:
    store = resolve(_counting_store([]), create_root())
    assert store.increment() == 1
    assert store.increment(by=3) == 4
    assert store.n == 4


def test_getters_and_actions_cannot_be_assigned() -> None:
    store = resolve(_counting_store([]), create_root())
    with pytest.raises(AttributeError):
        store.double = 1
    with pytest.raises(AttributeError):
        store.increment = None
    with pytest.raises(AttributeError):
        store.unknown = 1
    with pytest.raises(AttributeError):
        _ = store.unknown


def test_patch_reset_and_state_snapshot() -> None:
    store = resolve(_counting_store([]), create_root())

    store.patch({"n": 3, "label": "patched"})
    assert store.state == {"n": 3, "label": "patched"}

    snapshot = store.state
    snapshot["n"] = 100
    assert store.n == 3

    with pytest.raises(AttributeError):
        store.patch({"nope": 1})

    store.reset()
    assert store.state == {"n": 0, "label": "counter"}


def test_state_changes_reach_effects() -> None:
    scheduler = Scheduler()
    store = resolve(_counting_store([]), create_root())
    seen: list[int] = []
    Effect(lambda: seen.append(store.double), scheduler)

    store.increment()
    store.increment()
    assert seen == [0]

    scheduler.flush()
    assert seen == [0, 4]


def test_dir_lists_store_members() -> None:
    store = resolve(_counting_store([]), create_root())
    members = dir(store)
    assert {"n", "label", "double", "increment", "store_id"} <= set(members)


def test_definitions_are_hashable_by_id() -> None:
    use_main = define_store("main", getters={"x": lambda store: 1})
    use_cart = define_store("cart")

    by_definition = {use_main: "main", use_cart: "cart"}
    assert by_definition[use_main] == "main"
    assert len({use_main, use_main, use_cart}) == 2
    assert hash(use_main) == hash(define_store("main", getters={"x": lambda store: 1}))


def test_dispose_invalidates_computed_resolutions() -> None:
    from pystoremap._reactivity import Computed

    use_cart = define_store("cart")
    root = create_root()
    resolved = Computed(lambda: resolve(use_cart, root))
    before = resolved.value

    root.dispose()
    assert resolved.dirty
    assert resolved.value is not before
    assert resolved.value is root.stores["cart"]
