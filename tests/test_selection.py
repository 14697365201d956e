from __future__ import annotations

import pytest
from pydantic import ValidationError

from pystoremap import SelectionError
from pystoremap.selection import AliasMap, FnAccess, NameAccess, NameList, as_selection, names_only, normalize


def _triple(store: object, component: object) -> int:
    return 3


def test_lists_and_tuples_become_name_lists() -> None:
    assert as_selection(["n", "a"]) == NameList(names=("n", "a"))
    assert as_selection(("n",)) == NameList(names=("n",))


def test_mappings_become_alias_maps() -> None:
    selection = as_selection({"count": "n", "triple": _triple})
    assert isinstance(selection, AliasMap)
    assert list(selection.entries) == ["count", "triple"]


def test_tagged_selections_pass_through() -> None:
    selection = NameList(names=("n",))
    assert as_selection(selection) is selection


@pytest.mark.parametrize("value", ["n", b"n", 3, None, {"n"}])
def test_other_shapes_are_rejected(value: object) -> None:
    with pytest.raises(SelectionError):
        as_selection(value)


def test_names_must_be_non_empty_strings() -> None:
    with pytest.raises(ValidationError):
        NameList(names=("",))
    with pytest.raises(ValidationError):
        as_selection([1])
    with pytest.raises(ValidationError):
        as_selection({"": "n"})
    with pytest.raises(ValidationError):
        as_selection({"count": 3})


def test_normalize_name_list() -> None:
    entries = normalize(NameList(names=("double", "n")))
    assert [(entry.exposed_name, entry.access) for entry in entries] == [
        ("double", NameAccess(name="double")),
        ("n", NameAccess(name="n")),
    ]


def test_normalize_alias_map_keeps_order_and_functions() -> None:
    entries = normalize(as_selection({"z": "n", "triple": _triple, "a": "a"}))

    assert [entry.exposed_name for entry in entries] == ["z", "triple", "a"]
    assert entries[0].access == NameAccess(name="n")
    assert isinstance(entries[1].access, FnAccess)
    assert entries[1].access.fn is _triple


def test_names_only_returns_pairs() -> None:
    assert names_only(as_selection({"inc": "increment", "set": "set_n"}), helper="map_actions") == [
        ("inc", "increment"),
        ("set", "set_n"),
    ]


def test_names_only_rejects_functions() -> None:
    with pytest.raises(SelectionError, match="map_writable_state"):
        names_only(as_selection({"triple": _triple}), helper="map_writable_state")
