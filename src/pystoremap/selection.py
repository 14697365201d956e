"""Selection normalization.

A selection says which store members a helper projects onto a component
and under which names. It is one of two variants:

* :class:`NameList`: members exposed under their own names;
* :class:`AliasMap`: alias -> member name, or alias -> selector function
  (the latter for ``map_state()`` only).

Plain lists/tuples and mappings are converted to the matching variant at
the helper boundary by :func:`as_selection`. Past that point only the
variant tag is inspected.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from pystoremap.exceptions import SelectionError

StateSelector = Callable[[Any, Any], Any]
"""Selector function, called as ``fn(store, component)``."""


def _check_name(value: str) -> str:
    if not value:
        raise ValueError("names must be non-empty strings")
    return value


class NameList(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["names"] = "names"
    names: tuple[str, ...]

    @field_validator("names")
    @classmethod
    def _non_empty_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            _check_name(name)
        return value


class AliasMap(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["aliases"] = "aliases"
    entries: dict[str, str | StateSelector]

    @field_validator("entries")
    @classmethod
    def _non_empty_aliases(cls, value: dict[str, Any]) -> dict[str, Any]:
        for alias, target in value.items():
            _check_name(alias)
            if isinstance(target, str):
                _check_name(target)
        return value


Selection = NameList | AliasMap


class NameAccess(BaseModel):
    """Read ``store.<name>`` (state field or getter alike)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["name"] = "name"
    name: str


class FnAccess(BaseModel):
    """Call ``fn(store, component)``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["fn"] = "fn"
    fn: StateSelector


class Entry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    exposed_name: str
    access: NameAccess | FnAccess


def as_selection(value: Any) -> Selection:
    """Convert a caller's list/tuple or mapping into a tagged selection."""
    match value:
        case NameList() | AliasMap():
            return value
        case str() | bytes():
            raise SelectionError(f"selection must be a list of names or a mapping, not {value!r}")
        case Mapping():
            return AliasMap(entries=dict(value))
        case list() | tuple():
            return NameList(names=tuple(value))
        case _:
            raise SelectionError(
                f"selection must be a list of names or a mapping, got {type(value).__name__}"
            )


def normalize(selection: Selection) -> list[Entry]:
    """Flatten a selection into ordered (exposed name, access) entries."""
    match selection:
        case NameList(names=names):
            return [Entry(exposed_name=name, access=NameAccess(name=name)) for name in names]
        case AliasMap(entries=entries):
            return [
                Entry(
                    exposed_name=alias,
                    access=NameAccess(name=target) if isinstance(target, str) else FnAccess(fn=target),
                )
                for alias, target in entries.items()
            ]
        case _:
            raise SelectionError(f"unsupported selection {selection!r}")


def names_only(selection: Selection, *, helper: str) -> list[tuple[str, str]]:
    """Normalize a selection that may only reference members by name.

    Returns ``(exposed_name, member_name)`` pairs in selection order.
    """
    pairs: list[tuple[str, str]] = []
    for entry in normalize(selection):
        match entry.access:
            case NameAccess(name=name):
                pairs.append((entry.exposed_name, name))
            case FnAccess():
                raise SelectionError(
                    f"{helper}() only accepts member names; {entry.exposed_name!r} maps to a function"
                )
    return pairs
