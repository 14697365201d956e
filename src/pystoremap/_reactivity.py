"""Minimal reactivity core.

Three kinds of nodes take part in dependency tracking:

* :class:`Ref` holds a value and notifies its subscribers when it changes.
* :class:`Computed` memoizes a derived value. It is invalidated eagerly
  (marked dirty) but recomputed lazily, on the next read.
* :class:`Effect` re-runs a side effect. It is never re-run inline: a
  dependency change queues it on a :class:`Scheduler`, and the queue is
  drained by :meth:`Scheduler.flush` (or :func:`next_tick` for the default
  scheduler).

Everything here is single-threaded. Dependencies are re-collected every
time a computed value or an effect runs.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator
from typing import Any, Generic, Protocol, TypeVar

from pystoremap.exceptions import ReactiveRecursionError

T = TypeVar("T")

# Upper bound on how often one effect may run within a single flush.
_MAX_EFFECT_RUNS_PER_FLUSH = 100

_IMMUTABLE_SCALARS = (str, bytes, int, float, bool, complex, type(None))


class _Observer(Protocol):
    _deps: dict[_Dep, None]

    def _notify(self) -> None: ...


# Stack of observers currently collecting dependencies. ``None`` entries
# come from :func:`untracked` and suspend collection.
_tracking: list[_Observer | None] = []


class _Dep:
    """Subscriber set of a single reactive source (insertion ordered)."""

    __slots__ = ("subscribers",)

    def __init__(self) -> None:
        self.subscribers: dict[_Observer, None] = {}

    def track(self) -> None:
        observer = _tracking[-1] if _tracking else None
        if observer is None:
            return
        self.subscribers[observer] = None
        observer._deps[self] = None

    def trigger(self) -> None:
        for observer in list(self.subscribers):
            observer._notify()


def _cleanup(observer: _Observer) -> None:
    for dep in observer._deps:
        dep.subscribers.pop(observer, None)
    observer._deps.clear()


def _run_tracked(observer: _Observer, fn: Callable[[], T]) -> T:
    _cleanup(observer)
    _tracking.append(observer)
    try:
        return fn()
    finally:
        _tracking.pop()


def _has_changed(old: Any, new: Any) -> bool:
    if new is old:
        return False
    # Containers and arbitrary objects compare by identity only; in-place
    # mutation is not observed.
    if type(new) is type(old) and isinstance(new, _IMMUTABLE_SCALARS):
        if new != new and old != old:
            # NaN never equals itself.
            return False
        return bool(new != old)
    return True


@contextlib.contextmanager
def untracked() -> Iterator[None]:
    """Suspend dependency collection for reads inside the block."""
    _tracking.append(None)
    try:
        yield
    finally:
        _tracking.pop()


class Ref(Generic[T]):
    """A reactive value."""

    __slots__ = ("_value", "_dep")

    def __init__(self, value: T) -> None:
        self._value = value
        self._dep = _Dep()

    @property
    def value(self) -> T:
        self._dep.track()
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if not _has_changed(self._value, new_value):
            return
        self._value = new_value
        self._dep.trigger()

    def peek(self) -> T:
        """Read the value without tracking it."""
        return self._value

    def __repr__(self) -> str:
        return f"Ref({self._value!r})"


class Computed(Generic[T]):
    """A lazily recomputed, memoized derived value.

    ``getter`` runs at most once per invalidation: any number of reads in
    between return the cached result. An optional ``setter`` makes the
    value assignable; it is expected to write to some upstream :class:`Ref`.
    """

    __slots__ = ("_getter", "_setter", "_dep", "_deps", "_dirty", "_value")

    def __init__(
        self,
        getter: Callable[[], T],
        setter: Callable[[T], None] | None = None,
    ) -> None:
        self._getter = getter
        self._setter = setter
        self._dep = _Dep()
        self._deps: dict[_Dep, None] = {}
        self._dirty = True
        self._value: T | None = None

    def _notify(self) -> None:
        # Only the clean -> dirty transition is propagated; a computed
        # that is already stale has told its subscribers.
        if self._dirty:
            return
        self._dirty = True
        self._dep.trigger()

    @property
    def value(self) -> T:
        if self._dirty:
            self._value = _run_tracked(self, self._getter)
            self._dirty = False
        self._dep.track()
        return self._value  # type: ignore[return-value]

    @value.setter
    def value(self, new_value: T) -> None:
        if self._setter is None:
            raise AttributeError("computed value is read-only")
        self._setter(new_value)

    @property
    def writable(self) -> bool:
        return self._setter is not None

    def stop(self) -> None:
        """Unsubscribe from all dependencies; the next read recomputes."""
        _cleanup(self)
        self._dirty = True

    @property
    def dirty(self) -> bool:
        return self._dirty


class Effect:
    """A side effect that re-runs, via a scheduler, when its dependencies change."""

    __slots__ = ("_fn", "_scheduler", "_deps", "active")

    def __init__(self, fn: Callable[[], Any], scheduler: Scheduler | None = None) -> None:
        self._fn = fn
        self._scheduler = scheduler if scheduler is not None else _default_scheduler
        self._deps: dict[_Dep, None] = {}
        self.active = True
        self.run()

    def run(self) -> None:
        if not self.active:
            return
        _run_tracked(self, self._fn)

    def _notify(self) -> None:
        if self.active:
            self._scheduler.queue(self)

    def stop(self) -> None:
        self.active = False
        _cleanup(self)


class Scheduler:
    """FIFO queue of pending effects, drained on :meth:`flush`.

    An effect queued several times before a flush runs once.
    """

    def __init__(self) -> None:
        self._queue: dict[Effect, None] = {}
        self._flushing = False

    @property
    def pending(self) -> int:
        return len(self._queue)

    def queue(self, effect: Effect) -> None:
        self._queue[effect] = None

    def flush(self) -> None:
        if self._flushing:
            return
        self._flushing = True
        runs: dict[Effect, int] = {}
        try:
            while self._queue:
                effect = next(iter(self._queue))
                del self._queue[effect]
                runs[effect] = runs.get(effect, 0) + 1
                if runs[effect] > _MAX_EFFECT_RUNS_PER_FLUSH:
                    self._queue.clear()
                    raise ReactiveRecursionError(
                        f"effect re-triggered itself more than {_MAX_EFFECT_RUNS_PER_FLUSH} times"
                    )
                effect.run()
        finally:
            self._flushing = False

    def clear(self) -> None:
        """Drop all pending effects without running them."""
        self._queue.clear()


_default_scheduler = Scheduler()


def get_scheduler() -> Scheduler:
    """Return the process-wide default scheduler."""
    return _default_scheduler


def next_tick() -> None:
    """Flush the default scheduler."""
    _default_scheduler.flush()
