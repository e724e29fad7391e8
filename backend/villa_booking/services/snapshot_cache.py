"""In-process cache for public read views.

Loads are tagged with the generation of their view when they started; a load
that finishes after an invalidation or after a newer load of the same view is
not allowed to overwrite the cached value.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from villa_booking.domain.invalidation import Entity, View, views_for

logger = logging.getLogger(__name__)

T = TypeVar("T")

_lock = threading.Lock()
_values: dict[View, Any] = {}
_generations: dict[View, int] = {}
_stored_generation: dict[View, int] = {}
_invalidated_generation: dict[View, int] = {}


def _begin(view: View) -> int:
    with _lock:
        generation = _generations.get(view, 0) + 1
        _generations[view] = generation
        return generation


def _store(view: View, generation: int, value: Any) -> None:
    with _lock:
        if generation < _stored_generation.get(view, 0):
            return
        if generation <= _invalidated_generation.get(view, 0):
            # invalidated while loading
            return
        _values[view] = value
        _stored_generation[view] = generation


async def get_or_load(view: View, loader: Callable[[], Awaitable[T]]) -> T:
    """Return the cached view or load it, keeping only the latest load."""
    with _lock:
        if view in _values:
            return _values[view]
    generation = _begin(view)
    value = await loader()
    _store(view, generation, value)
    return value


def invalidate(entity: Entity | str) -> frozenset[View]:
    """Drop every view the mutated entity feeds and return them."""
    views = views_for(entity)
    with _lock:
        for view in views:
            _values.pop(view, None)
            _generations[view] = _generations.get(view, 0) + 1
            _invalidated_generation[view] = _generations[view]
    logger.debug("Invalidated views %s after %s change", sorted(v.value for v in views), entity)
    return views


def cached_views() -> frozenset[View]:
    with _lock:
        return frozenset(_values)


def clear() -> None:
    with _lock:
        _values.clear()
        _generations.clear()
        _stored_generation.clear()
        _invalidated_generation.clear()
