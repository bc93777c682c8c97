"""In-memory sink for events."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import Any

from scadvisor.errors import NotFoundError
from scadvisor.objutil import PatchType, patch_object


def _key(event: Mapping[str, Any]) -> tuple[str, str]:
    meta = event.get("metadata") or {}
    return meta.get("namespace", ""), meta.get("name", "")


class InMemEventSink:
    """Keeps events in memory in the order they were created."""

    def __init__(self) -> None:
        self._events: list[dict[str, Any]] = []

    def _index(self, event: Mapping[str, Any]) -> int:
        key = _key(event)
        for index, stored in enumerate(self._events):
            if _key(stored) == key:
                return index
        raise NotFoundError(f'events "{key[1]}" not found')

    def create(self, event: dict[str, Any]) -> dict[str, Any]:
        """Store the event and return it."""
        self._events.append(copy.deepcopy(event))
        return event

    def update(self, event: dict[str, Any]) -> dict[str, Any]:
        """Replace the stored event with the same namespace and name."""
        self._events[self._index(event)] = copy.deepcopy(event)
        return event

    def patch(self, old_event: Mapping[str, Any], patch: bytes | str) -> dict[str, Any]:
        """Apply a strategic merge patch to the stored event and return the result."""
        index = self._index(old_event)
        patched = copy.deepcopy(self._events[index])
        if isinstance(patch, (bytes, str)):
            data = patch
        else:
            data = json.dumps(patch)
        patch_object(patched, "/".join(_key(old_event)), PatchType.STRATEGIC_MERGE, data)
        self._events[index] = patched
        return patched

    def delete(self, event: Mapping[str, Any]) -> None:
        """Remove events with the same namespace and name."""
        key = _key(event)
        self._events = [stored for stored in self._events if _key(stored) != key]

    def list(self) -> list[dict[str, Any]]:
        """Return the stored events."""
        return list(self._events)

    def reset(self) -> None:
        """Drop all events."""
        self._events = []