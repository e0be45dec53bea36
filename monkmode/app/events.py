from __future__ import annotations

"""Tiny pub/sub event bus used to hand session summaries to their consumers."""

from typing import Any, Callable, Dict, List


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        handlers = self._subs.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any) -> int:
        """Deliver payload to every subscriber; returns how many succeeded."""
        delivered = 0
        for h in list(self._subs.get(event, [])):
            try:
                h(payload)
            except Exception as exc:
                # keep going; one broken consumer must not block the others
                print(f"WARNING: handler for '{event}' failed: {exc!r}")
                continue
            delivered += 1
        return delivered
