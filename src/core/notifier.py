"""
Change notifications emitted by the player.

Listeners are registered per PlayerEvent and called synchronously, in
registration order, from whatever task or thread triggered the change.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from core.interfaces import PlayerEvent

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """
    Typed event emitter for player and queue changes.

    Coroutine listeners are scheduled on the running loop instead of being
    awaited. A failing listener is logged and does not prevent delivery to
    the others.
    """

    __slots__ = ('_listeners', '_once_listeners', '_pending')

    def __init__(self):
        self._listeners: Dict[PlayerEvent, List[Callable]] = defaultdict(list)
        self._once_listeners: Dict[PlayerEvent, List[Callable]] = defaultdict(list)
        self._pending = set()

    def on(self, event: PlayerEvent, listener: Callable) -> None:
        """Register a persistent listener."""
        self._listeners[event].append(listener)

    def once(self, event: PlayerEvent, listener: Callable) -> None:
        """Register a listener removed after its first call."""
        self._once_listeners[event].append(listener)

    def off(self, event: PlayerEvent, listener: Optional[Callable] = None) -> None:
        """Remove one listener, or every listener for event."""
        if listener is None:
            self._listeners.pop(event, None)
            self._once_listeners.pop(event, None)
            return

        for registry in (self._listeners, self._once_listeners):
            if listener in registry.get(event, []):
                registry[event].remove(listener)

    def emit(self, event: PlayerEvent, *args: Any) -> None:
        listeners = self._listeners.get(event, []) + self._once_listeners.pop(event, [])

        for listener in listeners:
            try:
                if inspect.iscoroutinefunction(listener):
                    task = asyncio.get_running_loop().create_task(listener(*args))
                    self._pending.add(task)
                    task.add_done_callback(self._pending.discard)
                else:
                    listener(*args)
            except Exception as e:
                logger.error(f"Error in listener for '{event.value}': {e}", exc_info=True)

    def listener_count(self, event: PlayerEvent) -> int:
        return len(self._listeners.get(event, [])) + len(self._once_listeners.get(event, []))

    def remove_all_listeners(self) -> None:
        self._listeners.clear()
        self._once_listeners.clear()
