"""Minimal lifecycle event dispatch.

Subscribers declare their handlers through ``get_subscribed_events()``:

    {"pre-install-cmd": "method"}
    {"pre-install-cmd": ("method", priority)}
    {"pre-install-cmd": [("method_a", 10), ("method_b",)]}

Handlers run by descending priority, then registration order.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from common.logging_utils import extra_context, is_debug_enabled
from manifest.root_package import RootPackage
from registry.pool import PackagePool

logger = logging.getLogger(__name__)

EventName = Union[str, Enum]


def _event_key(name: EventName) -> str:
    return name.value if isinstance(name, Enum) else str(name)


@dataclass
class PluginEvent:
    """Event handed to subscribers.

    ``pool`` is set by hooks that run with a resolution pool at hand;
    command-level hooks leave it empty.
    """
    name: str
    root: RootPackage
    pool: Optional[PackagePool] = None


class EventDispatcher:
    """Dispatches lifecycle events to registered listeners."""

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[int, int, Callable[[PluginEvent], Any]]]] = {}
        self._sequence = itertools.count()

    def add_listener(self, event_name: EventName, listener: Callable[[PluginEvent], Any], priority: int = 0) -> None:
        key = _event_key(event_name)
        self._listeners.setdefault(key, []).append((priority, next(self._sequence), listener))

    def add_subscriber(self, subscriber: Any) -> None:
        """Register every handler ``subscriber`` declares."""
        for event_name, params in subscriber.get_subscribed_events().items():
            if isinstance(params, str):
                self.add_listener(event_name, getattr(subscriber, params))
            elif isinstance(params, tuple):
                self.add_listener(event_name, getattr(subscriber, params[0]), *params[1:2])
            else:
                for entry in params:
                    self.add_listener(event_name, getattr(subscriber, entry[0]), *entry[1:2])

    def listeners(self, event_name: EventName) -> List[Callable[[PluginEvent], Any]]:
        entries = sorted(self._listeners.get(_event_key(event_name), []), key=lambda e: (-e[0], e[1]))
        return [listener for _, _, listener in entries]

    def dispatch(self, event_name: EventName, event: PluginEvent) -> List[Any]:
        """Call every listener for ``event_name`` and collect their return values."""
        key = _event_key(event_name)
        listeners = self.listeners(key)
        if is_debug_enabled(logger):
            logger.debug(
                "Dispatching event",
                extra=extra_context(
                    event="dispatch",
                    component="events",
                    action=key,
                    count=len(listeners),
                )
            )
        return [listener(event) for listener in listeners]
