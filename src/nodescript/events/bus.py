from __future__ import annotations

import logging
from collections import defaultdict
from threading import RLock
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class HostEvent:
    """Channel names for callbacks the script engine makes into the host.

    Payloads are passed as keyword arguments.
    """

    MESSAGE = "message"  # text
    PLAY_SOUND = "play_sound"  # sound_id
    ROOM_MUSIC_CHANGED = "room_music_changed"  # room_id, music_id
    PLAYER_TELEPORTED = "player_teleported"  # room_id
    START_CONVERSATION = "start_conversation"  # npc_id
    START_COMBAT = "start_combat"  # npc_id
    START_TRADE = "start_trade"  # npc_id
    ADVENTURE_COMPLETED = "adventure_completed"
    DIAGNOSTIC = "diagnostic"  # text

    ALL = (
        MESSAGE,
        PLAY_SOUND,
        ROOM_MUSIC_CHANGED,
        PLAYER_TELEPORTED,
        START_CONVERSATION,
        START_COMBAT,
        START_TRADE,
        ADVENTURE_COMPLETED,
        DIAGNOSTIC,
    )


class EventBus:
    """Fan-out of host callbacks, keyed by ``HostEvent`` channel.

    A subscriber that raises is logged and reported on the ``diagnostic``
    channel; the other subscribers and the running walk carry on.
    """

    def __init__(self) -> None:
        self._channels: Dict[str, List[Callable[..., Any]]] = defaultdict(list)
        self._lock = RLock()

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        if event not in HostEvent.ALL:
            raise ValueError(f"Unknown host event channel: {event!r}")
        with self._lock:
            subscribers = self._channels[event]
            if handler not in subscribers:
                subscribers.append(handler)

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        with self._lock:
            subscribers = self._channels.get(event, [])
            if handler in subscribers:
                subscribers.remove(handler)

    def clear(self) -> None:
        with self._lock:
            self._channels.clear()

    def has_subscribers(self, event: str) -> bool:
        with self._lock:
            return bool(self._channels.get(event))

    def emit(self, event: str, **payload: Any) -> List[Any]:
        """Call every subscriber of ``event`` and return their results."""
        with self._lock:
            subscribers = tuple(self._channels.get(event, ()))
        logger.debug("Host callback '%s' to %d subscriber(s): %s", event, len(subscribers), payload)
        results: List[Any] = []
        failures: List[str] = []
        for subscriber in subscribers:
            try:
                results.append(subscriber(**payload))
            except Exception as exc:
                logger.exception("Host subscriber %r failed on '%s': %s", subscriber, event, exc)
                failures.append(f"[Host error] {event}: {type(exc).__name__}: {exc}")
        # a broken diagnostic subscriber is only logged
        if event != HostEvent.DIAGNOSTIC:
            for text in failures:
                self.emit(HostEvent.DIAGNOSTIC, text=text)
        return results
