from .bus import EventBus, HostEvent

__all__ = ["EventBus", "HostEvent"]
