"""EventBus module."""

from .event_bus import DeliveryHandler, EventBus, IEventBus

__all__ = ["DeliveryHandler", "EventBus", "IEventBus"]
