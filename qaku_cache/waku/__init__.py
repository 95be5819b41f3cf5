"""Waku bus adapter module."""

from .relay_source import IBusSource, WakuRelaySource

__all__ = ["IBusSource", "WakuRelaySource"]
