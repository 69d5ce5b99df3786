"""WSUS infrastructure implementations."""

from .wsus_client import WsusClient

__all__ = [
    'WsusClient'
]
