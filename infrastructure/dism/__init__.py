"""DISM infrastructure implementations."""

from .dism_client import DismClient
from .output_parser import DismOutputParser

__all__ = [
    'DismClient',
    'DismOutputParser'
]
