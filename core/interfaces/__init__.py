"""Core interfaces for offline image patching."""

from .config_interface import IConfigService
from .imaging_interface import IImagingTool
from .update_server_interface import IUpdateServerClient

__all__ = [
    'IConfigService',
    'IImagingTool',
    'IUpdateServerClient'
]
