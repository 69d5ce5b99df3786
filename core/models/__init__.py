"""Core data models for offline image patching."""

from .config import RunConfig, UpdateServerConfig, LogLevel
from .update import UpdateScope, UpdateRecord, InstallableFileRef, InstallableFile, TargetGroup
from .image import ImageHandle, ImageState, PackageApplicability, PackageResult
from .workflow import ServicingResult, WorkflowStatus

__all__ = [
    'RunConfig',
    'UpdateServerConfig',
    'LogLevel',
    'UpdateScope',
    'UpdateRecord',
    'InstallableFileRef',
    'InstallableFile',
    'TargetGroup',
    'ImageHandle',
    'ImageState',
    'PackageApplicability',
    'PackageResult',
    'ServicingResult',
    'WorkflowStatus'
]
