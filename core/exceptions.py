"""Exception hierarchy for offline image patching.

Fatal conditions (bad configuration, missing prerequisites, an unknown target
group, a failed mount) are raised as subclasses of PatchingError and stop the
run. Per-package problems are never raised; they are recorded on the
PackageResult instead.
"""

from typing import List, Optional


class PatchingError(Exception):
    """Base exception for all patching errors."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        self.message = message
        self.remediation = remediation
        super().__init__(self.message)


class ConfigurationError(PatchingError):
    """Raised when the run configuration is missing or invalid."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        super().__init__(message)


class PreconditionError(PatchingError):
    """Raised when a required path or the WSUS admin library is missing."""

    def __init__(self, failures: List[str]):
        self.failures = failures
        super().__init__(
            f"Precondition check failed: {'; '.join(failures)}",
            remediation="Fix the listed paths and run again",
        )


class UpdateServerError(PatchingError):
    """Raised when the update server cannot be reached or queried."""

    pass


class TargetGroupNotFoundError(UpdateServerError):
    """Raised when a target group name does not match any server group."""

    def __init__(self, group_name: str, available: Optional[List[str]] = None):
        self.group_name = group_name
        self.available = available or []
        super().__init__(f"Target group not found: {group_name}")


class CommandExecutionError(PatchingError):
    """Raised when an external command cannot be started."""

    pass


class MountError(PatchingError):
    """Raised when the image could not be mounted."""

    pass


class ImageStateError(PatchingError):
    """Raised on an invalid image lifecycle transition."""

    pass
