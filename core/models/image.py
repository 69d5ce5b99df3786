"""Image servicing data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.exceptions import ImageStateError


class ImageState(Enum):
    """Lifecycle of a mounted image."""
    UNMOUNTED = "unmounted"
    MOUNTED = "mounted"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class PackageApplicability(Enum):
    """Classification of a package against the mounted image."""
    NOT_APPLICABLE = "not_applicable"
    ALREADY_INSTALLED = "already_installed"
    OFFLINE_UNSUPPORTED = "offline_unsupported"
    APPLICABLE = "applicable"


@dataclass
class ImageHandle:
    """Disk image identified by its mount directory."""

    image_path: str
    mount_dir: str
    index: int = 1
    state: ImageState = ImageState.UNMOUNTED
    reused_mount: bool = False
    mounted_at: Optional[datetime] = None

    @property
    def is_mounted(self) -> bool:
        """Check if the image is mounted and not yet finalized."""
        return self.state == ImageState.MOUNTED

    @property
    def is_finalized(self) -> bool:
        """Check if the session was committed or discarded."""
        return self.state in [ImageState.COMMITTED, ImageState.DISCARDED]

    def mark_mounted(self, reused: bool = False) -> None:
        """Mark image as mounted."""
        if self.state != ImageState.UNMOUNTED:
            raise ImageStateError(
                f"Cannot mount image in {self.state.value} state"
            )
        self.state = ImageState.MOUNTED
        self.reused_mount = reused
        self.mounted_at = datetime.utcnow()

    def mark_committed(self) -> None:
        """Mark image changes as committed."""
        self._require_mounted("commit")
        self.state = ImageState.COMMITTED

    def mark_discarded(self) -> None:
        """Mark image changes as discarded."""
        self._require_mounted("discard")
        self.state = ImageState.DISCARDED

    def _require_mounted(self, action: str) -> None:
        if self.state != ImageState.MOUNTED:
            raise ImageStateError(
                f"Cannot {action} image in {self.state.value} state"
            )


@dataclass
class PackageResult:
    """Outcome of servicing one package."""

    path: str
    title: str
    applicability: Optional[PackageApplicability] = None
    attempted: bool = False
    success: bool = False
    error_message: Optional[str] = None

    @property
    def is_skipped(self) -> bool:
        """Check if the package was skipped without an add attempt."""
        return not self.attempted

    @property
    def is_failed(self) -> bool:
        """Check if an add attempt was made and failed."""
        return self.attempted and not self.success
