"""Imaging tool interface."""

from abc import ABC, abstractmethod
from typing import List


class IImagingTool(ABC):
    """Interface for the external tool that services mounted images.

    Every method returns the tool's raw output lines; interpreting them is
    left to the caller.
    """

    @abstractmethod
    async def get_mounted_images(self) -> List[str]:
        """List currently mounted images."""
        pass

    @abstractmethod
    async def mount_image(self, image_path: str, mount_dir: str, index: int = 1) -> List[str]:
        """Mount an image file into a directory.

        Args:
            image_path: Path to the disk image
            mount_dir: Existing empty directory to mount into
            index: Image index inside the file
        """
        pass

    @abstractmethod
    async def get_package_info(self, mount_dir: str, package_path: str) -> List[str]:
        """Query a package's status against the mounted image."""
        pass

    @abstractmethod
    async def add_package(self, mount_dir: str, package_path: str) -> List[str]:
        """Apply a package to the mounted image."""
        pass

    @abstractmethod
    async def unmount_image(self, mount_dir: str, commit: bool) -> List[str]:
        """Unmount the image, committing or discarding changes.

        Args:
            mount_dir: Mount directory of the image
            commit: True to save changes, False to discard them
        """
        pass
