"""Image servicing service implementation."""

import asyncio
import logging
from typing import Dict, List, Optional

from core.exceptions import CommandExecutionError, ImageStateError, MountError
from core.interfaces.imaging_interface import IImagingTool
from core.models.image import ImageHandle, PackageApplicability, PackageResult
from core.models.update import InstallableFile
from infrastructure.dism.output_parser import DismOutputParser


class ImageServicingService:
    """Mounts an image, applies packages to it and finalizes the session."""

    def __init__(
        self,
        imaging_tool: IImagingTool,
        parser: Optional[DismOutputParser] = None,
        mount_grace_seconds: float = 10,
        log_file: Optional[str] = None,
    ):
        self.imaging_tool = imaging_tool
        self.parser = parser or DismOutputParser()
        self.mount_grace_seconds = mount_grace_seconds
        self.log_file = log_file
        self.logger = logging.getLogger(__name__)

    def _log_hint(self) -> str:
        return f", see {self.log_file} for details" if self.log_file else ""

    async def _is_mounted(self, handle: ImageHandle) -> bool:
        lines = await self.imaging_tool.get_mounted_images()
        return self.parser.is_mounted(lines, handle.mount_dir)

    async def mount(self, handle: ImageHandle) -> None:
        """Mount the image unless it is already mounted at its directory.

        Raises:
            MountError: If the mount did not take effect
        """
        if await self._is_mounted(handle):
            self.logger.warning(
                f"An image is already mounted at {handle.mount_dir}, reusing it"
            )
            await asyncio.sleep(self.mount_grace_seconds)
            handle.mark_mounted(reused=True)
            return

        self.logger.info(f"Mounting {handle.image_path} at {handle.mount_dir}")
        try:
            await self.imaging_tool.mount_image(
                handle.image_path, handle.mount_dir, handle.index
            )
        except CommandExecutionError as e:
            raise MountError(f"Failed to mount {handle.image_path}: {e}") from e

        if not await self._is_mounted(handle):
            self.logger.critical(
                f"Failed to mount {handle.image_path} at {handle.mount_dir}{self._log_hint()}"
            )
            raise MountError(f"Failed to mount {handle.image_path}")

        handle.mark_mounted()
        self.logger.info("Image mounted")

    async def apply_package(
        self, handle: ImageHandle, package: InstallableFile
    ) -> PackageResult:
        """Classify one package and add it to the image if it applies."""
        result = PackageResult(path=package.path, title=package.title)

        try:
            info = await self.imaging_tool.get_package_info(handle.mount_dir, package.path)
        except CommandExecutionError as e:
            result.error_message = str(e)
            self.logger.warning(f"Could not query {package.path}: {e}")
            return result

        result.applicability = self.parser.classify_package(info)

        if result.applicability == PackageApplicability.NOT_APPLICABLE:
            self.logger.info(f"Not applicable: {package.title}")
            return result
        if result.applicability == PackageApplicability.ALREADY_INSTALLED:
            self.logger.info(f"Already installed: {package.title}")
            return result
        if result.applicability == PackageApplicability.OFFLINE_UNSUPPORTED:
            self.logger.warning(
                f"Cannot be installed offline, skipping: {package.title}"
            )
            return result

        self.logger.info(f"Installing {package.title} from {package.path}")
        result.attempted = True
        try:
            output = await self.imaging_tool.add_package(handle.mount_dir, package.path)
        except CommandExecutionError as e:
            result.error_message = str(e)
            self.logger.warning(f"Failed to install {package.title}: {e}")
            return result

        result.success = self.parser.operation_succeeded(output)
        if result.success:
            self.logger.info(f"Installed {package.title}")
        else:
            result.error_message = "Add-Package did not report success"
            self.logger.warning(
                f"Failed to install {package.title}{self._log_hint()}"
            )
        return result

    async def apply_packages(
        self, handle: ImageHandle, installables: Dict[str, str]
    ) -> List[PackageResult]:
        """Apply every resolved package; one failure does not stop the rest."""
        results = []
        for path, title in installables.items():
            results.append(
                await self.apply_package(handle, InstallableFile(path=path, title=title))
            )

        applied = len([r for r in results if r.success])
        self.logger.info(f"Packages: {applied}/{len(results)} installed")
        return results

    async def finalize(self, handle: ImageHandle, discard: bool = False) -> bool:
        """Unmount the image, committing or discarding all changes.

        Returns:
            True if the imaging tool reported success
        """
        if not handle.is_mounted:
            raise ImageStateError(
                f"Cannot unmount image in {handle.state.value} state"
            )

        action = "Discarding" if discard else "Committing"
        self.logger.info(f"{action} changes and unmounting {handle.mount_dir}")

        try:
            output = await self.imaging_tool.unmount_image(
                handle.mount_dir, commit=not discard
            )
        except CommandExecutionError as e:
            self.logger.error(f"Failed to unmount {handle.mount_dir}: {e}")
            return False

        if discard:
            handle.mark_discarded()
        else:
            handle.mark_committed()

        success = self.parser.operation_succeeded(output)
        if success:
            self.logger.info("Image unmounted")
        else:
            self.logger.error(
                f"Unmount of {handle.mount_dir} did not report success{self._log_hint()}"
            )
        return success
