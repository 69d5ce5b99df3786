"""DISM command-line client for offline image servicing."""

from typing import List, Optional

from core.interfaces.imaging_interface import IImagingTool
from core.utils.logger import get_infrastructure_logger
from infrastructure.shell.command_runner import CommandResult, CommandRunner


class DismClient(IImagingTool):
    """Thin wrapper around dism.exe commands."""

    def __init__(
        self,
        dism_path: str = "dism.exe",
        runner: Optional[CommandRunner] = None,
    ):
        self.dism_path = dism_path
        self.runner = runner or CommandRunner()
        self.logger = get_infrastructure_logger(__name__)

    async def _dism(self, *args: str) -> CommandResult:
        result = await self.runner.run([self.dism_path, *args])
        if not result.succeeded:
            self.logger.debug(
                f"dism {args[0]} returned exit code {result.returncode}"
            )
        return result

    async def get_mounted_images(self) -> List[str]:
        result = await self._dism("/Get-MountedWimInfo")
        return result.lines

    async def mount_image(self, image_path: str, mount_dir: str, index: int = 1) -> List[str]:
        result = await self._dism(
            "/Mount-Image",
            f"/ImageFile:{image_path}",
            f"/Index:{index}",
            f"/MountDir:{mount_dir}",
        )
        return result.lines

    async def get_package_info(self, mount_dir: str, package_path: str) -> List[str]:
        result = await self._dism(
            f"/Image:{mount_dir}", "/Get-PackageInfo", f"/PackagePath:{package_path}"
        )
        return result.lines

    async def add_package(self, mount_dir: str, package_path: str) -> List[str]:
        result = await self._dism(
            f"/Image:{mount_dir}", "/Add-Package", f"/PackagePath:{package_path}"
        )
        return result.lines

    async def unmount_image(self, mount_dir: str, commit: bool) -> List[str]:
        mode = "/Commit" if commit else "/Discard"
        result = await self._dism("/Unmount-Image", f"/MountDir:{mount_dir}", mode)
        return result.lines
