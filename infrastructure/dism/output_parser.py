"""Parsers for DISM text output.

DISM has no machine-readable output mode, so its console text is the
protocol. The marker lines below are matched exactly, one line at a time.
"""

import os
from typing import Iterable, List

from core.models.image import PackageApplicability

APPLICABLE_MARKER = "Applicable : Yes"
EMPTY_INSTALL_TIME_MARKER = "Install Time : "
OFFLINE_CAPABLE_MARKER = "Completely offline capable : Yes"
SUCCESS_MARKER = "The operation completed successfully."
MOUNT_DIR_PREFIX = "Mount Dir : "


def _normalize_dir(path: str) -> str:
    return os.path.normcase(os.path.normpath(path.strip()))


class DismOutputParser:
    """Turns DISM output lines into typed results."""

    @staticmethod
    def has_line(lines: Iterable[str], marker: str) -> bool:
        """Check if any line is exactly ``marker``."""
        return any(line == marker for line in lines)

    def classify_package(self, lines: List[str]) -> PackageApplicability:
        """Classify /Get-PackageInfo output for a package.

        Checks run in a fixed order and the first failing check wins.
        """
        if not self.has_line(lines, APPLICABLE_MARKER):
            return PackageApplicability.NOT_APPLICABLE

        # An empty "Install Time" line is taken to mean "not installed yet";
        # its absence is read as already installed. This polarity looks
        # inverted but is kept as observed in production runs.
        if not self.has_line(lines, EMPTY_INSTALL_TIME_MARKER):
            return PackageApplicability.ALREADY_INSTALLED

        if not self.has_line(lines, OFFLINE_CAPABLE_MARKER):
            return PackageApplicability.OFFLINE_UNSUPPORTED

        return PackageApplicability.APPLICABLE

    def operation_succeeded(self, lines: List[str]) -> bool:
        """Check DISM output for the success line."""
        return self.has_line(lines, SUCCESS_MARKER)

    def mounted_dirs(self, lines: List[str]) -> List[str]:
        """Extract mount directories from /Get-MountedWimInfo output."""
        return [
            line[len(MOUNT_DIR_PREFIX):].strip()
            for line in lines
            if line.startswith(MOUNT_DIR_PREFIX)
        ]

    def is_mounted(self, lines: List[str], mount_dir: str) -> bool:
        """Check if ``mount_dir`` is listed as a mounted image directory."""
        target = _normalize_dir(mount_dir)
        return any(_normalize_dir(d) == target for d in self.mounted_dirs(lines))
