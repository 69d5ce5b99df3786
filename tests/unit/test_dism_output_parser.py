"""Unit tests for DismOutputParser."""

import pytest

from core.models.image import PackageApplicability
from infrastructure.dism.output_parser import DismOutputParser


PACKAGE_INFO_PENDING = [
    "Deployment Image Servicing and Management tool",
    "Version: 10.0.20348.681",
    "",
    "Image Version: 10.0.20348.1",
    "",
    "Package information:",
    "Package Identity : Package_for_RollupFix~31bf3856ad364e35~amd64~~20348.1547.1.6",
    "Applicable : Yes",
    "Copyright : Microsoft Corporation",
    "Company : Microsoft Corporation",
    "State : Not Present",
    "Install Time : ",
    "Completely offline capable : Yes",
    "Restart Required : Possible",
    "",
    "The operation completed successfully.",
]


def _without(lines, marker):
    return [line for line in lines if line != marker]


def _replace(lines, old, new):
    return [new if line == old else line for line in lines]


class TestPackageClassification:
    """Test cases for package applicability classification."""

    def setup_method(self):
        self.parser = DismOutputParser()

    def test_applicable_package(self):
        assert self.parser.classify_package(PACKAGE_INFO_PENDING) == PackageApplicability.APPLICABLE

    def test_not_applicable_without_marker(self):
        lines = _replace(PACKAGE_INFO_PENDING, "Applicable : Yes", "Applicable : No")
        assert self.parser.classify_package(lines) == PackageApplicability.NOT_APPLICABLE

    def test_not_applicable_takes_precedence(self):
        lines = _without(PACKAGE_INFO_PENDING, "Applicable : Yes")
        lines = _without(lines, "Completely offline capable : Yes")
        assert self.parser.classify_package(lines) == PackageApplicability.NOT_APPLICABLE

    def test_install_time_with_value_means_already_installed(self):
        lines = _replace(
            PACKAGE_INFO_PENDING, "Install Time : ", "Install Time : 1/10/2023 9:14 AM"
        )
        assert self.parser.classify_package(lines) == PackageApplicability.ALREADY_INSTALLED

    def test_already_installed_takes_precedence_over_offline_check(self):
        lines = _without(PACKAGE_INFO_PENDING, "Install Time : ")
        lines = _without(lines, "Completely offline capable : Yes")
        assert self.parser.classify_package(lines) == PackageApplicability.ALREADY_INSTALLED

    def test_offline_unsupported(self):
        lines = _replace(
            PACKAGE_INFO_PENDING,
            "Completely offline capable : Yes",
            "Completely offline capable : No",
        )
        assert self.parser.classify_package(lines) == PackageApplicability.OFFLINE_UNSUPPORTED

    def test_markers_must_match_whole_line(self):
        lines = _replace(PACKAGE_INFO_PENDING, "Applicable : Yes", "  Applicable : Yes")
        assert self.parser.classify_package(lines) == PackageApplicability.NOT_APPLICABLE

    def test_empty_output_is_not_applicable(self):
        assert self.parser.classify_package([]) == PackageApplicability.NOT_APPLICABLE


class TestOperationResult:
    """Test cases for success detection."""

    def setup_method(self):
        self.parser = DismOutputParser()

    def test_success_line(self):
        assert self.parser.operation_succeeded(PACKAGE_INFO_PENDING)

    def test_error_output(self):
        lines = [
            "Processing 1 of 1 - Adding package Package_for_KB5022842",
            "An error occurred - Package_for_KB5022842 Error: 0x800f081e",
            "Error: 0x800f081e",
            "The DISM log file can be found at C:\\Windows\\Logs\\DISM\\dism.log",
        ]
        assert not self.parser.operation_succeeded(lines)


class TestMountedImages:
    """Test cases for /Get-MountedWimInfo parsing."""

    MOUNTED = [
        "Deployment Image Servicing and Management tool",
        "",
        "Mounted images:",
        "",
        "Mount Dir : D:\\Mount",
        "Image File : D:\\VMs\\base.vhdx",
        "Image Index : 1",
        "Mounted Read/Write : Yes",
        "Status : Ok",
        "",
        "The operation completed successfully.",
    ]

    def setup_method(self):
        self.parser = DismOutputParser()

    def test_mounted_dirs(self):
        assert self.parser.mounted_dirs(self.MOUNTED) == ["D:\\Mount"]

    def test_is_mounted(self):
        assert self.parser.is_mounted(self.MOUNTED, "D:\\Mount")

    def test_other_directory_not_mounted(self):
        assert not self.parser.is_mounted(self.MOUNTED, "D:\\Other")

    def test_no_images(self):
        lines = ["Mounted images:", "", "No mounted images found."]
        assert self.parser.mounted_dirs(lines) == []
        assert not self.parser.is_mounted(lines, "D:\\Mount")


if __name__ == "__main__":
    pytest.main([__file__])
