import os
from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


DEFAULT_WSUS_PORT = 8530
DEFAULT_ADMIN_LIBRARY_PATH = os.path.join(
    os.environ.get("ProgramFiles", r"C:\Program Files"),
    "Update Services",
    "Api",
    "Microsoft.UpdateServices.Administration.dll",
)


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class UpdateServerConfig:
    """WSUS connection settings."""
    host: str = ""
    port: int = DEFAULT_WSUS_PORT
    use_ssl: bool = False


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for a single patching run."""

    # Required paths
    image_path: str = ""
    mount_dir: str = ""
    content_root: str = ""

    # Update server
    server: UpdateServerConfig = field(default_factory=UpdateServerConfig)
    target_group: Optional[str] = None

    # Behaviour toggles
    confirm: bool = False
    discard: bool = False
    verbose: bool = False
    debug: bool = False

    # Logging
    log_file: str = "offline_patch.log"

    # Servicing settings
    image_index: int = 1
    mount_grace_seconds: float = 10
    package_extension: str = ".cab"
    content_segment: str = "/Content"

    # External tools
    admin_library_path: str = DEFAULT_ADMIN_LIBRARY_PATH
    dism_path: str = "dism.exe"
    powershell_path: str = "powershell.exe"

    @property
    def log_level(self) -> LogLevel:
        """Console log level derived from the verbose/debug toggles."""
        if self.debug:
            return LogLevel.DEBUG
        if self.verbose:
            return LogLevel.INFO
        return LogLevel.WARNING

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.image_path:
            errors.append("Image path is required")
        if not self.mount_dir:
            errors.append("Mount directory is required")
        if not self.content_root:
            errors.append("Content root path is required")
        if not self.server.host:
            errors.append("Update server name is required")

        if not 0 < self.server.port < 65536:
            errors.append(f"Update server port out of range: {self.server.port}")

        if self.image_index < 1:
            errors.append("Image index must be positive")

        if self.mount_grace_seconds < 0:
            errors.append("Mount grace period cannot be negative")

        if not self.package_extension.startswith("."):
            errors.append(
                f"Package extension must start with '.': {self.package_extension}"
            )

        return errors
