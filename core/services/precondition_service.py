import logging
from pathlib import Path
from typing import Dict, List

from core.exceptions import PreconditionError
from core.models.config import RunConfig


class PreconditionService:
    """Checks required paths before anything touches the image."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def _handle_error(self, failures: List[str]) -> None:
        """Centralized error handling."""
        for failure in failures:
            self.logger.critical(failure)
        raise PreconditionError(failures)

    def collect_failures(self, config: RunConfig) -> List[str]:
        """Return one message per missing path or library."""
        failures = []

        required_paths: Dict[str, str] = {
            "Image file": config.image_path,
            "Mount directory": config.mount_dir,
            "Content root": config.content_root,
        }
        for label, path in required_paths.items():
            if not Path(path).exists():
                failures.append(f"{label} not found: {path}")

        if not Path(config.admin_library_path).is_file():
            failures.append(
                f"WSUS administration library not found: {config.admin_library_path}"
            )

        return failures

    def check(self, config: RunConfig) -> None:
        """Verify all preconditions.

        Raises:
            PreconditionError: If any required path is missing
        """
        self.logger.info("Checking preconditions")
        failures = self.collect_failures(config)
        if failures:
            self._handle_error(failures)
        self.logger.info("Preconditions passed")
