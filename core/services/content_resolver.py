"""Maps update file references to packages in the local content store."""

import logging
import os
import re
from typing import Callable, Dict, Iterable
from urllib.parse import unquote, urlparse

from core.models.update import InstallableFileRef, UpdateRecord


class ContentResolver:
    """Resolves installable file references to existing local package paths."""

    def __init__(
        self,
        content_root: str,
        extension: str = ".cab",
        content_segment: str = "/Content",
        exists: Callable[[str], bool] = os.path.exists,
    ):
        self.content_root = content_root
        self.extension = extension.lower()
        self.content_segment = content_segment
        self.exists = exists
        self.logger = logging.getLogger(__name__)
        self._segment_pattern = re.compile(re.escape(content_segment), re.IGNORECASE)

    def is_package(self, file_ref: InstallableFileRef) -> bool:
        """Check if the reference points at a package in the tracked format."""
        return urlparse(file_ref.uri).path.lower().endswith(self.extension)

    def to_local_path(self, file_ref: InstallableFileRef) -> str:
        """Rewrite a server file URI into a path under the content root."""
        uri_path = unquote(urlparse(file_ref.uri).path)
        local = self._segment_pattern.sub(
            lambda _: self.content_root, uri_path, count=1
        )
        return local.replace("/", os.sep)

    def resolve(self, updates: Iterable[UpdateRecord]) -> Dict[str, str]:
        """Collect existing packages referenced by ``updates``.

        Returns:
            Mapping of local package path to the title of the first update
            that referenced it
        """
        installables: Dict[str, str] = {}

        for update in updates:
            for file_ref in update.files:
                if not self.is_package(file_ref):
                    continue

                path = self.to_local_path(file_ref)
                if path in installables:
                    self.logger.debug(
                        f"Skipping duplicate package {path} referenced by {update.title}"
                    )
                    continue

                if not self.exists(path):
                    self.logger.debug(f"Package not found in content store: {path}")
                    continue

                installables[path] = update.title

        self.logger.info(f"Resolved {len(installables)} installable packages")
        return installables

