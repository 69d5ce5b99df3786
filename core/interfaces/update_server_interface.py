"""Update server interface."""

from abc import ABC, abstractmethod
from typing import List
from core.models.update import TargetGroup, UpdateRecord, UpdateScope


class IUpdateServerClient(ABC):
    """Interface for the update-management server administration API."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection to the server.

        Raises:
            UpdateServerError: If the server cannot be reached
        """
        pass

    @abstractmethod
    async def list_target_groups(self) -> List[TargetGroup]:
        """Get all computer target groups defined on the server.

        Returns:
            List of TargetGroup objects
        """
        pass

    @abstractmethod
    async def query_updates(self, scope: UpdateScope) -> List[UpdateRecord]:
        """Get all updates matching a scope.

        Args:
            scope: Approval state and target group filter

        Returns:
            List of UpdateRecord objects with their installable files
        """
        pass
