"""Update server query service."""

import logging
from typing import List, Optional

from core.exceptions import TargetGroupNotFoundError
from core.interfaces.update_server_interface import IUpdateServerClient
from core.models.update import UpdateRecord, UpdateScope


class UpdateQueryService:
    """Builds the update scope and retrieves matching updates."""

    def __init__(self, client: IUpdateServerClient):
        self.client = client
        self.logger = logging.getLogger(__name__)

    async def connect(self) -> None:
        await self.client.connect()

    async def build_scope(self, target_group: Optional[str] = None) -> UpdateScope:
        """Build a scope of approved updates, optionally for one target group.

        Raises:
            TargetGroupNotFoundError: If ``target_group`` matches no server group
        """
        if not target_group:
            self.logger.info("Selecting approved updates for all target groups")
            return UpdateScope(approved_only=True)

        groups = await self.client.list_target_groups()
        matches = [g for g in groups if g.name == target_group]
        if not matches:
            available = [g.name for g in groups]
            self.logger.critical(f"Target group not found: {target_group}")
            self.logger.info(f"Available target groups: {', '.join(available)}")
            raise TargetGroupNotFoundError(target_group, available)

        self.logger.info(f"Selecting approved updates for target group {target_group}")
        return UpdateScope(
            approved_only=True,
            target_group_ids=tuple(g.id for g in matches),
        )

    async def get_updates(self, scope: UpdateScope) -> List[UpdateRecord]:
        """Retrieve all updates matching ``scope``."""
        restriction = (
            f"{len(scope.target_group_ids)} target group(s)"
            if scope.is_group_restricted
            else "all target groups"
        )
        self.logger.info(f"Querying update server for {restriction}, this may take a while")
        updates = await self.client.query_updates(scope)
        self.logger.info(f"Update server returned {len(updates)} updates")
        return updates
