"""Unit tests for UpdateQueryService."""

import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from core.exceptions import TargetGroupNotFoundError
from core.interfaces.update_server_interface import IUpdateServerClient
from core.models.update import TargetGroup, UpdateRecord, UpdateScope
from core.services.update_query_service import UpdateQueryService


GROUPS = [
    TargetGroup(id="a0a08746-4dbe-4a37-9adf-9e7652c0b421", name="All Computers"),
    TargetGroup(id="b73ca6ed-5727-47f3-84de-015e03f6a88a", name="Server Images"),
]


class TestUpdateQueryService:
    """Test cases for UpdateQueryService."""

    def setup_method(self):
        self.client = Mock(spec=IUpdateServerClient)
        self.client.connect = AsyncMock()
        self.client.list_target_groups = AsyncMock(return_value=GROUPS)
        self.client.query_updates = AsyncMock(return_value=[])
        self.service = UpdateQueryService(self.client)

    def test_scope_without_group(self):
        scope = asyncio.run(self.service.build_scope(None))

        assert scope == UpdateScope(approved_only=True)
        assert not scope.is_group_restricted
        self.client.list_target_groups.assert_not_awaited()

    def test_scope_with_group(self):
        scope = asyncio.run(self.service.build_scope("Server Images"))

        assert scope.approved_only
        assert scope.target_group_ids == ("b73ca6ed-5727-47f3-84de-015e03f6a88a",)

    def test_group_match_is_exact(self):
        with pytest.raises(TargetGroupNotFoundError) as exc_info:
            asyncio.run(self.service.build_scope("server images"))

        assert exc_info.value.group_name == "server images"
        assert "Server Images" in exc_info.value.available

    def test_unknown_group_never_queries(self):
        with pytest.raises(TargetGroupNotFoundError):
            asyncio.run(self.service.build_scope("Workstations"))

        self.client.query_updates.assert_not_awaited()

    def test_get_updates_passes_scope(self):
        update = UpdateRecord(update_id="1", title="KB5022842")
        self.client.query_updates = AsyncMock(return_value=[update])
        scope = UpdateScope(target_group_ids=("b73ca6ed",))

        updates = asyncio.run(self.service.get_updates(scope))

        self.client.query_updates.assert_awaited_once_with(scope)
        assert updates == [update]

    def test_query_log_names_group_restriction(self, caplog):
        caplog.set_level(logging.INFO, logger="core.services.update_query_service")

        asyncio.run(self.service.get_updates(UpdateScope(target_group_ids=("b73ca6ed",))))
        asyncio.run(self.service.get_updates(UpdateScope()))

        messages = [r.getMessage() for r in caplog.records]
        assert any("for 1 target group(s)" in m for m in messages)
        assert any("for all target groups" in m for m in messages)

    def test_scope_is_immutable(self):
        scope = UpdateScope()

        with pytest.raises(AttributeError):
            scope.approved_only = False


if __name__ == "__main__":
    pytest.main([__file__])
