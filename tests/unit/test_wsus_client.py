"""Unit tests for WsusClient."""

import asyncio
import json
from unittest.mock import AsyncMock, Mock

import pytest

from core.exceptions import CommandExecutionError, UpdateServerError
from core.models.config import UpdateServerConfig
from core.models.update import InstallableFileRef, TargetGroup, UpdateScope
from infrastructure.shell.command_runner import CommandResult
from infrastructure.wsus.wsus_client import WsusClient, ps_quote


LIBRARY = "C:\\Program Files\\Update Services\\Api\\Microsoft.UpdateServices.Administration.dll"


def _runner(output="", returncode=0):
    runner = Mock()
    runner.run = AsyncMock(
        return_value=CommandResult(args=[], returncode=returncode, output=output)
    )
    return runner


def _script(runner) -> str:
    args = runner.run.await_args.args[0]
    return args[-1]


class TestWsusClient:
    """Test cases for WsusClient."""

    def _client(self, runner, **server):
        return WsusClient(
            server=UpdateServerConfig(host="wsus01", **server),
            admin_library_path=LIBRARY,
            runner=runner,
        )

    def test_connect_records_version(self):
        runner = _runner(json.dumps({"Name": "WSUS01", "Version": "10.0.20348.143"}))
        client = self._client(runner)

        asyncio.run(client.connect())

        assert client.server_version == "10.0.20348.143"
        script = _script(runner)
        assert "GetUpdateServer('wsus01', $false, 8530)" in script
        assert ps_quote(LIBRARY) in script

    def test_connect_with_ssl(self):
        runner = _runner(json.dumps({"Name": "WSUS01", "Version": "10.0"}))

        asyncio.run(self._client(runner, port=8531, use_ssl=True).connect())

        assert "GetUpdateServer('wsus01', $true, 8531)" in _script(runner)

    def test_connect_failure(self):
        runner = _runner("The request failed with HTTP status 401: Unauthorized.", returncode=1)

        with pytest.raises(UpdateServerError):
            asyncio.run(self._client(runner).connect())

    def test_powershell_missing(self):
        runner = Mock()
        runner.run = AsyncMock(side_effect=CommandExecutionError("powershell.exe not found"))

        with pytest.raises(UpdateServerError):
            asyncio.run(self._client(runner).connect())

    def test_list_target_groups(self):
        runner = _runner(json.dumps([
            {"Id": "a0a08746", "Name": "All Computers"},
            {"Id": "b73ca6ed", "Name": "Server Images"},
        ]))

        groups = asyncio.run(self._client(runner).list_target_groups())

        assert groups == [
            TargetGroup(id="a0a08746", name="All Computers"),
            TargetGroup(id="b73ca6ed", name="Server Images"),
        ]

    def test_single_group_object(self):
        runner = _runner(json.dumps({"Id": "a0a08746", "Name": "All Computers"}))

        groups = asyncio.run(self._client(runner).list_target_groups())

        assert len(groups) == 1

    def test_query_updates(self):
        runner = _runner(json.dumps([
            {
                "Id": "9d1b2f0e",
                "Title": "2023-02 Cumulative Update (KB5022842)",
                "Files": [
                    {"Uri": "http://wsus01:8530/Content/AB/kb.cab", "Name": "kb.cab"},
                    {"Uri": "http://wsus01:8530/Content/AB/kb.psf", "Name": "kb.psf"},
                ],
            },
            {"Id": "11aa", "Title": "Definition Update", "Files": None},
        ]))
        scope = UpdateScope(target_group_ids=("b73ca6ed",))

        updates = asyncio.run(self._client(runner).query_updates(scope))

        assert [u.title for u in updates] == [
            "2023-02 Cumulative Update (KB5022842)",
            "Definition Update",
        ]
        assert updates[0].files[0] == InstallableFileRef(
            uri="http://wsus01:8530/Content/AB/kb.cab", name="kb.cab"
        )
        assert updates[1].files == []
        script = _script(runner)
        assert "LatestRevisionApproved" in script
        assert "@('b73ca6ed')" in script

    def test_query_without_results(self):
        updates = asyncio.run(self._client(_runner("")).query_updates(UpdateScope()))

        assert updates == []

    def test_invalid_json(self):
        with pytest.raises(UpdateServerError):
            asyncio.run(self._client(_runner("not json")).list_target_groups())

    def test_ps_quote_escapes_single_quotes(self):
        assert ps_quote("O'Brien's group") == "'O''Brien''s group'"


if __name__ == "__main__":
    pytest.main([__file__])
