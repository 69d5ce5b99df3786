"""WSUS administration client.

The WSUS administration API is a .NET assembly. Each call runs a short
PowerShell script that loads the assembly, connects to the server, and
writes its result to stdout as JSON.
"""

import json
from typing import Any, List, Optional

from core.exceptions import CommandExecutionError, UpdateServerError
from core.interfaces.update_server_interface import IUpdateServerClient
from core.models.config import UpdateServerConfig
from core.models.update import TargetGroup, UpdateRecord, UpdateScope
from core.utils.logger import get_infrastructure_logger
from infrastructure.shell.command_runner import CommandRunner

ADMIN_NAMESPACE = "Microsoft.UpdateServices.Administration"

_CONNECT = """\
$ErrorActionPreference = 'Stop'
[void][System.Reflection.Assembly]::LoadFrom({library})
$wsus = [{ns}.AdminProxy]::GetUpdateServer({host}, {ssl}, {port})
"""

_PROBE = """\
ConvertTo-Json -Compress -InputObject @{ Name = $wsus.Name; Version = $wsus.Version.ToString() }
"""

_LIST_GROUPS = """\
$groups = @($wsus.GetComputerTargetGroups() | ForEach-Object {
    [pscustomobject]@{ Id = $_.Id.ToString(); Name = $_.Name }
})
ConvertTo-Json -Compress -Depth 3 -InputObject $groups
"""

_QUERY_UPDATES = """\
$scope = New-Object {ns}.UpdateScope
{approved}
foreach ($id in @({group_ids})) {{
    [void]$scope.ApprovedComputerTargetGroups.Add($wsus.GetComputerTargetGroup([guid]$id))
}}
$updates = @($wsus.GetUpdates($scope) | ForEach-Object {{
    $files = @($_.GetInstallableItems() | ForEach-Object {{ $_.Files }} | ForEach-Object {{
        [pscustomobject]@{{ Uri = $_.FileUri.ToString(); Name = $_.Name }}
    }})
    [pscustomobject]@{{ Id = $_.Id.UpdateId.ToString(); Title = $_.Title; Files = $files }}
}})
ConvertTo-Json -Compress -Depth 5 -InputObject $updates
"""


def ps_quote(value: Any) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + str(value).replace("'", "''") + "'"


class WsusClient(IUpdateServerClient):
    """WSUS client backed by the PowerShell administration API."""

    def __init__(
        self,
        server: UpdateServerConfig,
        admin_library_path: str,
        powershell_path: str = "powershell.exe",
        runner: Optional[CommandRunner] = None,
    ):
        self.server = server
        self.admin_library_path = admin_library_path
        self.powershell_path = powershell_path
        self.runner = runner or CommandRunner()
        self.logger = get_infrastructure_logger(__name__)
        self.server_version: Optional[str] = None

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Centralized error handling and logging."""
        self.logger.error(f"{operation} failed: {str(error)}")
        raise UpdateServerError(f"{operation} failed: {str(error)}") from error

    def _script(self, body: str) -> str:
        header = _CONNECT.format(
            library=ps_quote(self.admin_library_path),
            ns=ADMIN_NAMESPACE,
            host=ps_quote(self.server.host),
            ssl="$true" if self.server.use_ssl else "$false",
            port=int(self.server.port),
        )
        return header + body

    async def _invoke(self, operation: str, body: str) -> Any:
        """Run a bridge script and decode its JSON output."""
        args = [
            self.powershell_path,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            self._script(body),
        ]
        try:
            result = await self.runner.run(args, log_output=False)
        except CommandExecutionError as e:
            self._handle_error(operation, e)

        if not result.succeeded:
            detail = result.output.strip() or f"exit code {result.returncode}"
            self._handle_error(operation, RuntimeError(detail))

        text = result.output.strip()
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            self._handle_error(f"{operation} (decoding output)", e)

    @staticmethod
    def _as_list(data: Any) -> List[dict]:
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return list(data)

    async def connect(self) -> None:
        """Connect to the server and record its version."""
        scheme = "https" if self.server.use_ssl else "http"
        self.logger.info(
            f"Connecting to update server {scheme}://{self.server.host}:{self.server.port}"
        )
        info = await self._invoke("connect", _PROBE)
        if info:
            self.server_version = info.get("Version")
            self.logger.info(
                f"Connected to {info.get('Name', self.server.host)} (version {self.server_version})"
            )

    async def list_target_groups(self) -> List[TargetGroup]:
        data = await self._invoke("list_target_groups", _LIST_GROUPS)
        return [
            TargetGroup(id=item.get("Id", ""), name=item.get("Name", ""))
            for item in self._as_list(data)
        ]

    async def query_updates(self, scope: UpdateScope) -> List[UpdateRecord]:
        approved = (
            f"$scope.ApprovedStates = [{ADMIN_NAMESPACE}.ApprovedStates]::LatestRevisionApproved"
            if scope.approved_only
            else ""
        )
        group_ids = ", ".join(ps_quote(i) for i in scope.target_group_ids)
        body = _QUERY_UPDATES.format(
            ns=ADMIN_NAMESPACE, approved=approved, group_ids=group_ids
        )
        data = await self._invoke("query_updates", body)
        return [UpdateRecord.from_dict(item) for item in self._as_list(data)]
