"""Async runner for external command-line tools."""

import asyncio
import locale
from dataclasses import dataclass, field
from typing import List, Sequence

from core.exceptions import CommandExecutionError
from core.utils.logger import get_infrastructure_logger, get_tool_output_logger


@dataclass
class CommandResult:
    """Exit code and merged stdout/stderr of a finished command."""
    args: List[str]
    returncode: int
    output: str = ""
    lines: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs a command to completion and captures its text output."""

    def __init__(self, encoding: str = None):
        self.encoding = encoding or locale.getpreferredencoding(False)
        self.logger = get_infrastructure_logger(__name__)
        self.tool_logger = get_tool_output_logger()

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Centralized error handling and logging."""
        self.logger.error(f"{operation} failed: {str(error)}")
        raise CommandExecutionError(f"{operation} failed: {str(error)}") from error

    async def run(self, args: Sequence[str], log_output: bool = True) -> CommandResult:
        """Run ``args`` and wait for it to exit.

        A non-zero exit code is not an error here; callers inspect the
        output. Only a command that cannot be started raises.
        """
        args = [str(a) for a in args]
        self.logger.debug(f"Running: {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            stdout, _ = await process.communicate()
        except OSError as e:
            self._handle_error(f"Starting {args[0]}", e)

        output = stdout.decode(self.encoding, errors="replace") if stdout else ""
        lines = output.splitlines()

        if log_output and output:
            self.tool_logger.info(output.rstrip("\r\n"))

        self.logger.debug(f"{args[0]} exited with code {process.returncode}")
        return CommandResult(
            args=args, returncode=process.returncode, output=output, lines=lines
        )
