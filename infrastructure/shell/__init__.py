"""External process infrastructure."""

from .command_runner import CommandRunner, CommandResult

__all__ = [
    'CommandRunner',
    'CommandResult'
]
