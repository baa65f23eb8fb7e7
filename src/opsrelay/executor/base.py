"""Abstract interface for running untrusted command lines.

Everything the operations relay executes comes straight from model
output. Implementations of this interface are the single place where
those strings reach a process, so a sandboxing backend can replace the
plain shell one without touching the relay.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from opsrelay.domain.models import CommandResult


class CommandExecutor(ABC):
    """Runs one command line and captures its merged output."""

    @abstractmethod
    async def run(self, command: str) -> CommandResult:
        """Execute ``command`` and wait for it to finish.

        Implementations must not raise for command failures or spawn
        errors; both are reported through the returned CommandResult.
        No timeout is applied.
        """
        ...
