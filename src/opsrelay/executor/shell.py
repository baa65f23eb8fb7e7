"""Shell-backed command execution.

Each command runs in a fresh ``<shell> -c <command>`` subprocess with
stderr merged into stdout. Nothing persists between commands.
"""

from __future__ import annotations

import asyncio
import logging

from opsrelay.domain.models import CommandResult
from opsrelay.executor.base import CommandExecutor

logger = logging.getLogger(__name__)


class ShellExecutor(CommandExecutor):
    """Runs command lines through a shell subprocess, one per command."""

    def __init__(self, shell: str = "bash") -> None:
        self._shell = shell

    @property
    def shell(self) -> str:
        return self._shell

    async def run(self, command: str) -> CommandResult:
        logger.info("Running command: %s", command)
        try:
            process = await asyncio.create_subprocess_exec(
                self._shell, "-c", command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", self._shell, e)
            return CommandResult(command=command, error=str(e))

        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        result = CommandResult(command=command, output=output, exit_code=process.returncode)
        if not result.ok:
            logger.warning(
                "Command exited with status %s: %s", process.returncode, output[:200]
            )
        return result
