"""The operations relay: model replies executed as shell commands.

Per connection the relay primes a fresh conversation with a fixed
instruction, then for every inbound message asks the model for a command,
runs it, and on failure asks once for a corrected command which is run
unconditionally. The output of the last command run is the reply.
"""

from __future__ import annotations

import logging

from opsrelay.domain.models import CommandResult, ShellCommand
from opsrelay.executor.base import CommandExecutor
from opsrelay.relay.conversation import Conversation
from opsrelay.relay.protocol import parse_reply, render_reply

logger = logging.getLogger(__name__)


SYSTEM_INSTRUCTION = (
    "you are connected to a bash terminal that runs on a Debian GNU/Linux 12 (bookworm)."
    "Everything you reply will be copy pasted to bash as is to be ran. "
    "Please don't reply with anything other than bash commands. "
    "if you don't know return echo false. "
    "You will be pasted the reply of the bash terminal as a response and if the task is done "
    "return echo true. "
    "Please make sure that all commands you send return and don't hang forver and are cli ready "
    "meaning that you cannot confirum. "
    "don't install any new packages unless asked."
)

REPAIR_TEMPLATE = "There was an error running the command. Output was: {output}\nFix it."


def repair_prompt(result: CommandResult) -> str:
    return REPAIR_TEMPLATE.format(output=result.output)


class OperationsRelay:
    """Per-connection state machine of the operations endpoint.

    Owns the connection's Conversation; nothing here is shared with other
    connections.

    Example usage::

        relay = OperationsRelay(Conversation(provider.start_chat()), ShellExecutor())
        await relay.start()
        output = await relay.handle("list the files in /tmp")
    """

    def __init__(self, conversation: Conversation, executor: CommandExecutor) -> None:
        self._conversation = conversation
        self._executor = executor
        self._started = False

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    async def start(self) -> None:
        """Send the fixed instruction as the first, non-streamed turn."""
        await self._conversation.send(SYSTEM_INSTRUCTION, streaming=False)
        self._started = True
        logger.info("Operations session primed")

    async def handle(self, text: str) -> str:
        """Process one inbound message and return the text to send back.

        Raises:
            ModelError: If a model call fails.
        """
        if not self._started:
            await self.start()

        inbound = parse_reply(text)
        if not isinstance(inbound, ShellCommand):
            logger.info("Echoing sentinel %r without contacting the model", text)
            return render_reply(inbound)

        reply = parse_reply(await self._conversation.send(text))
        logger.info("Model reply (%s): %s", reply.kind, render_reply(reply))

        result = await self._executor.run(render_reply(reply))
        if not result.ok:
            logger.warning(
                "Error running command %r (status=%s, error=%s): %s",
                result.command, result.exit_code, result.error, result.output,
            )
            result = await self._repair(result)

        logger.info("Sending back command output: %s", result.output)
        return result.output

    async def _repair(self, failed: CommandResult) -> CommandResult:
        """Ask the model once for a fix and run whatever it returns."""
        fixed = await self._conversation.send(repair_prompt(failed))
        result = await self._executor.run(fixed)
        if not result.ok:
            logger.error(
                "Error running second command %r (status=%s): %s",
                fixed, result.exit_code, result.output,
            )
        logger.info("Fixed command output: %s", result.output)
        return result
