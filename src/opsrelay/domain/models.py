"""Core domain models for the opsrelay system.

These models represent the data flowing through the relay: wire messages
exchanged with clients, a provider-neutral view of model responses and
conversation turns, the tagged reply read from the operations model, and
the result of running a command.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Wire Models
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """A single JSON frame exchanged with a WebSocket client."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(default="", description="Text carried by the frame")

    @field_validator("content", mode="before")
    @classmethod
    def _null_is_empty(cls, value: object) -> object:
        # {"content": null} decodes like a missing key
        return "" if value is None else value


# ---------------------------------------------------------------------------
# Model Response Models
# ---------------------------------------------------------------------------


class Part(BaseModel):
    """One fragment of a candidate's content."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="")


class Content(BaseModel):
    """A turn in a conversation, or the content of one candidate."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"] = "model"
    parts: list[Part] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str, role: Literal["user", "model"] = "user") -> Content:
        return cls(role=role, parts=[Part(text=text)])


class Candidate(BaseModel):
    """One alternative full response returned for a prompt."""

    model_config = ConfigDict(frozen=True)

    content: Content | None = None


class GenerationResponse(BaseModel):
    """A provider-neutral model response (or one streamed chunk of it)."""

    model_config = ConfigDict(frozen=True)

    candidates: list[Candidate] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Operations Reply Models (tagged union)
# ---------------------------------------------------------------------------


class TaskDone(BaseModel):
    """The model signalled that the current task is complete."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["done"] = "done"


class UnknownIntent(BaseModel):
    """The model did not know how to turn the request into a command."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"


class ShellCommand(BaseModel):
    """A literal command line produced by the model."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["command"] = "command"
    text: str


OperationsReply = Union[TaskDone, UnknownIntent, ShellCommand]


# ---------------------------------------------------------------------------
# Execution Models
# ---------------------------------------------------------------------------


class CommandResult(BaseModel):
    """Outcome of running one command line."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(description="The command line that was run")
    output: str = Field(default="", description="Merged stdout and stderr")
    exit_code: int | None = Field(
        default=None, description="Exit status, or None if the process never started"
    )
    error: str | None = Field(default=None, description="Spawn error, if any")

    @property
    def ok(self) -> bool:
        """Whether the command started and exited with status 0."""
        return self.error is None and self.exit_code == 0
