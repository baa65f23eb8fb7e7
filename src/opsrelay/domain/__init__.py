"""Domain models for opsrelay.

This package contains the wire message, the provider-neutral response
structures, the operations reply union and command results. All models
use Pydantic v2 for validation and serialization.
"""

from opsrelay.domain.models import (
    Candidate,
    CommandResult,
    Content,
    GenerationResponse,
    Message,
    OperationsReply,
    Part,
    ShellCommand,
    TaskDone,
    UnknownIntent,
)

__all__ = [
    "Candidate",
    "CommandResult",
    "Content",
    "GenerationResponse",
    "Message",
    "OperationsReply",
    "Part",
    "ShellCommand",
    "TaskDone",
    "UnknownIntent",
]
