"""Command execution module for opsrelay.

Runs the command lines produced by the operations model through a
pluggable executor.

Public API:
    CommandExecutor -- Abstract base class
    ShellExecutor -- ``bash -c`` subprocess backend
"""

from opsrelay.executor.base import CommandExecutor
from opsrelay.executor.shell import ShellExecutor

__all__ = ["CommandExecutor", "ShellExecutor"]
