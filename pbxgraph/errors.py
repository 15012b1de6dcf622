"""
Error types raised while reading and editing Xcode project files.
"""

from dataclasses import dataclass
from typing import List, Optional


class PbxprojError(Exception):
    """Base exception for all pbxgraph errors."""


@dataclass(frozen=True)
class Position:
    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class SourceLocation:
    start: Position
    end: Position


class PbxSyntaxError(PbxprojError):
    """
    Raised when project text cannot be parsed.

    Carries the list of expected tokens, the offending text (None at end of
    input) and the location of the offending text.
    """

    def __init__(
        self,
        message: str,
        expected: List[str],
        found: Optional[str],
        location: SourceLocation,
    ):
        self.message = message
        self.expected = expected
        self.found = found
        self.location = location
        super().__init__(
            f"{message} (line {location.start.line}, column {location.start.column})"
        )


class InvalidTargetError(PbxprojError, ValueError):
    """Raised when a target identifier is not present in the native target section."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Invalid target: {target}")


class InvalidGroupError(PbxprojError, ValueError):
    """Raised when a group identifier is in neither the group nor the variant group section."""

    def __init__(self, group: Optional[str]):
        self.group = group
        super().__init__(f"Invalid group: {group}")


class InvalidArgumentError(PbxprojError, ValueError):
    """Raised when an operation is called with a missing or unrecognized argument."""


class MalformedPreconditionError(PbxprojError, ValueError):
    """Raised when a record lacks the shape an operation depends on."""


class BuildPhaseNotFoundError(PbxprojError, LookupError):
    """Raised when an operation needs a build phase the target does not have."""

    def __init__(self, phase: str, target: Optional[str]):
        self.phase = phase
        self.target = target
        where = f"target {target}" if target else "the project"
        super().__init__(f"No '{phase}' build phase found for {where}")
