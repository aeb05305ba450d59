"""Failure kinds a child process can end in, and the exception that carries them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from cmd_outcome.connectivity import ConnectivityDiagnostic
from cmd_outcome.runner import RawOutcome


def _lossy(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Terminated:
    """The child was killed and has no exit code.

    Whatever it wrote before dying is not kept.
    """

    def __str__(self) -> str:
        return "Child process was terminated and has no exit code"


@dataclass(frozen=True)
class ExitError:
    """The child ran and returned a non-zero exit code."""

    code: int
    output: RawOutcome

    def __str__(self) -> str:
        return (
            f"Child process completed with non-zero exit code {self.code}\n"
            f"  stdout: {_lossy(self.output.stdout)}\n"
            f"  stderr: {_lossy(self.output.stderr)}"
        )


@dataclass(frozen=True)
class IoError:
    """The child could not be started or waited on."""

    error: OSError

    def __str__(self) -> str:
        return "An error occurred while invoking child process"


@dataclass(frozen=True)
class ConnectivityError:
    """A non-zero exit whose stderr says a remote dependency is unreachable."""

    diagnostic: ConnectivityDiagnostic

    def __str__(self) -> str:
        return "An error occurred while trying to connect"


FailureKind = Union[Terminated, ExitError, IoError, ConnectivityError]


class CommandError(Exception):
    """Raised when a command did not run to a zero exit code."""

    def __init__(self, command: str, kind: FailureKind) -> None:
        self.command = command
        self.kind = kind
        super().__init__(f'Failed to run "{command}"')

    def describe(self) -> str:
        """Return the headline followed by the kind's own message."""
        return f"{self}: {self.kind}"
