"""Classification of a finished (or unstartable) child process into an Outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn, Union

from cmd_outcome.connectivity import DEFAULT_PATTERNS, ConnectivityPattern, detect
from cmd_outcome.errors import (
    CommandError,
    ConnectivityError,
    ExitError,
    FailureKind,
    IoError,
    Terminated,
)
from cmd_outcome.runner import RawOutcome, Runner

if TYPE_CHECKING:
    from cmd_outcome.command import Invocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    """The command exited with code 0."""

    output: RawOutcome

    def unwrap(self) -> RawOutcome:
        return self.output


@dataclass(frozen=True)
class Failure:
    """The command failed; ``command`` is its rendered command line."""

    command: str
    kind: FailureKind

    def unwrap(self) -> NoReturn:
        """Raise the failure as a CommandError."""
        error = CommandError(self.command, self.kind)
        if isinstance(self.kind, IoError):
            raise error from self.kind.error
        raise error


Outcome = Union[Success, Failure]


def classify(
    command: str,
    raw: RawOutcome | OSError,
    *,
    patterns: tuple[ConnectivityPattern, ...] = DEFAULT_PATTERNS,
    log: logging.Logger | None = None,
) -> Outcome:
    """Turn what the runner produced into a Success or Failure.

    Order of checks:
      1. launch error (OSError)  → IoError
      2. exit code 0             → Success, whatever is on stderr
      3. no exit code            → Terminated
      4. stderr matches patterns → ConnectivityError
      5. any other exit code     → ExitError
    """
    log = log or logger

    if isinstance(raw, OSError):
        return Failure(command, IoError(raw))

    if raw.returncode == 0:
        return Success(raw)

    if raw.returncode is None:
        log.error(
            "command error occurred with %s: terminated by signal %s",
            command,
            raw.signal,
        )
        return Failure(command, Terminated())

    log.error(
        "an error occurred with command %r, code %d and output %r",
        command,
        raw.returncode,
        raw,
    )
    diagnostic = detect(raw.stderr, patterns, log)
    if diagnostic is not None:
        return Failure(command, ConnectivityError(diagnostic))
    return Failure(command, ExitError(raw.returncode, raw))


def run(
    invocation: Invocation,
    *,
    runner: Runner | None = None,
    patterns: tuple[ConnectivityPattern, ...] = DEFAULT_PATTERNS,
    log: logging.Logger | None = None,
) -> Outcome:
    """Run *invocation* synchronously and classify the result."""
    log = log or logger
    runner = runner or Runner()
    command = invocation.display()

    log.info("executing command %s", command)
    try:
        raw: RawOutcome | OSError = runner.run(invocation)
    except OSError as exc:
        raw = exc
    return classify(command, raw, patterns=patterns, log=log)
