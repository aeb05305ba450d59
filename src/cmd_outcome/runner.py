"""Thin wrapper around subprocess.run for testability."""

from __future__ import annotations

import errno
import logging
import os
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmd_outcome.command import Invocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawOutcome:
    """What the OS reported for one finished child process.

    ``returncode`` is None when the child was killed by a signal; in that
    case ``signal`` holds the signal number.
    """

    returncode: int | None
    stdout: bytes = b""
    stderr: bytes = b""
    signal: int | None = None


class Runner:
    """Single point of subprocess execution."""

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    def run(self, invocation: Invocation) -> RawOutcome:
        """Run *invocation* to completion.

        Raises OSError (usually FileNotFoundError or PermissionError) when
        the program cannot be started. Arguments or environment entries the
        OS cannot accept (NUL bytes, "=" in a variable name) raise OSError
        with errno EINVAL.
        """
        if self.verbose:
            logger.info("$ %s", invocation.display())

        env = None
        if invocation.env is not None:
            env = {**os.environ, **dict(invocation.env)}

        try:
            result = subprocess.run(
                [invocation.program, *invocation.args],
                check=False,
                capture_output=invocation.capture,
                env=env,
                cwd=invocation.cwd,
            )
        except ValueError as exc:
            raise OSError(errno.EINVAL, str(exc)) from exc

        stdout = result.stdout or b""
        stderr = result.stderr or b""
        if result.returncode < 0:
            return RawOutcome(None, stdout, stderr, signal=-result.returncode)
        return RawOutcome(result.returncode, stdout, stderr)
