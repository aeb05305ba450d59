"""Invocation: what to run, and how to render it for humans."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

import typer

from cmd_outcome.connectivity import DEFAULT_PATTERNS, ConnectivityPattern
from cmd_outcome.outcome import Outcome, run
from cmd_outcome.runner import RawOutcome, Runner

logger = logging.getLogger(__name__)


def _env_pairs(
    env: Mapping[str, str] | Iterable[tuple[str, str]],
) -> tuple[tuple[str, str], ...]:
    items = env.items() if isinstance(env, Mapping) else env
    return tuple((key, value) for key, value in items)


@dataclass(frozen=True)
class Invocation:
    """A program, its ordered arguments and how to launch it.

    Builder methods return new instances; an Invocation never changes once
    it has been handed to a Runner.
    """

    program: str
    args: tuple[str, ...] = ()
    env: tuple[tuple[str, str], ...] | None = None
    cwd: str | None = None
    capture: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        if self.env is not None:
            object.__setattr__(self, "env", _env_pairs(self.env))

    @classmethod
    def of(cls, program: str, *args: str) -> Invocation:
        return cls(program, tuple(args))

    def arg(self, arg: str) -> Invocation:
        return replace(self, args=(*self.args, arg))

    def with_args(self, *args: str) -> Invocation:
        return replace(self, args=(*self.args, *args))

    def with_env(self, **env: str) -> Invocation:
        merged = {**dict(self.env or ()), **env}
        return replace(self, env=tuple(merged.items()))

    def with_cwd(self, cwd: str) -> Invocation:
        return replace(self, cwd=cwd)

    def inherit(self) -> Invocation:
        """Send the child's stdout and stderr to this process's streams."""
        return replace(self, capture=False)

    def display(self) -> str:
        """Render as a single line, e.g. ``echo one two three``.

        Double quotes are stripped from every part.
        """
        return " ".join(part.replace('"', "") for part in (self.program, *self.args))

    def log(self, log: logging.Logger | None = None) -> Invocation:
        (log or logger).debug("Command> %r", self.display())
        return self

    def print(self) -> Invocation:
        typer.echo(f"Command> {self.display()!r}")
        return self

    def outcome(
        self,
        *,
        runner: Runner | None = None,
        patterns: tuple[ConnectivityPattern, ...] = DEFAULT_PATTERNS,
        log: logging.Logger | None = None,
    ) -> Outcome:
        return run(self, runner=runner, patterns=patterns, log=log)

    def result(
        self,
        *,
        runner: Runner | None = None,
        patterns: tuple[ConnectivityPattern, ...] = DEFAULT_PATTERNS,
        log: logging.Logger | None = None,
    ) -> RawOutcome:
        """Run and return the output, or raise CommandError on any failure."""
        return self.outcome(runner=runner, patterns=patterns, log=log).unwrap()
