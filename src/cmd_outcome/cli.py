"""CLI entrypoint for cmd-outcome."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from cmd_outcome.command import Invocation
from cmd_outcome.connectivity import DEFAULT_PATTERNS, ConnectivityPattern
from cmd_outcome.errors import CommandError, ConnectivityError, ExitError, IoError
from cmd_outcome.outcome import Outcome, Success, classify
from cmd_outcome.runner import RawOutcome, Runner

logger = logging.getLogger(__name__)

app = typer.Typer(help="Run a command and report how it ended.")

_PASSTHROUGH = {"allow_interspersed_args": False, "ignore_unknown_options": True}

EXIT_CONNECTIVITY = 69
EXIT_IO_ERROR = 127
EXIT_TERMINATED = 128
EXTRA_PATTERN_LABEL = "remote endpoint"


def exit_code_for(outcome: Outcome, signal: int | None = None) -> int:
    """Map an outcome to the exit code this CLI reports for it.

    A terminated child reports 128 + its signal number, as shells do.
    """
    if isinstance(outcome, Success):
        return 0
    kind = outcome.kind
    if isinstance(kind, ExitError):
        return kind.code
    if isinstance(kind, ConnectivityError):
        return EXIT_CONNECTIVITY
    if isinstance(kind, IoError):
        return EXIT_IO_ERROR
    return EXIT_TERMINATED + (signal or 0)


def _parse_env(pairs: list[str]) -> dict[str, str]:
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--env")
        env[key] = value
    return env


@app.command(context_settings=_PASSTHROUGH)
def run(
    program: Annotated[str, typer.Argument(help="Program to run.")],
    args: Annotated[
        Optional[list[str]], typer.Argument(help="Arguments passed to the program.")
    ] = None,
    inherit: Annotated[
        bool, typer.Option("--inherit", help="Let the program write to this terminal.")
    ] = False,
    env: Annotated[
        Optional[list[str]], typer.Option("--env", "-e", help="Extra KEY=VALUE environment entries.")
    ] = None,
    cwd: Annotated[
        Optional[Path], typer.Option("--cwd", help="Working directory for the program.")
    ] = None,
    connectivity_pattern: Annotated[
        Optional[list[str]],
        typer.Option(
            "--connectivity-pattern",
            help="Extra stderr text that marks a failure as a connectivity error.",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log the command and its classification.")
    ] = False,
) -> None:
    """Run PROGRAM with ARGS and exit with a code describing the outcome."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    invocation = Invocation.of(program, *(args or []))
    if env:
        invocation = invocation.with_env(**_parse_env(env))
    if cwd is not None:
        invocation = invocation.with_cwd(str(cwd))
    if inherit:
        invocation = invocation.inherit()

    patterns = DEFAULT_PATTERNS + tuple(
        ConnectivityPattern(text, EXTRA_PATTERN_LABEL) for text in connectivity_pattern or []
    )

    command = invocation.display()
    logger.info("executing command %s", command)
    try:
        raw: RawOutcome | OSError = Runner(verbose=verbose).run(invocation)
    except OSError as exc:
        raw = exc
    outcome = classify(command, raw, patterns=patterns)
    signal = raw.signal if isinstance(raw, RawOutcome) else None

    if isinstance(outcome, Success):
        if outcome.output.stdout:
            typer.echo(outcome.output.stdout.decode("utf-8", errors="replace"), nl=False)
        typer.echo(f"ok: {command}", err=True)
    else:
        error = CommandError(outcome.command, outcome.kind)
        typer.echo(f"Error: {error.describe()}", err=True)
        if isinstance(outcome.kind, ConnectivityError):
            typer.echo(outcome.kind.diagnostic.text.rstrip("\n"), err=True)
        elif isinstance(outcome.kind, IoError):
            typer.echo(str(outcome.kind.error), err=True)

    raise typer.Exit(code=exit_code_for(outcome, signal))


@app.command(context_settings=_PASSTHROUGH)
def display(
    program: Annotated[str, typer.Argument(help="Program name.")],
    args: Annotated[Optional[list[str]], typer.Argument(help="Program arguments.")] = None,
) -> None:
    """Print the command line as it appears in logs and error messages."""
    typer.echo(Invocation.of(program, *(args or [])).display())


if __name__ == "__main__":
    app()
