"""Detection of "remote dependency unreachable" text in a child's stderr."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectivityPattern:
    """A substring that marks stderr as a connectivity failure."""

    substring: str
    label: str


@dataclass(frozen=True)
class ConnectivityDiagnostic:
    """Why a failed command was classified as a connectivity error.

    ``undecodable`` is set when stderr was not valid UTF-8, so the patterns
    could not be checked at all; ``text`` then holds the decode error.
    """

    text: str
    label: str | None = None
    undecodable: bool = False


DEFAULT_PATTERNS: tuple[ConnectivityPattern, ...] = (
    ConnectivityPattern("Kubernetes cluster unreachable", "kubernetes cluster"),
)


def detect(
    stderr: bytes,
    patterns: tuple[ConnectivityPattern, ...] = DEFAULT_PATTERNS,
    log: logging.Logger | None = None,
) -> ConnectivityDiagnostic | None:
    """Check captured stderr against *patterns*, first match wins.

    Returns None when stderr is empty or nothing matched.
    """
    log = log or logger
    if not stderr:
        return None

    try:
        text = stderr.decode("utf-8")
    except UnicodeDecodeError as exc:
        log.warning("could not decode stderr for connectivity check: %s", exc)
        return ConnectivityDiagnostic(str(exc), undecodable=True)

    for pattern in patterns:
        if pattern.substring in text:
            log.error("%s unreachable", pattern.label)
            return ConnectivityDiagnostic(text, label=pattern.label)

    return None
