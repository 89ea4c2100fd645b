# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.09
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/data/paths.py

"""
Namespace-root confinement for every externally influenced command name.

Typed names, names read out of an import payload, rename targets and merge
destinations all pass through here independently. A name that resolves
outside the root is rejected with PathEscapeError; one that stays inside but
has "." or ".." directory segments is rejected with InvalidCommandNameError.
Nothing is sanitized.
"""

from pathlib import Path

from loguru import logger

from gemcmd.data.names import relative_command_path, split_command_name
from gemcmd.system.exceptions import InvalidCommandNameError, PathEscapeError

RELATIVE_SEGMENTS = frozenset({".", ".."})


def canonical(path: Path) -> Path:
    """Absolute path with '.', '..' and symlinked segments resolved."""
    return Path(path).expanduser().resolve(strict=False)


def is_within(root: Path, candidate: Path) -> bool:
    """True if candidate is root itself or a descendant, after canonicalization."""
    return canonical(candidate).is_relative_to(canonical(root))


def ensure_within(root: Path, candidate: Path, name: str | None = None) -> Path:
    """Return candidate unchanged if it stays inside root.

    Raises:
        PathEscapeError: If the canonical candidate leaves the canonical root
    """
    if not is_within(root, candidate):
        label = name if name is not None else str(candidate)
        logger.warning(f"Rejected path outside {root}: {label}")
        raise PathEscapeError(label, root)
    return candidate


def resolve_command_path(root: Path, name: str) -> Path:
    """Map a command name to its file under root.

    The returned path is root-joined but not canonicalized, so callers see the
    same spelling of the root they passed in.

    Raises:
        PathEscapeError: If the resulting path would leave root
        InvalidCommandNameError: If the name or its leaf is empty, or a
            directory segment is "." or ".."
    """
    candidate = Path(root) / relative_command_path(name)
    ensure_within(root, candidate, name)

    dirs, _ = split_command_name(name)
    if RELATIVE_SEGMENTS.intersection(dirs):
        raise InvalidCommandNameError(name, "command name must not contain '.' or '..' segments")
    return candidate
