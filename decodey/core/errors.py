from __future__ import annotations


class PuzzleError(ValueError):
    """Base class for every recoverable puzzle condition reported to callers."""


class EmptySolution(PuzzleError):
    """The solution contains no A–Z letters, so there is nothing to decode."""


class NoSelection(PuzzleError):
    """A guess was made while no cipher letter was selected."""


class TerminalState(PuzzleError):
    """A mutation was attempted after the puzzle was won or lost."""


class NoLettersRemaining(PuzzleError):
    """A hint was requested but every cipher letter is already revealed."""


class InvalidLetter(PuzzleError):
    """The input is not a single A–Z letter, or is not part of this puzzle."""


class PuzzleInProgress(PuzzleError):
    """A final report was requested for a puzzle that is still being played."""


class SnapshotError(PuzzleError):
    """A persisted snapshot is malformed or internally inconsistent."""
