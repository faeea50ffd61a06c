from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from decodey.core.engine import elapsed_seconds
from decodey.core.errors import PuzzleInProgress
from decodey.core.scoring import apply_streak_boost, score
from decodey.core.state import Puzzle, PuzzleStatus


@dataclass(frozen=True)
class GameReport:
    """What the statistics side receives once a puzzle is over."""
    game_id: Optional[str]
    status: PuzzleStatus
    tier: str
    mistakes: int
    elapsed_seconds: int
    score: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "status": self.status,
            "tier": self.tier,
            "mistakes": self.mistakes,
            "elapsed_seconds": self.elapsed_seconds,
            "score": self.score,
        }


def final_report(puzzle: Puzzle, *, streak_days: int = 0) -> GameReport:
    """
    Summarize a finished puzzle and compute its score.

    Parameters
    ----------
    puzzle : Puzzle
        A won or lost puzzle.
    streak_days : int
        Consecutive daily wins the host wants credited (see
        `core.scoring.daily_streak`); 0 applies no boost.

    Raises
    ------
    PuzzleInProgress
        If the puzzle has not reached a terminal state yet.
    """
    if not puzzle.is_terminal:
        raise PuzzleInProgress("The puzzle is still in progress.")
    seconds = elapsed_seconds(puzzle)
    points = apply_streak_boost(score(puzzle.tier, puzzle.mistakes, seconds), streak_days)
    return GameReport(
        game_id=puzzle.game_id,
        status=puzzle.status,
        tier=puzzle.tier,
        mistakes=puzzle.mistakes,
        elapsed_seconds=seconds,
        score=points,
    )
