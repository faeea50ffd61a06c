from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Union

from .cipher import ALPHABET, MASK_GLYPH, generate, is_letter
from .difficulty import max_mistakes, resolve_tier
from .errors import InvalidLetter, NoLettersRemaining, NoSelection, TerminalState
from .state import Puzzle, derive_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuessResult:
    """Outcome of `guess`: the next puzzle and whether the guess was right."""
    puzzle: Puzzle
    correct: bool


@dataclass(frozen=True)
class HintResult:
    """Outcome of `hint`: the next puzzle and the pair that was revealed."""
    puzzle: Puzzle
    cipher_letter: str
    plain_letter: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stamp(puzzle: Puzzle, now: Optional[datetime]) -> datetime:
    """Action time for a transition; never earlier than the previous action."""
    ts = now or _utcnow()
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return max(ts, puzzle.last_action_at)


def new_puzzle(
    solution: str,
    difficulty: Union[float, str],
    *,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    mask: str = MASK_GLYPH,
    game_id: Optional[str] = None,
) -> Puzzle:
    """
    Start a new puzzle from a plaintext quote.

    Parameters
    ----------
    solution : str
        The quote to encrypt. It is uppercased; only A–Z are encrypted.
    difficulty : float | str
        A numeric difficulty score (classified into a tier) or a tier name.
    rng : random.Random | None
        Random source for the cipher. Pass a seeded instance for reproducible
        puzzles.
    now : datetime | None
        Start time; defaults to the current UTC time.

    Returns
    -------
    Puzzle
        A fresh puzzle in "in_progress" status.

    Raises
    ------
    EmptySolution
        If the quote has no letters at all.
    """
    tier = resolve_tier(difficulty)
    started = now or _utcnow()
    puzzle = Puzzle(
        solution=solution,
        cipher=generate(ALPHABET, rng),
        max_mistakes=max_mistakes(tier),
        tier=tier,
        started_at=started,
        last_action_at=started,
        mask=mask,
        game_id=game_id,
    )
    logger.debug(
        "puzzle created game_id=%s tier=%s letters=%d max_mistakes=%d",
        game_id, tier, len(puzzle.cipher_letters), puzzle.max_mistakes,
    )
    return puzzle


def _letter(ch: str) -> str:
    """Uppercase a single-letter input or raise `InvalidLetter`."""
    if not isinstance(ch, str) or not is_letter(ch.upper()):
        raise InvalidLetter(f"Expected a single letter A–Z, got {ch!r}.")
    return ch.upper()


def _log_outcome(puzzle: Puzzle) -> None:
    if puzzle.status == "won":
        logger.debug("puzzle won game_id=%s mistakes=%d", puzzle.game_id, puzzle.mistakes)
    elif puzzle.status == "lost":
        logger.debug("puzzle lost game_id=%s mistakes=%d", puzzle.game_id, puzzle.mistakes)


def select(puzzle: Puzzle, cipher_letter: str) -> Puzzle:
    """
    Select a cipher letter to guess next.

    Behavior
    --------
    - Returns the puzzle unchanged if it is already won or lost.
    - Selecting a letter that is already revealed clears the selection.
    - Only `selected` changes; timestamps are left alone.
    """
    if puzzle.is_terminal:
        return puzzle

    letter = _letter(cipher_letter)
    if letter not in puzzle.cipher_letters:
        raise InvalidLetter(f"{letter!r} does not appear in the encrypted text.")

    if puzzle.is_letter_guessed(letter):
        return replace(puzzle, selected=None)
    return replace(puzzle, selected=letter)


def guess(puzzle: Puzzle, plaintext_letter: str, *, now: Optional[datetime] = None) -> GuessResult:
    """
    Guess the plaintext letter behind the selected cipher letter.

    Behavior
    --------
    - Raises `TerminalState` once the game is won or lost.
    - Raises `NoSelection` if no cipher letter is selected.
    - Correct: records the pair in `guessed` and checks for a win.
    - Wrong: costs one mistake, is remembered in `incorrect_guesses`, and
      checks for a loss.
    - Either way the selection is cleared and `last_action_at` is stamped;
      a clock that went backwards keeps the previous stamp.
    """
    if puzzle.is_terminal:
        raise TerminalState(f"The puzzle is already {puzzle.status}.")
    if puzzle.selected is None:
        raise NoSelection("Select a cipher letter before guessing.")

    letter = _letter(plaintext_letter)
    selected = puzzle.selected
    stamp = _stamp(puzzle, now)

    if puzzle.cipher.inverse[selected] == letter:
        guessed = dict(puzzle.guessed)
        guessed[selected] = letter
        status = derive_status(puzzle.cipher_letters, guessed, puzzle.mistakes, puzzle.max_mistakes)
        nxt = replace(puzzle, guessed=guessed, selected=None, status=status, last_action_at=stamp)
        _log_outcome(nxt)
        return GuessResult(puzzle=nxt, correct=True)

    wrong = dict(puzzle.incorrect_guesses)
    wrong[selected] = wrong.get(selected, frozenset()) | {letter}
    mistakes = puzzle.mistakes + 1
    status = derive_status(puzzle.cipher_letters, puzzle.guessed, mistakes, puzzle.max_mistakes)
    nxt = replace(
        puzzle,
        incorrect_guesses=wrong,
        mistakes=mistakes,
        selected=None,
        status=status,
        last_action_at=stamp,
    )
    _log_outcome(nxt)
    return GuessResult(puzzle=nxt, correct=False)


def hint(puzzle: Puzzle, *, rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> HintResult:
    """
    Reveal one random hidden letter at the cost of one mistake.

    Behavior
    --------
    - Raises `NoLettersRemaining` when every cipher letter is revealed (this
      includes a won puzzle), otherwise `TerminalState` once the game is over.
    - The reveal always happens, even when the extra mistake loses the game.
    """
    remaining = puzzle.remaining_letters
    if not remaining:
        raise NoLettersRemaining("Every letter is already revealed.")
    if puzzle.is_terminal:
        raise TerminalState(f"The puzzle is already {puzzle.status}.")

    coded = (rng or random.Random()).choice(remaining)
    plain = puzzle.cipher.inverse[coded]
    guessed = dict(puzzle.guessed)
    guessed[coded] = plain
    mistakes = puzzle.mistakes + 1
    status = derive_status(puzzle.cipher_letters, guessed, mistakes, puzzle.max_mistakes)
    nxt = replace(
        puzzle,
        guessed=guessed,
        mistakes=mistakes,
        selected=None if puzzle.selected == coded else puzzle.selected,
        status=status,
        last_action_at=_stamp(puzzle, now),
    )
    logger.debug("hint revealed game_id=%s %s->%s mistakes=%d", puzzle.game_id, coded, plain, mistakes)
    _log_outcome(nxt)
    return HintResult(puzzle=nxt, cipher_letter=coded, plain_letter=plain)


def elapsed_seconds(puzzle: Puzzle) -> int:
    """Whole seconds between the start and the last action, never less than 1."""
    return max(1, int((puzzle.last_action_at - puzzle.started_at).total_seconds()))
