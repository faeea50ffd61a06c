from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Literal, Mapping, Optional

from .cipher import ALPHABET, MASK_GLYPH, Cipher, encrypt, is_letter, mask_text
from .difficulty import Tier, normalize_tier
from .errors import EmptySolution

PuzzleStatus = Literal["in_progress", "won", "lost"]

STATUSES = ("in_progress", "won", "lost")


def derive_status(cipher_letters: FrozenSet[str], guessed: Mapping[str, str], mistakes: int, max_mistakes: int) -> PuzzleStatus:
    """
    Compute the status implied by the current fields.

    Rules
    -----
    - Lost : `mistakes >= max_mistakes`. Checked first, so a hint that both
      finishes the quote and spends the last mistake still loses.
    - Won  : the set of distinct cipher letters equals the key set of `guessed`
      (set equality, so repeated letters count once).
    - Else : in progress.
    """
    if mistakes >= max_mistakes:
        return "lost"
    if set(guessed) == set(cipher_letters):
        return "won"
    return "in_progress"


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class Puzzle:
    """
    Immutable container for one cryptogram game.

    Notes
    -----
    - The object is frozen: `core.engine` returns a new `Puzzle` after each
      player action and never mutates an existing one.
    - `encrypted` is derived from `solution` and `cipher` on construction;
      `display` is derived from `guessed` on every read.
    - `guessed` is the only record of what the player has revealed.
    """

    solution: str
    cipher: Cipher
    max_mistakes: int
    tier: Tier
    started_at: datetime
    last_action_at: datetime
    guessed: Mapping[str, str] = field(default_factory=dict)
    incorrect_guesses: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    selected: Optional[str] = None
    mistakes: int = 0
    status: PuzzleStatus = "in_progress"
    mask: str = MASK_GLYPH
    game_id: Optional[str] = None
    encrypted: str = field(init=False)

    def __post_init__(self) -> None:
        """
        Normalize and validate fields.

        Normalization
        -------------
        - `solution` is uppercased.
        - `guessed` and `incorrect_guesses` become read-only mappings.
        - `tier` is canonicalized; timestamps are converted to UTC.

        Validation
        ----------
        - `solution` must contain at least one A–Z letter (`EmptySolution`).
        - `cipher` must cover the whole alphabet.
        - `guessed` must agree with the cipher and only name letters in play.
        - `selected`, if set, must be an unrevealed letter in play.
        - `status` must match the one derived from the counters.
        """
        solution = (self.solution or "").upper()
        if not any(is_letter(ch) for ch in solution):
            raise EmptySolution("The solution must contain at least one letter (A–Z).")
        object.__setattr__(self, "solution", solution)

        if set(self.cipher.mapping) != set(ALPHABET):
            raise ValueError("`cipher` must map every letter A–Z.")
        encrypted = encrypt(solution, self.cipher.mapping)
        object.__setattr__(self, "encrypted", encrypted)
        in_play = frozenset(ch for ch in encrypted if is_letter(ch))

        guessed: Dict[str, str] = {}
        for coded, plain in dict(self.guessed).items():
            coded, plain = coded.upper(), plain.upper()
            if coded not in in_play:
                raise ValueError(f"Guessed letter {coded!r} does not appear in the puzzle.")
            if self.cipher.inverse[coded] != plain:
                raise ValueError(f"Guessed mapping {coded!r}->{plain!r} disagrees with the cipher.")
            guessed[coded] = plain
        object.__setattr__(self, "guessed", MappingProxyType(guessed))

        wrong: Dict[str, FrozenSet[str]] = {}
        for coded, letters in dict(self.incorrect_guesses).items():
            coded = coded.upper()
            if coded not in in_play:
                raise ValueError(f"Incorrect guesses recorded for unknown letter {coded!r}.")
            wrong[coded] = frozenset(ch.upper() for ch in letters)
        object.__setattr__(self, "incorrect_guesses", MappingProxyType(wrong))

        if self.selected is not None:
            selected = self.selected.upper()
            if selected not in in_play or selected in guessed:
                raise ValueError("`selected` must be an unrevealed letter of the puzzle.")
            object.__setattr__(self, "selected", selected)

        if self.max_mistakes < 1:
            raise ValueError("`max_mistakes` must be >= 1.")
        if self.mistakes < 0:
            raise ValueError("`mistakes` must be >= 0.")
        if len(self.mask) != 1:
            raise ValueError("`mask` must be a single character.")

        object.__setattr__(self, "tier", normalize_tier(self.tier))

        started_at = _as_utc(self.started_at)
        last_action_at = _as_utc(self.last_action_at)
        if last_action_at < started_at:
            raise ValueError("`last_action_at` must not precede `started_at`.")
        object.__setattr__(self, "started_at", started_at)
        object.__setattr__(self, "last_action_at", last_action_at)

        if self.status not in STATUSES:
            raise ValueError("`status` must be one of {'in_progress', 'won', 'lost'}.")
        expected = derive_status(in_play, guessed, self.mistakes, self.max_mistakes)
        if self.status != expected:
            raise ValueError(f"`status` is {self.status!r} but the puzzle fields imply {expected!r}.")

    # --- derived views ---

    @property
    def cipher_letters(self) -> FrozenSet[str]:
        """Distinct cipher letters that appear in `encrypted`."""
        return frozenset(ch for ch in self.encrypted if is_letter(ch))

    @property
    def display(self) -> str:
        return mask_text(self.solution, self.encrypted, self.guessed, self.mask)

    @property
    def is_terminal(self) -> bool:
        return self.status != "in_progress"

    @property
    def letter_frequency(self) -> Dict[str, int]:
        """How many times each cipher letter occurs in `encrypted`."""
        return dict(Counter(ch for ch in self.encrypted if is_letter(ch)))

    @property
    def unique_encrypted_letters(self) -> List[str]:
        """Distinct cipher letters in order of first appearance."""
        return list(dict.fromkeys(ch for ch in self.encrypted if is_letter(ch)))

    @property
    def unique_solution_letters(self) -> List[str]:
        return sorted({ch for ch in self.solution if is_letter(ch)})

    @property
    def remaining_letters(self) -> List[str]:
        """Cipher letters still hidden, sorted."""
        return sorted(self.cipher_letters - set(self.guessed))

    @property
    def completion(self) -> float:
        return len(self.guessed) / len(self.cipher_letters)

    @property
    def mistakes_remaining(self) -> int:
        return max(0, self.max_mistakes - self.mistakes)

    def is_letter_guessed(self, cipher_letter: str) -> bool:
        return (cipher_letter or "").upper() in self.guessed
