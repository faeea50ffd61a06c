from __future__ import annotations

import random
import string
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

# Letters the engine encrypts; everything else passes through untouched.
ALPHABET = string.ascii_uppercase

MASK_GLYPH = "_"


def is_letter(ch: str) -> bool:
    """True for exactly one of the 26 uppercase A–Z letters."""
    return len(ch) == 1 and ch in ALPHABET


@dataclass(frozen=True)
class Cipher:
    """
    A substitution cipher held in both directions.

    Notes
    -----
    - `mapping` sends plaintext letters to cipher letters, `inverse` sends
      them back. Both are read-only views built once by `generate`.
    - Fixed points (a letter mapping to itself) are legal.
    """

    mapping: Mapping[str, str]
    inverse: Mapping[str, str]

    def __post_init__(self) -> None:
        mapping = dict(self.mapping)
        inverse = dict(self.inverse)
        if set(mapping.values()) != set(mapping):
            raise ValueError("`mapping` must be a permutation of its own letters.")
        if inverse != {c: p for p, c in mapping.items()}:
            raise ValueError("`inverse` must be the exact inverse of `mapping`.")
        object.__setattr__(self, "mapping", MappingProxyType(mapping))
        object.__setattr__(self, "inverse", MappingProxyType(inverse))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "Cipher":
        """Build a cipher from a plaintext -> cipher mapping, deriving the inverse."""
        return cls(mapping=dict(mapping), inverse={c: p for p, c in mapping.items()})


def generate(letters: Iterable[str] = ALPHABET, rng: Optional[random.Random] = None) -> Cipher:
    """
    Produce a uniformly random bijection over `letters`.

    Parameters
    ----------
    letters : Iterable[str]
        The alphabet to permute (default: A–Z). Must not contain duplicates.
    rng : random.Random | None
        Random source to shuffle with. Pass a seeded instance for reproducible
        puzzles; `None` creates a fresh unseeded one.

    Returns
    -------
    Cipher
        The permutation in both directions.
    """
    source: List[str] = list(letters)
    if len(set(source)) != len(source):
        raise ValueError("`letters` must not contain duplicates.")
    targets = list(source)
    (rng or random.Random()).shuffle(targets)
    return Cipher.from_mapping(dict(zip(source, targets)))


def encrypt(solution: str, mapping: Mapping[str, str]) -> str:
    """Replace every A–Z letter with its cipher image; keep other characters."""
    return "".join(mapping[ch] if is_letter(ch) else ch for ch in solution)


def decrypt(encrypted: str, inverse: Mapping[str, str]) -> str:
    """Undo `encrypt` using the inverse mapping."""
    return "".join(inverse[ch] if is_letter(ch) else ch for ch in encrypted)


def initial_display(solution: str, mask: str = MASK_GLYPH) -> str:
    """Mask every letter of `solution`, e.g. 'HI, YOU' -> '__, ___'."""
    return "".join(mask if is_letter(ch) else ch for ch in solution)


def mask_text(solution: str, encrypted: str, guessed: Mapping[str, str], mask: str = MASK_GLYPH) -> str:
    """
    Return the player's view of the puzzle.

    A position shows its plaintext letter once the cipher letter at that
    position is a key of `guessed`, otherwise the mask glyph. Non-letters are
    copied from the solution as-is.
    """
    out = []
    for plain, coded in zip(solution, encrypted):
        if not is_letter(coded):
            out.append(plain)
        elif coded in guessed:
            out.append(plain)
        else:
            out.append(mask)
    return "".join(out)
