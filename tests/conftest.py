import random
import string
from datetime import datetime, timedelta, timezone

import pytest

from decodey.core.cipher import Cipher
from decodey.core.state import Puzzle

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def forced_cipher(**pairs):
    """A full A–Z cipher with the given plain->cipher pairs and the rest filled in order."""
    mapping = {p.upper(): c.upper() for p, c in pairs.items()}
    free_targets = [ch for ch in string.ascii_uppercase if ch not in mapping.values()]
    for plain in string.ascii_uppercase:
        if plain not in mapping:
            mapping[plain] = free_targets.pop(0)
    return Cipher.from_mapping(mapping)


def make_puzzle(solution, max_mistakes=5, tier="medium", **pairs):
    return Puzzle(
        solution=solution,
        cipher=forced_cipher(**pairs),
        max_mistakes=max_mistakes,
        tier=tier,
        started_at=T0,
        last_action_at=T0,
    )


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def t0():
    return T0


@pytest.fixture()
def later():
    return lambda seconds: T0 + timedelta(seconds=seconds)


@pytest.fixture()
def ab_puzzle():
    # "AB" with A->X and B->Y
    return make_puzzle("AB", A="X", B="Y")


@pytest.fixture()
def quote_puzzle():
    # HELLO, WORLD! -> letters H E L O W R D; L repeats
    return make_puzzle("Hello, world!", H="Q", E="Z", L="M", O="A", W="B", R="C", D="F")


@pytest.fixture()
def puzzle_factory():
    return make_puzzle


@pytest.fixture()
def cipher_factory():
    return forced_cipher
