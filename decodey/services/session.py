from __future__ import annotations

import random
from datetime import datetime
from typing import Optional, Union

from decodey.config import Settings, load_settings
from decodey.core.engine import new_puzzle
from decodey.core.state import Puzzle


def make_rng(settings: Settings) -> random.Random:
    """A private random source, seeded when `DECODEY_SEED` is configured."""
    return random.Random(settings.seed)


def start_puzzle(
    quote: str,
    difficulty: Optional[Union[float, str]] = None,
    *,
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    game_id: Optional[str] = None,
) -> Puzzle:
    """
    Start a puzzle the way the host application is configured to.

    Parameters
    ----------
    quote : str
        Plaintext handed over by the content side.
    difficulty : float | str | None
        The quote's difficulty; falls back to `settings.default_difficulty`.
    settings : Settings | None
        Host settings; loaded from the environment when omitted.
    rng : random.Random | None
        Reuse an existing random source (e.g. one per session). When omitted a
        new one is made from `settings.seed`.
    """
    settings = settings or load_settings()
    return new_puzzle(
        quote,
        settings.default_difficulty if difficulty is None else difficulty,
        rng=rng or make_rng(settings),
        now=now,
        mask=settings.mask_glyph,
        game_id=game_id,
    )
