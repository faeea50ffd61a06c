from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv

from .core.cipher import MASK_GLYPH

# Quotes without their own difficulty are rated 2.0 (medium).
DEFAULT_DIFFICULTY = 2.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Host-level knobs read from the environment (and an optional `.env`)."""
    seed: Optional[int] = None
    mask_glyph: str = MASK_GLYPH
    default_difficulty: Union[float, str] = DEFAULT_DIFFICULTY
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_seed(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_difficulty(raw: str) -> Union[float, str]:
    raw = raw.strip()
    if not raw:
        return DEFAULT_DIFFICULTY
    try:
        return float(raw)
    except ValueError:
        return raw.lower()  # a tier name; unknown names resolve to medium later


def load_settings(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> Settings:
    """
    Build `Settings` from environment variables.

    Variables
    ---------
    - DECODEY_SEED               : integer seed for reproducible puzzles (optional)
    - DECODEY_MASK_GLYPH         : single character shown for hidden letters
    - DECODEY_DEFAULT_DIFFICULTY : number or tier name used when a quote has none
    - DECODEY_LOG_LEVEL          : logging level name for `configure_logging`

    Invalid values fall back to the defaults. When `env` is omitted, a `.env`
    file found from the working directory upwards is loaded first, without
    overriding real environment variables.
    """
    if env is None:
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True), override=False)
        env = os.environ

    seed = _parse_seed(env.get("DECODEY_SEED", "").strip())

    mask = env.get("DECODEY_MASK_GLYPH", MASK_GLYPH)
    if len(mask) != 1:
        mask = MASK_GLYPH

    difficulty = _parse_difficulty(env.get("DECODEY_DEFAULT_DIFFICULTY", ""))

    level = env.get("DECODEY_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        level = DEFAULT_LOG_LEVEL

    return Settings(seed=seed, mask_glyph=mask, default_difficulty=difficulty, log_level=level)


def configure_logging(settings: Settings) -> None:
    """Install a basic console handler at the configured level (host use only)."""
    logging.basicConfig(level=settings.log_level, format="[%(levelname)s] %(name)s: %(message)s")
