from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from .difficulty import normalize_tier

_BASE_POINTS = {
    "easy": 100,
    "medium": 200,
    "hard": 300,
}

MISTAKE_PENALTY = 20

# Daily-streak boost: +5% per consecutive day, capped at 20 days (2x).
STREAK_BOOST_PERCENT = 5
MAX_STREAK_DAYS = 20
MAX_STREAK_PERCENT = 100


def time_adjustment(elapsed_seconds: float) -> int:
    """
    Bonus or penalty for solving speed.

    Bands
    -----
    - under 1 minute      : +50
    - 1 to 3 minutes      : +30
    - 3 to 5 minutes      : +10
    - 5 to 10 minutes     :   0 (10 minutes inclusive)
    - over 10 minutes     : -20
    """
    t = elapsed_seconds
    if t < 60:
        return 50
    if t < 180:
        return 30
    if t < 300:
        return 10
    if t <= 600:
        return 0
    return -20


def score(tier: str, mistakes: int, elapsed_seconds: float) -> int:
    """
    Score a finished puzzle.

    `max(0, base(tier) + time_adjustment(elapsed) - 20 * mistakes)`, where the
    base is 100/200/300 for easy/medium/hard and unknown tiers score as medium.
    Lost games are scored the same way; whether to keep that score is up to
    the caller.
    """
    base = _BASE_POINTS[normalize_tier(tier)]
    return max(0, base + time_adjustment(elapsed_seconds) - mistakes * MISTAKE_PENALTY)


def boost_percentage(streak_days: int) -> int:
    """Whole-percent boost for a streak: 5 per day, at most 100."""
    days = min(max(0, streak_days), MAX_STREAK_DAYS)
    return min(days * STREAK_BOOST_PERCENT, MAX_STREAK_PERCENT)


def streak_multiplier(streak_days: int) -> float:
    """1.0 with no streak, +0.05 per day, never above 2.0."""
    return 1.0 + boost_percentage(streak_days) / 100


def apply_streak_boost(points: int, streak_days: int) -> int:
    # Exact in integers: 200 with a 15% boost is 230.
    return points * (100 + boost_percentage(streak_days)) // 100


def daily_streak(win_dates: Iterable[date], today: date) -> int:
    """
    Count consecutive days, ending `today`, with at least one daily win.

    Dates after `today` are ignored; several wins on one day count once.
    """
    days = {d for d in win_dates if d <= today}
    streak = 0
    cursor = today
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak
