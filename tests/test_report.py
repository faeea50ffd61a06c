import pytest

from decodey.core.engine import guess, select
from decodey.core.errors import PuzzleInProgress
from decodey.services.report import final_report


def test_report_for_a_won_game(puzzle_factory, later):
    p = puzzle_factory("AB", tier="hard", max_mistakes=3, A="X", B="Y")
    p = guess(select(p, "X"), "A", now=later(20)).puzzle
    p = guess(select(p, "Y"), "B", now=later(59)).puzzle
    report = final_report(p)
    assert report.status == "won"
    assert report.elapsed_seconds == 59
    assert report.mistakes == 0
    assert report.score == 350
    assert report.as_dict()["score"] == 350


def test_report_for_a_lost_game_is_still_scored(puzzle_factory, later):
    p = puzzle_factory("AB", tier="easy", max_mistakes=1, A="X", B="Y")
    p = guess(select(p, "X"), "Q", now=later(700)).puzzle
    report = final_report(p)
    assert report.status == "lost"
    assert report.score == 100 - 20 - 20


def test_report_applies_streak_boost(puzzle_factory, later):
    p = puzzle_factory("AB", tier="medium", A="X", B="Y")
    p = guess(select(p, "X"), "A", now=later(100)).puzzle
    p = guess(select(p, "Y"), "B", now=later(200)).puzzle
    assert final_report(p).score == 210
    assert final_report(p, streak_days=2).score == 231


def test_report_requires_a_finished_game(ab_puzzle):
    with pytest.raises(PuzzleInProgress):
        final_report(ab_puzzle)
