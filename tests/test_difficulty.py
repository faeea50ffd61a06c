import pytest

from decodey.core.difficulty import classify, max_mistakes, normalize_tier, resolve_tier


@pytest.mark.parametrize(
    "value, tier",
    [
        (0.0, "easy"),
        (0.99, "easy"),
        (-2.0, "easy"),
        (1.0, "medium"),
        (2.99, "medium"),
        (3.0, "hard"),
        (42.0, "hard"),
        (float("inf"), "hard"),
        (float("nan"), "medium"),
    ],
)
def test_classify_uses_half_open_bands(value, tier):
    assert classify(value) == tier


@pytest.mark.parametrize("tier, budget", [("easy", 8), ("medium", 5), ("hard", 3)])
def test_max_mistakes_per_tier(tier, budget):
    assert max_mistakes(tier) == budget


def test_max_mistakes_defaults_to_medium_for_unknown_tiers():
    assert max_mistakes("nightmare") == 5
    assert max_mistakes("") == 5
    assert max_mistakes(" HARD ") == 3


def test_normalize_and_resolve_tier():
    assert normalize_tier("Easy") == "easy"
    assert normalize_tier("unknown") == "medium"
    assert resolve_tier(0.5) == "easy"
    assert resolve_tier(3) == "hard"
    assert resolve_tier("hard") == "hard"


def test_non_string_tiers_fall_back_to_medium():
    assert max_mistakes(2) == 5
    assert normalize_tier(None) == "medium"
