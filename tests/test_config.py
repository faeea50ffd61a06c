import logging

from decodey.config import DEFAULT_DIFFICULTY, Settings, configure_logging, load_settings
from decodey.services.session import start_puzzle


def test_defaults_from_an_empty_environment():
    s = load_settings({})
    assert s == Settings()
    assert s.default_difficulty == DEFAULT_DIFFICULTY


def test_values_are_parsed():
    s = load_settings(
        {
            "DECODEY_SEED": "42",
            "DECODEY_MASK_GLYPH": "*",
            "DECODEY_DEFAULT_DIFFICULTY": "3.5",
            "DECODEY_LOG_LEVEL": "debug",
        }
    )
    assert s.seed == 42
    assert s.mask_glyph == "*"
    assert s.default_difficulty == 3.5
    assert s.log_level == "DEBUG"


def test_invalid_values_fall_back():
    s = load_settings(
        {
            "DECODEY_SEED": "abc",
            "DECODEY_MASK_GLYPH": "**",
            "DECODEY_LOG_LEVEL": "chatty",
        }
    )
    assert s.seed is None
    assert s.mask_glyph == "_"
    assert s.log_level == "WARNING"


def test_tier_name_as_default_difficulty():
    assert load_settings({"DECODEY_DEFAULT_DIFFICULTY": "Hard"}).default_difficulty == "hard"


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("DECODEY_MASK_GLYPH=@\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DECODEY_MASK_GLYPH", "x")
    monkeypatch.delenv("DECODEY_MASK_GLYPH")
    assert load_settings().mask_glyph == "@"


def test_real_environment_wins_over_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("DECODEY_MASK_GLYPH=@\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DECODEY_MASK_GLYPH", "?")
    assert load_settings().mask_glyph == "?"


def test_configure_logging_sets_root_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    configure_logging(Settings(log_level="DEBUG"))
    assert calls["level"] == "DEBUG"


def test_start_puzzle_uses_settings(t0):
    settings = Settings(seed=7, mask_glyph="*", default_difficulty=0.5)
    a = start_puzzle("Seeded quote", settings=settings, now=t0, game_id="daily-1")
    b = start_puzzle("Seeded quote", settings=settings, now=t0)
    assert a.encrypted == b.encrypted
    assert a.display == "****** *****"
    assert a.tier == "easy"
    assert a.max_mistakes == 8
    assert a.game_id == "daily-1"


def test_start_puzzle_explicit_difficulty_wins(t0):
    p = start_puzzle("Quote", 4.0, settings=Settings(seed=1), now=t0)
    assert p.tier == "hard"
