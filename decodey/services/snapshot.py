from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from decodey.core.cipher import ALPHABET, MASK_GLYPH, Cipher, mask_text
from decodey.core.errors import PuzzleError, SnapshotError
from decodey.core.state import Puzzle

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = (
    "game_id",
    "solution",
    "encrypted",
    "display",
    "mask",
    "mapping",
    "guessed",
    "incorrect_guesses",
    "mistakes",
    "max_mistakes",
    "status",
    "tier",
    "started_at",
    "last_action_at",
)


def to_snapshot(puzzle: Puzzle) -> Dict[str, Any]:
    """
    Serialize a puzzle into plain JSON-compatible values for storage.

    Notes
    -----
    - `selected` is deliberately absent: a restored game starts unselected.
    - `display` and `encrypted` are included for the convenience of the
      storage layer (listing screens, debugging) and are cross-checked on
      restore.
    - Timestamps are ISO 8601 strings in UTC.
    """
    return {
        "game_id": puzzle.game_id,
        "solution": puzzle.solution,
        "encrypted": puzzle.encrypted,
        "display": puzzle.display,
        "mask": puzzle.mask,
        "mapping": dict(sorted(puzzle.cipher.mapping.items())),
        "guessed": dict(sorted(puzzle.guessed.items())),
        "incorrect_guesses": {k: sorted(v) for k, v in sorted(puzzle.incorrect_guesses.items())},
        "mistakes": puzzle.mistakes,
        "max_mistakes": puzzle.max_mistakes,
        "status": puzzle.status,
        "tier": puzzle.tier,
        "started_at": puzzle.started_at.isoformat(),
        "last_action_at": puzzle.last_action_at.isoformat(),
    }


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise SnapshotError(f"Snapshot is missing {key!r}.")
    return data[key]


def _letter_map(raw: Any, key: str) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"Snapshot field {key!r} must be a mapping.")
    return {str(k).upper(): str(v).upper() for k, v in raw.items()}


def from_snapshot(data: Mapping[str, Any], *, mask: Optional[str] = None) -> Puzzle:
    """
    Rebuild a puzzle from `to_snapshot` output.

    The restored puzzle always has `selected = None`. `mask` overrides the
    stored mask glyph (for hosts whose configuration changed since the save).
    Anything malformed or inconsistent (a mapping that is not a permutation,
    stored `encrypted`/`display` that differ from the recomputed ones, a
    status the counters do not imply) raises `SnapshotError`.
    """
    stored_mask = str(data.get("mask") or MASK_GLYPH)
    try:
        mapping = _letter_map(_require(data, "mapping"), "mapping")
        if set(mapping) != set(ALPHABET):
            raise SnapshotError("Snapshot mapping must cover every letter A–Z.")
        wrong_raw = data.get("incorrect_guesses") or {}
        if not isinstance(wrong_raw, Mapping):
            raise SnapshotError("Snapshot field 'incorrect_guesses' must be a mapping.")
        puzzle = Puzzle(
            solution=str(_require(data, "solution")),
            cipher=Cipher.from_mapping(mapping),
            max_mistakes=int(_require(data, "max_mistakes")),
            tier=str(data.get("tier") or "medium"),
            started_at=datetime.fromisoformat(str(_require(data, "started_at"))),
            last_action_at=datetime.fromisoformat(str(_require(data, "last_action_at"))),
            guessed=_letter_map(data.get("guessed") or {}, "guessed"),
            incorrect_guesses={str(k): frozenset(v) for k, v in wrong_raw.items()},
            selected=None,
            mistakes=int(_require(data, "mistakes")),
            status=str(_require(data, "status")),  # type: ignore[arg-type]
            mask=mask or stored_mask,
            game_id=None if data.get("game_id") is None else str(data["game_id"]),
        )
    except SnapshotError as exc:
        logger.warning("snapshot rejected game_id=%s: %s", data.get("game_id"), exc)
        raise
    except (PuzzleError, TypeError, ValueError) as exc:
        logger.warning("snapshot rejected game_id=%s: %s", data.get("game_id"), exc)
        raise SnapshotError(f"Invalid snapshot: {exc}") from exc

    stored_view = mask_text(puzzle.solution, puzzle.encrypted, puzzle.guessed, stored_mask)
    for key, expected in (("encrypted", puzzle.encrypted), ("display", stored_view)):
        stored = data.get(key)
        if stored is not None and stored != expected:
            logger.warning("snapshot rejected game_id=%s: stale %s", data.get("game_id"), key)
            raise SnapshotError(f"Snapshot {key!r} does not match the restored puzzle.")
    return puzzle
