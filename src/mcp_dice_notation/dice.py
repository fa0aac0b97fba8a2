from __future__ import annotations

import functools
import logging
import random
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from .config import Settings, settings as default_settings
from .errors import DiceError
from .models import (
    AtomicRoll,
    CombinedResult,
    CombinedRoll,
    Outcome,
    RollExpression,
    RollResult,
    dice_count,
    describe,
)
from .parser import parse_request


logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


# OS-backed, so safe to share between threads.
_SYSTEM_RANDOM = secrets.SystemRandom()


@functools.lru_cache(maxsize=None)
def _seeded_random(seed: int) -> random.Random:
    # One generator per seed for the whole process, so successive requests
    # continue the sequence instead of replaying it.
    return random.Random(seed)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def evaluate(expr: RollExpression, rng: RandomSource | None = None) -> Outcome:
    """Roll ``expr`` once.

    Atomic rolls give a ``RollResult``; combined rolls give a ``CombinedResult``
    whose sides were rolled independently. Every call draws fresh values.
    Recursion follows the tree, one level per ``&``; user input is bounded by
    ``parse_request(max_terms=...)``.
    """
    if rng is None:
        rng = _SYSTEM_RANDOM

    match expr:
        case AtomicRoll(count=count, sides=sides, bonus=bonus):
            rolls: list[int] = []
            for _ in range(count):
                value = rng.randint(1, sides)
                logger.debug("Rolled d%d: %d", sides, value)
                rolls.append(value)
            result = RollResult(rolls=tuple(rolls), bonus=bonus)
            logger.debug("%s => %d", describe(expr), result.total)
            return result
        case CombinedRoll(left=left, right=right):
            return CombinedResult(left=evaluate(left, rng), right=evaluate(right, rng))


def explain(expr: RollExpression, outcome: Outcome) -> str:
    """Human readable breakdown, e.g. ``3d6+2: rolls [4, 1, 6] => 13``."""
    match expr, outcome:
        case AtomicRoll(), RollResult():
            return f"{describe(expr)}: rolls {list(outcome.rolls)} => {outcome.total}"
        case CombinedRoll(left=left, right=right), CombinedResult():
            return f"({explain(left, outcome.left)}) & ({explain(right, outcome.right)}) => {outcome.total}"
    raise TypeError(f"Result {outcome!r} does not belong to {describe(expr)}")


def _outcome_payload(expr: RollExpression, outcome: Outcome) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "expression": describe(expr),
        "rolls": list(outcome.rolls),
        "bonus": outcome.bonus,
        "total": outcome.total,
    }
    if isinstance(expr, CombinedRoll) and isinstance(outcome, CombinedResult):
        payload["subtotals"] = list(outcome.subtotals)
        payload["parts"] = [
            _outcome_payload(expr.left, outcome.left),
            _outcome_payload(expr.right, outcome.right),
        ]
    return payload


def roll_from_text(
    text: str,
    rng: RandomSource | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Parse, validate, then roll. Raises DiceError for invalid input."""
    cfg = settings or default_settings

    parsed = parse_request(text, max_expressions=cfg.max_expressions, max_terms=cfg.max_terms)

    requested_dice = sum(dice_count(expr) for expr in parsed.expressions)
    if requested_dice > cfg.max_dice:
        raise DiceError(
            f"[TOO_MANY_DICE] {requested_dice} dice requested, at most {cfg.max_dice} are allowed. Example: '4x3d8-5'."
        )

    if rng is not None:
        source = type(rng).__name__
    elif cfg.seed is not None:
        rng = _seeded_random(cfg.seed)
        source = f"random.Random(seed={cfg.seed})"
    else:
        rng = _SYSTEM_RANDOM
        source = "secrets.SystemRandom"

    results: list[dict[str, Any]] = []
    explanation_parts: list[str] = []
    for expr in parsed.expressions:
        outcome = evaluate(expr, rng)
        results.append(_outcome_payload(expr, outcome))
        explanation_parts.append(explain(expr, outcome))

    request_id = uuid.uuid4().hex
    logger.info(
        "Request %s rolled %s => %s",
        request_id,
        parsed.normalized_expressions,
        [r["total"] for r in results],
    )

    return {
        "request_id": request_id,
        "timestamp": _now_utc_iso(),
        "input": text,
        "normalized_expressions": parsed.normalized_expressions,
        "rng": {
            "source": source,
            "nonce": str(uuid.uuid4()),
        },
        "results": results,
        "totals": [r["total"] for r in results],
        "explanation": "; ".join(explanation_parts),
    }
