"""Backtracking recursive-descent parser for dice notation.

    RollSet       ::= RollGroup (';' RollGroup)*
    RollGroup     ::= (Integer 'x')? DiceChain
    DiceChain     ::= DiceTerm ('&' DiceChain)?
    DiceTerm      ::= Integer? 'd' Integer SignedInteger?
    SignedInteger ::= ('+' | '-') Integer

Every rule returns ``None`` on a miss and, through ``_rule``, leaves the cursor
where it found it.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, TypeVar

from .cursor import Cursor
from .errors import DiceError
from .models import AtomicRoll, CombinedRoll, ParsedRollRequest, RollExpression, describe, term_count


logger = logging.getLogger(__name__)

T = TypeVar("T")

# A repeat group before expansion: (times, expression).
Group = tuple[int, RollExpression]

_EXAMPLE = "Example: '4x3d8-5 & 2d6 ; d20'."


def _rule(func: Callable[[Cursor], T | None]) -> Callable[[Cursor], T | None]:
    """Roll the cursor back to where the rule started whenever it misses."""

    @functools.wraps(func)
    def wrapper(cursor: Cursor) -> T | None:
        saved = cursor.snapshot()
        result = func(cursor)
        if result is None:
            cursor.restore(saved)
        return result

    return wrapper


@_rule
def _dice_term(cursor: Cursor) -> AtomicRoll | None:
    count = cursor.read_unsigned_int()
    if count is None:
        count = 1

    if not cursor.match_literal("d"):
        return None

    sides = cursor.read_unsigned_int()
    if sides is None:
        return None

    bonus = cursor.read_signed_int(require_sign=True)
    if bonus is None:
        bonus = 0

    # Zero counts and sides are syntax errors, not degenerate rolls.
    if count < 1 or sides < 1:
        return None

    return AtomicRoll(count=count, sides=sides, bonus=bonus)


@_rule
def _dice_chain(cursor: Cursor) -> RollExpression | None:
    terms: list[AtomicRoll] = []
    while True:
        term = _dice_term(cursor)
        if term is None:
            return None
        terms.append(term)
        if not cursor.match_literal("&"):
            break

    # Fold from the right: a & b & c is Combined(a, Combined(b, c)).
    expr: RollExpression = terms.pop()
    for term in reversed(terms):
        expr = CombinedRoll(left=term, right=expr)
    return expr


@_rule
def _repeat_prefix(cursor: Cursor) -> int | None:
    times = cursor.read_unsigned_int()
    if times is None or not cursor.match_literal("x"):
        return None
    return times


@_rule
def _roll_group(cursor: Cursor) -> Group | None:
    times = _repeat_prefix(cursor)
    if times is None:
        times = 1
    elif times < 1:
        return None

    expr = _dice_chain(cursor)
    if expr is None:
        return None
    return times, expr


@_rule
def _roll_set(cursor: Cursor) -> list[Group] | None:
    groups: list[Group] = []
    while True:
        group = _roll_group(cursor)
        if group is None:
            return None
        groups.append(group)
        if not cursor.match_literal(";"):
            break

    if not cursor.is_exhausted():
        return None
    return groups


def parse_groups(text: str) -> list[Group] | None:
    """Parse ``text`` into unexpanded ``(times, expression)`` groups, or ``None``."""
    cursor = Cursor(text.lower())
    groups = _roll_set(cursor)
    if groups is None:
        logger.debug("Rejected dice notation %r", text)
    return groups


def _expand(groups: list[Group]) -> list[RollExpression]:
    return [expr for times, expr in groups for _ in range(times)]


def parse_roll_set(text: str) -> list[RollExpression] | None:
    """Parse a full roll set.

    Returns the expressions in input order, with every ``NxExpr`` group
    expanded to N entries, or ``None`` when ``text`` is not valid notation.
    A partial list is never returned.

    Repeat groups are expanded without a bound, so ``2147483647x d6`` builds a
    list of that length. For untrusted input use ``parse_groups``, which keeps
    groups unexpanded, or ``parse_request`` with ``max_expressions``.
    """
    groups = parse_groups(text)
    if groups is None:
        return None
    return _expand(groups)


def parse_request(
    text: str,
    max_expressions: int | None = None,
    max_terms: int | None = None,
) -> ParsedRollRequest:
    """Raising variant of ``parse_roll_set`` for user-facing callers.

    ``max_expressions`` bounds the expanded number of rolls and ``max_terms``
    the number of ``&``-joined terms in any one roll; both are checked before
    groups are expanded.
    """
    if not text or not text.strip():
        raise DiceError(f"[UNPARSEABLE_INPUT] Empty input. {_EXAMPLE}")

    groups = parse_groups(text)
    if groups is None:
        raise DiceError(f"[UNPARSEABLE_INPUT] Could not understand '{text.strip()}'. {_EXAMPLE}")

    if max_expressions is not None:
        requested = sum(times for times, _ in groups)
        if requested > max_expressions:
            raise DiceError(
                f"[TOO_MANY_ROLLS] {requested} rolls requested, at most {max_expressions} are allowed. {_EXAMPLE}"
            )

    if max_terms is not None:
        longest = max(term_count(expr) for _, expr in groups)
        if longest > max_terms:
            raise DiceError(
                f"[TOO_MANY_TERMS] A roll joins {longest} terms with '&', at most {max_terms} are allowed. {_EXAMPLE}"
            )

    expressions = _expand(groups)
    return ParsedRollRequest(
        input=text,
        expressions=expressions,
        normalized_expressions=[describe(expr) for expr in expressions],
    )
