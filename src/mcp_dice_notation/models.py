from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, TypeAlias

from .errors import DiceError


@dataclass(frozen=True)
class AtomicRoll:
    sides: int
    count: int = 1
    bonus: int = 0

    def __post_init__(self) -> None:
        if self.count < 1 or self.sides < 1:
            raise DiceError(
                f"[INVALID_DIE] Dice count and sides must be positive integers, got {self.count}d{self.sides}. Example: '3d6+2'."
            )


@dataclass(frozen=True)
class CombinedRoll:
    left: RollExpression
    right: RollExpression


RollExpression: TypeAlias = AtomicRoll | CombinedRoll


@dataclass(frozen=True)
class RollResult:
    """Face values in roll order plus the fixed bonus."""

    rolls: tuple[int, ...]
    bonus: int = 0

    @property
    def total(self) -> int:
        return sum(self.rolls) + self.bonus


@dataclass(frozen=True)
class CombinedResult:
    """Both sides of a combined roll, kept apart so each subtotal can be reported.

    ``rolls`` and ``bonus`` flatten the two sides (left first) so a combined
    result reads like a plain one.
    """

    left: Outcome
    right: Outcome

    @property
    def rolls(self) -> tuple[int, ...]:
        return self.left.rolls + self.right.rolls

    @property
    def bonus(self) -> int:
        return self.left.bonus + self.right.bonus

    @property
    def subtotals(self) -> tuple[int, int]:
        return self.left.total, self.right.total

    @property
    def total(self) -> int:
        return self.left.total + self.right.total


Outcome: TypeAlias = RollResult | CombinedResult


@dataclass(frozen=True)
class ParsedRollRequest:
    input: str
    expressions: list[RollExpression]
    normalized_expressions: list[str]


def atomic_terms(expr: RollExpression) -> Iterator[AtomicRoll]:
    """Yield the atomic rolls of ``expr`` left to right, without recursion."""
    stack: list[RollExpression] = [expr]
    while stack:
        match stack.pop():
            case AtomicRoll() as atom:
                yield atom
            case CombinedRoll(left=left, right=right):
                stack.append(right)
                stack.append(left)


def _describe_atomic(atom: AtomicRoll) -> str:
    text = f"{atom.count}d{atom.sides}"
    if atom.bonus > 0:
        return f"{text}+{atom.bonus}"
    if atom.bonus < 0:
        return f"{text}{atom.bonus}"
    return text


def describe(expr: RollExpression) -> str:
    """Canonical notation for ``expr``, e.g. ``3d8-5`` or ``1d6 & 2d4+3``."""
    return " & ".join(_describe_atomic(atom) for atom in atomic_terms(expr))


def average(expr: RollExpression) -> float:
    """Expected total of one evaluation of ``expr``."""
    return sum(atom.count * (atom.sides + 1) / 2 + atom.bonus for atom in atomic_terms(expr))


def dice_count(expr: RollExpression) -> int:
    return sum(atom.count for atom in atomic_terms(expr))


def term_count(expr: RollExpression) -> int:
    return sum(1 for _ in atomic_terms(expr))
