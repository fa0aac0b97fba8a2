from .dice import evaluate, explain, roll_from_text
from .errors import DiceError
from .models import AtomicRoll, CombinedResult, CombinedRoll, RollExpression, RollResult, average, describe
from .parser import parse_request, parse_roll_set

__all__ = [
    "AtomicRoll",
    "CombinedResult",
    "CombinedRoll",
    "DiceError",
    "RollExpression",
    "RollResult",
    "average",
    "describe",
    "evaluate",
    "explain",
    "parse_request",
    "parse_roll_set",
    "roll_from_text",
]
