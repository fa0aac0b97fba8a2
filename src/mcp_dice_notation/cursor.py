from __future__ import annotations


# Largest value the integer reader accepts; longer digit runs are "no match".
MAX_INT = 2**31 - 1

_DIGITS = frozenset("0123456789")
_MAX_DIGITS = len(str(MAX_INT))


class Cursor:
    """Mutable view over the unconsumed part of an input string.

    Every read skips leading whitespace first. Misses are reported as ``None``
    or ``False`` and leave the cursor untouched.
    """

    def __init__(self, text: str) -> None:
        self._remaining = text

    def __repr__(self) -> str:
        return f"Cursor({self._remaining!r})"

    @property
    def remaining(self) -> str:
        return self._remaining

    def _skip_whitespace(self) -> None:
        self._remaining = self._remaining.lstrip()

    def is_exhausted(self) -> bool:
        self._skip_whitespace()
        return not self._remaining

    def read_unsigned_int(self) -> int | None:
        self._skip_whitespace()
        end = 0
        while end < len(self._remaining) and self._remaining[end] in _DIGITS:
            end += 1
        if end == 0:
            return None

        # Bound the length first; int() refuses very long digit strings.
        digits = self._remaining[:end].lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS:
            return None

        value = int(digits)
        if value > MAX_INT:
            return None

        self._remaining = self._remaining[end:]
        return value

    def read_signed_int(self, require_sign: bool = False) -> int | None:
        """Read ``[+-]digits``; a bare digit run is accepted unless ``require_sign``."""
        self._skip_whitespace()
        saved = self.snapshot()
        for sign, factor in (("+", 1), ("-", -1)):
            if self.match_literal(sign):
                value = self.read_unsigned_int()
                if value is None:
                    self.restore(saved)
                    return None
                return factor * value
        if require_sign:
            return None
        return self.read_unsigned_int()

    def match_literal(self, literal: str) -> bool:
        self._skip_whitespace()
        if not self._remaining.startswith(literal):
            return False
        self._remaining = self._remaining[len(literal):]
        return True

    def snapshot(self) -> Cursor:
        # str is immutable, so sharing it gives the copy value semantics.
        return Cursor(self._remaining)

    def restore(self, snapshot: Cursor) -> None:
        self._remaining = snapshot._remaining
