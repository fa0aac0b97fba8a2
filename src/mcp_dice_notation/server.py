from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import settings
from .dice import DiceError, roll_from_text
from .models import average
from .parser import parse_request


mcp = FastMCP("mcp-dice-notation")


@mcp.tool()
def roll_dice(text: str):
    """Roll dice written in dice notation.

    Input: text (string), e.g. '4x3d8-5 & 2d6 ; d20'
      - 'NxROLL' repeats a roll N times
      - '&' adds two rolls into one total
      - ';' separates independent rolls
    Output: structured JSON with audit details + explanation

    Raises a hard error (exception) on invalid input.
    """

    try:
        return roll_from_text(text)
    except DiceError as e:
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None


@mcp.tool()
def describe_dice(text: str):
    """Normalize dice notation without rolling, with the expected total of each roll."""

    try:
        parsed = parse_request(
            text, max_expressions=settings.max_expressions, max_terms=settings.max_terms
        )
    except DiceError as e:
        raise ValueError(str(e)) from None

    return {
        "input": text,
        "rolls": [
            {"expression": normalized, "average": average(expr)}
            for expr, normalized in zip(parsed.expressions, parsed.normalized_expressions)
        ],
    }


def run() -> None:
    # stdout carries the stdio transport, so logs go to stderr.
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    run()
