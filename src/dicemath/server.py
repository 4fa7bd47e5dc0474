from __future__ import annotations

import logging
import uuid
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import settings
from .dice import evaluate_text
from .errors import DiceMathError

log = logging.getLogger(__name__)

mcp = FastMCP("mcp-dicemath")


@mcp.tool()
def roll_dice(expression: str, variables: dict[str, int] | None = None) -> dict[str, Any]:
    """Evaluate a dice arithmetic expression such as ``3 d 6 + 2`` or ``(level + 1) d 8``.

    Input: expression (string), optional variables (name -> integer)
    Output: the canonical expression, its total, and every die rolled

    Raises a hard error (exception) on invalid input.
    """
    log.info("roll_dice %r", expression)
    try:
        evaluation = evaluate_text(
            expression,
            variables,
            max_dice=settings.max_dice,
            max_sides=settings.max_sides,
        )
    except DiceMathError as e:
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None

    return {
        "request_id": uuid.uuid4().hex,
        "expression": expression,
        "normalized_expression": evaluation.normalized_expression,
        "total": evaluation.total,
        "display": evaluation.display,
        "rolls": [
            {"count": r.count, "sides": r.sides, "rolls": list(r.rolls), "subtotal": r.subtotal}
            for r in evaluation.rolls
        ],
    }


def run() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
