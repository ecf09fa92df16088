"""
Calculator Provider - Inline math evaluation in search.

Triggers on an "=" prefix ("= sqrt(16)") or on a bare arithmetic
expression ("2 + 3 * 4"). Uses simpleeval for safe evaluation (no access
to builtins, filesystem, or imports). Selecting the result copies the
value to the clipboard.
"""

import math
import re
from typing import Iterator

from loguru import logger
from simpleeval import InvalidExpression, simple_eval

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import CopyToClipboard, CustomCategory, Result
from omnibar.search.provider import Provider

CALCULATOR = CustomCategory("calculator")

# Digits, operators, parentheses and whitespace; at least one operator.
# Operand and operator classes must stay disjoint or matching backtracks
ARITHMETIC = re.compile(r"^[\d.\s()]+(?:[+\-*/%^][\d.\s()]+)+$")
LEADING_NUMBER = re.compile(r"^[.\s()]*\d")
MAX_EXPRESSION_LENGTH = 256

FUNCTIONS = {
    "sqrt": math.sqrt,
    "abs": abs,
    "round": round,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "log": math.log,
    "log10": math.log10,
    "pow": pow,
    "min": min,
    "max": max,
}

NAMES = {
    "pi": math.pi,
    "e": math.e,
}


class CalculatorProvider(Provider):
    """Evaluate math expressions."""

    name = "calculator"

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        expr = self._expression(query)
        if not expr:
            return

        try:
            value = simple_eval(expr.replace("^", "**"), functions=FUNCTIONS, names=NAMES)
        except InvalidExpression:
            logger.debug(f"Not a valid expression: {expr[:60]}")
            return
        except (TypeError, ValueError, ZeroDivisionError, OverflowError, SyntaxError) as e:
            logger.debug(f"Math error for '{expr[:60]}': {e}")
            return

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return

        display = self._format(value)
        yield Result(
            id=f"calc_{expr}",
            title=f"{expr} = {display}",
            subtitle="Calculator result • Press Enter to copy",
            icon="accessories-calculator",
            category=CALCULATOR,
            action=CopyToClipboard(display),
            relevance_score=1.0,
        )

    def _expression(self, query: str) -> str:
        q = query.strip()
        if len(q) > MAX_EXPRESSION_LENGTH:
            return ""
        if q.startswith("="):
            return q.lstrip("=").strip()
        if LEADING_NUMBER.match(q) and ARITHMETIC.match(q):
            return q
        return ""

    def _format(self, value) -> str:
        if isinstance(value, float):
            if math.isfinite(value) and value == int(value):
                return str(int(value))
            return f"{value:.10g}"
        return str(value)
