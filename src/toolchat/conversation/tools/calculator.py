"""
Arithmetic tool for the toolchat agentic loop.

Evaluates ``+ - * /`` expressions with parentheses and returns the result
formatted to two decimal places.

Two evaluation modes exist:

``left_to_right`` (default)
    Operators are applied strictly in the order they appear; only
    parentheses group.  ``"2+2*3"`` is ``(2+2)*3 = 12.00``.

``precedence``
    Conventional arithmetic: ``*`` and ``/`` bind tighter than ``+`` and
    ``-``.  ``"2+2*3"`` is ``8.00``.

Both modes degrade silently instead of raising: an operand that is not a
number counts as ``0``, a missing operand counts as ``0``, division by zero
yields ``0``, unbalanced parentheses are tolerated and absurdly deep nesting
evaluates to ``0``.  Each parenthesised group is rounded to two decimals
before it is used, so ``"(1/3)*3"`` is ``0.99``.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Literal

from toolchat.conversation.providers import ToolDefinition
from toolchat.conversation.tools.registry import ToolArguments

logger = logging.getLogger(__name__)

CalcMode = Literal["left_to_right", "precedence"]

# Operators and parentheses are single-character tokens; anything between
# them is one operand, parsed as a float or treated as 0.
_TOKEN_RE = re.compile(r"[-+*/()]|[^-+*/()]+")

_ADDITIVE = ("+", "-")
_MULTIPLICATIVE = ("*", "/")


def _to_number(token: str) -> float:
    try:
        value = float(token)
    except ValueError:
        logger.debug("Non-numeric operand %r treated as 0", token)
        return 0.0
    if not math.isfinite(value):
        logger.debug("Non-finite operand %r treated as 0", token)
        return 0.0
    return value


def _apply(op: str, left: float, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if right == 0:
        logger.debug("Division by zero treated as 0")
        return 0.0
    return left / right


def _round_group(value: float) -> float:
    return float(f"{value:.2f}")


class _Parser:
    """Single-pass recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[str], mode: CalcMode) -> None:
        self._tokens = tokens
        self._pos = 0
        self._mode = mode

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> str | None:
        token = self._peek()
        if token is not None:
            self._pos += 1
        return token

    def parse(self) -> float:
        # Stray closing parentheses and anything after them are ignored.
        return self._expression()

    def _expression(self) -> float:
        if self._mode == "left_to_right":
            return self._chain(self._operand, _ADDITIVE + _MULTIPLICATIVE)
        return self._chain(self._term, _ADDITIVE)

    def _term(self) -> float:
        return self._chain(self._operand, _MULTIPLICATIVE)

    def _chain(self, operand, operators: tuple[str, ...]) -> float:
        value = operand()
        while self._peek() in operators:
            op = self._next()
            value = _apply(op, value, operand())
        return value

    def _operand(self) -> float:
        token = self._peek()
        if token is None or token == ")":
            return 0.0
        if token in _ADDITIVE:
            self._next()
            value = self._operand()
            return -value if token == "-" else value
        if token == "(":
            self._next()
            value = self._expression()
            if self._peek() == ")":
                self._next()
            # A parenthesised group contributes its two-decimal rendering.
            return _round_group(value)
        if token in _MULTIPLICATIVE:
            # Missing left operand, e.g. "*3"; leave the operator for the caller.
            return 0.0
        self._next()
        return _to_number(token)


def evaluate(expression: str, mode: CalcMode = "left_to_right") -> float:
    """Evaluate *expression* and return the numeric result.

    Whitespace is ignored.  Never raises for malformed input.
    """
    compact = "".join(expression.split())
    tokens = _TOKEN_RE.findall(compact)
    if not tokens:
        return 0.0
    try:
        return _Parser(tokens, mode).parse()
    except RecursionError:
        logger.debug("Expression nested too deeply; treated as 0")
        return 0.0


def solve_math_expression(expression: str, mode: CalcMode = "left_to_right") -> str:
    """Evaluate *expression* and format the result to two decimal places."""
    result = evaluate(expression, mode)
    if result == 0:
        result = 0.0  # avoid "-0.00"
    return f"{result:.2f}"


class CalculatorTool:
    """Evaluates arithmetic expressions for the ``calc`` tool.

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for ``AgenticLoop``.
        mode: ``"left_to_right"`` or ``"precedence"``.
    """

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="calc",
        description="Evaluate a math expression and return a numeric result",
        parameters={
            "type": "object",
            "properties": {
                "expression": {
                    "type": "string",
                    "description": "A valid math expression, e.g. (2+2)*3",
                }
            },
            "required": ["expression"],
        },
    )

    class Arguments(ToolArguments):
        expression: str

    def __init__(self, mode: CalcMode = "left_to_right") -> None:
        self.mode = mode

    def calc(self, expression: str) -> str:
        return solve_math_expression(expression, self.mode)

    def as_dispatcher_entry(self):
        def _call(args: CalculatorTool.Arguments) -> str:
            return self.calc(args.expression)

        return _call
