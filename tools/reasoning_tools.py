"""
Reasoning Tools

- think: a scratchpad the model uses to plan and reflect. It has no side
  effects; the thought itself stays in the conversation history.
- calculator: safe arithmetic evaluation (no eval, AST whitelist only).
"""

import ast
import logging
import math
import operator
from typing import Any, Callable, Dict, Union

from pydantic import BaseModel, Field

from core.tool_registry import Tool
from .base import retry_on_failure

logger = logging.getLogger(__name__)

Number = Union[int, float]


# ============================================================================
# THINK
# ============================================================================

class ThinkArgs(BaseModel):
    thought: str = Field(description="Your strategic reasoning: what you know, what's missing, what to do next")


async def think(args: ThinkArgs) -> str:
    logger.info(f"💭 {args.thought[:100]}{'...' if len(args.thought) > 100 else ''}")
    return "Strategy noted. Continue with your plan."


THINK_TOOL = Tool(
    name="think",
    description=(
        "Use this tool to plan your strategy, reflect on findings, and decide next steps. "
        "This is your internal scratchpad. Use it before searching to plan which angles to cover, "
        "between searches to assess gaps, and before answering to verify your coverage. "
        "It has no side effects."
    ),
    args_model=ThinkArgs,
    handler=think,
)


# ============================================================================
# CALCULATOR
# ============================================================================

MAX_EXPONENT = 10000
# Integer results stay below the interpreter's int-to-str digit limit
MAX_RESULT_BITS = 10000

_BINARY_OPERATORS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: Dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS: Dict[str, Callable[..., Number]] = {
    "sqrt": math.sqrt,
    "abs": abs,
    "round": round,
    "floor": math.floor,
    "ceil": math.ceil,
    "log": math.log,
    "log10": math.log10,
    "exp": math.exp,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "min": min,
    "max": max,
}

_CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}


def evaluate_expression(expression: str) -> Number:
    """
    Evaluate an arithmetic expression.

    Supports numbers, + - * / // % **, unary signs, parentheses, the
    functions in _FUNCTIONS and the constants pi and e. `^` is read as a
    power, as most people typing maths mean it.

    Args:
        expression: e.g. "sqrt(16) + 2 ** 3"

    Returns:
        The numeric result

    Raises:
        ValueError: If the expression uses anything outside the whitelist
        ZeroDivisionError: On division by zero
    """
    try:
        tree = ast.parse(expression.replace("^", "**"), mode="eval")
    except SyntaxError as e:
        raise ValueError(f"Invalid expression: {expression}") from e
    return _evaluate(tree.body)


def _evaluate(node: ast.AST) -> Number:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate(node.left)
        right = _evaluate(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _check_size(_BINARY_OPERATORS[type(node.op)](left, right))

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate(node.operand))

    if isinstance(node, ast.Name) and node.id in _CONSTANTS:
        return _CONSTANTS[node.id]

    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _FUNCTIONS
        and not node.keywords
    ):
        return _FUNCTIONS[node.func.id](*(_evaluate(arg) for arg in node.args))

    raise ValueError(f"Unsupported expression element: {ast.dump(node)[:60]}")


def _check_power(base: Number, exponent: Number) -> None:
    """Refuse powers whose result would be too large, before computing them."""
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError(f"Exponent too large (max {MAX_EXPONENT})")
    if isinstance(base, int) and isinstance(exponent, int) and exponent > 0:
        # (bit_length - 1) * exponent is a lower bound on the result's bits
        if (abs(base).bit_length() - 1) * exponent > MAX_RESULT_BITS:
            raise ValueError(f"Result too large (max {MAX_RESULT_BITS} bits)")


def _check_size(value: Number) -> Number:
    if isinstance(value, int) and value.bit_length() > MAX_RESULT_BITS:
        raise ValueError(f"Result too large (max {MAX_RESULT_BITS} bits)")
    return value


def format_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return str(value)


class CalculatorArgs(BaseModel):
    expression: str = Field(description="Arithmetic expression, e.g. '(1500 * 0.07) / 12' or 'sqrt(2) * pi'")


@retry_on_failure()
async def calculator(args: CalculatorArgs) -> str:
    try:
        result = evaluate_expression(args.expression)
    except (ValueError, ZeroDivisionError, OverflowError, TypeError) as e:
        return f"Error: could not evaluate '{args.expression}': {e}"
    return f"{args.expression} = {format_number(result)}"


CALCULATOR_TOOL = Tool(
    name="calculator",
    description=(
        "Evaluate a math expression. Supports + - * / // % ** (or ^), parentheses, "
        "sqrt, abs, round, floor, ceil, log, log10, exp, sin, cos, tan, min, max, pi and e."
    ),
    args_model=CalculatorArgs,
    handler=calculator,
)
