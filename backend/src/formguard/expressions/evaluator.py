"""Evaluator for cross-field rule expressions.

Walks the AST and computes the result against the raw input record. Field
names are bound to the record's unconverted values and compared with
Python's own operators; no coercion happens here.
"""

import logging
import operator
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Mapping

from formguard.expressions.lexer import LexerError
from formguard.expressions.parser import (
    ASTNode,
    BinaryOp,
    Identifier,
    Literal,
    ParseError,
    UnaryOp,
    parse,
)

logger = logging.getLogger(__name__)


class EvaluationError(Exception):
    """Error during expression evaluation."""
    pass


_COMPARATORS: dict[str, Callable[[Any, Any], Any]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass
class EvaluationContext:
    """Context for expression evaluation.

    Attributes:
        record: The raw input record; its keys are the only bound names
    """

    record: Mapping[str, Any]


class Evaluator:
    """Evaluates expression AST against a context.

    Usage:
        ctx = EvaluationContext(record={"min": 1, "max": 5})
        evaluator = Evaluator(ctx)
        result = evaluator.evaluate(ast)
    """

    def __init__(self, context: EvaluationContext):
        self.context = context

    def evaluate(self, node: ASTNode) -> Any:
        """Evaluate an AST node and return the result."""
        method_name = f"_eval_{type(node).__name__.lower()}"
        method = getattr(self, method_name, None)

        if method is None:
            raise EvaluationError(f"Unknown node type: {type(node).__name__}")

        return method(node)

    # -------------------------------------------------------------------------
    # Node type evaluators
    # -------------------------------------------------------------------------

    def _eval_literal(self, node: Literal) -> Any:
        return node.value

    def _eval_identifier(self, node: Identifier) -> Any:
        """Evaluate an identifier (field reference)."""
        if node.name not in self.context.record:
            raise EvaluationError(f"'{node.name}' is not defined")
        return self.context.record[node.name]

    def _eval_binaryop(self, node: BinaryOp) -> Any:
        """Evaluate a binary operation."""
        op = node.operator

        # Short-circuit evaluation for logical operators
        if op == "&&":
            if not bool(self.evaluate(node.left)):
                return False
            return bool(self.evaluate(node.right))

        if op == "||":
            if bool(self.evaluate(node.left)):
                return True
            return bool(self.evaluate(node.right))

        comparator = _COMPARATORS.get(op)
        if comparator is None:
            raise EvaluationError(f"Unknown operator: {op}")

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        try:
            return comparator(left, right)
        except TypeError as e:
            raise EvaluationError(
                f"Cannot compare {type(left).__name__} and {type(right).__name__}"
            ) from e

    def _eval_unaryop(self, node: UnaryOp) -> Any:
        if node.operator == "!":
            return not bool(self.evaluate(node.operand))

        raise EvaluationError(f"Unknown unary operator: {node.operator}")


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


@lru_cache(maxsize=256)
def compile_expression(expression: str) -> ASTNode:
    """Parse an expression once and reuse the AST for later calls."""
    return parse(expression)


def evaluate(expression: str, record: Mapping[str, Any]) -> Any:
    """Evaluate an expression string against a record.

    Raises LexerError, ParseError or EvaluationError when the expression
    cannot be evaluated.

    Example:
        result = evaluate('startDate <= endDate', {"startDate": "2025/01/01", "endDate": "2025/02/01"})
        # result = True
    """
    ast = compile_expression(expression)
    return Evaluator(EvaluationContext(record=record)).evaluate(ast)


def evaluate_bool(expression: str, record: Mapping[str, Any]) -> bool:
    """Evaluate an expression and return a boolean result."""
    return bool(evaluate(expression, record))


def evaluate_rule(expression: str, record: Mapping[str, Any]) -> bool:
    """Evaluate a cross-field rule; any evaluation problem counts as failure."""
    if not isinstance(expression, str):
        logger.debug("Cross-field rule is not a string: %r", expression)
        return False

    try:
        return evaluate_bool(expression, record)
    except (LexerError, ParseError, EvaluationError, RecursionError) as e:
        logger.debug("Cross-field rule %r failed to evaluate: %s", expression, e)
        return False
