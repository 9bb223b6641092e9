"""Cross-field rule expressions.

This module provides:
- Lexer: Tokenizes expression strings
- Parser: Produces AST from tokens
- Evaluator: Evaluates AST against the raw input record
"""

from formguard.expressions.evaluator import (
    EvaluationContext,
    EvaluationError,
    Evaluator,
    compile_expression,
    evaluate,
    evaluate_bool,
    evaluate_rule,
)
from formguard.expressions.lexer import Lexer, LexerError, Token, TokenType
from formguard.expressions.parser import (
    ASTNode,
    BinaryOp,
    Identifier,
    Literal,
    ParseError,
    Parser,
    UnaryOp,
    parse,
)

__all__ = [
    # Evaluator
    "EvaluationContext",
    "EvaluationError",
    "Evaluator",
    "compile_expression",
    "evaluate",
    "evaluate_bool",
    "evaluate_rule",
    # Lexer
    "Lexer",
    "LexerError",
    "Token",
    "TokenType",
    # Parser
    "ASTNode",
    "BinaryOp",
    "Identifier",
    "Literal",
    "ParseError",
    "Parser",
    "UnaryOp",
    "parse",
]
