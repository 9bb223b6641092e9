"""Parser for cross-field rule expressions.

Converts a stream of tokens into an Abstract Syntax Tree (AST).
Uses recursive descent parsing with operator precedence.

Operator Precedence (lowest to highest):
1. || (or)
2. && (and)
3. == != < <= > >=  (non-associative)
4. ! (not)
5. literals, identifiers, ( ... )
"""

from dataclasses import dataclass
from typing import Any

from formguard.expressions.lexer import Lexer, Token, TokenType


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass
class ASTNode:
    """Base class for AST nodes."""
    pass


@dataclass
class Literal(ASTNode):
    """A literal value (number, string, boolean, null)."""
    value: Any


@dataclass
class Identifier(ASTNode):
    """A field reference."""
    name: str


@dataclass
class BinaryOp(ASTNode):
    """Binary operation (e.g., a && b, x == y)."""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass
class UnaryOp(ASTNode):
    """Unary operation (!x)."""
    operator: str
    operand: ASTNode


COMPARISON_OPS = {
    TokenType.EQ: "==",
    TokenType.NEQ: "!=",
    TokenType.LT: "<",
    TokenType.LTE: "<=",
    TokenType.GT: ">",
    TokenType.GTE: ">=",
}


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


MAX_DEPTH = 100


class ParseError(Exception):
    """Error during parsing."""

    def __init__(self, message: str, token: Token):
        self.token = token
        super().__init__(f"{message} at position {token.position}")


class Parser:
    """Recursive descent parser for cross-field expressions.

    Nesting of parentheses and negations is limited to MAX_DEPTH levels.

    Usage:
        parser = Parser('startDate <= endDate')
        ast = parser.parse()
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = Lexer(source).tokenize()
        self.position = 0
        self.depth = 0

    def parse(self) -> ASTNode:
        """Parse the expression and return the AST root."""
        if self.tokens[0].type == TokenType.EOF:
            raise ParseError("Empty expression", self.tokens[0])

        ast = self._parse_or()

        if not self._is_at_end():
            raise ParseError(
                f"Unexpected token '{self._current().value}'",
                self._current(),
            )

        return ast

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        """Get current token."""
        if self.position >= len(self.tokens):
            return Token(TokenType.EOF, None, len(self.source))
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self.position += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume a token of the expected type, or raise error."""
        if self._current().type == token_type:
            return self._advance()
        raise ParseError(message, self._current())

    # -------------------------------------------------------------------------
    # Parsing methods (in order of precedence, lowest to highest)
    # -------------------------------------------------------------------------

    def _parse_or(self) -> ASTNode:
        left = self._parse_and()

        while self._match(TokenType.OR):
            self._advance()
            right = self._parse_and()
            left = BinaryOp("||", left, right)

        return left

    def _parse_and(self) -> ASTNode:
        left = self._parse_comparison()

        while self._match(TokenType.AND):
            self._advance()
            right = self._parse_comparison()
            left = BinaryOp("&&", left, right)

        return left

    def _parse_comparison(self) -> ASTNode:
        """Parse a single comparison; chains like a < b < c are rejected."""
        left = self._parse_unary()

        if self._current().type in COMPARISON_OPS:
            op = COMPARISON_OPS[self._advance().type]
            right = self._parse_unary()
            left = BinaryOp(op, left, right)

            if self._current().type in COMPARISON_OPS:
                raise ParseError("Chained comparisons are not supported", self._current())

        return left

    def _nested(self, token: Token) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise ParseError("Expression is nested too deeply", token)

    def _parse_unary(self) -> ASTNode:
        if self._match(TokenType.NOT):
            self._nested(self._advance())
            operand = self._parse_unary()
            self.depth -= 1
            return UnaryOp("!", operand)

        return self._parse_primary()

    def _parse_primary(self) -> ASTNode:
        """Parse primary expression (literals, identifiers, grouped expressions)."""
        token = self._current()

        if token.type in (TokenType.NUMBER, TokenType.STRING, TokenType.BOOLEAN):
            self._advance()
            return Literal(token.value)

        if token.type == TokenType.NULL:
            self._advance()
            return Literal(None)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(str(token.value))

        if token.type == TokenType.LPAREN:
            self._nested(self._advance())
            expr = self._parse_or()
            self._consume(TokenType.RPAREN, "Expected ')' after expression")
            self.depth -= 1
            return expr

        raise ParseError(f"Unexpected token '{token.value}'", token)


def parse(source: str) -> ASTNode:
    """Convenience function to parse an expression string.

    Args:
        source: The expression string

    Returns:
        The AST root node
    """
    return Parser(source).parse()
