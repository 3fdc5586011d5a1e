"""
Sinos Language Parser

Parses a Sinos token stream into an abstract syntax tree with exact source spans.

The parser pulls tokens from a live `Lexer` one at a time through a single-token
lookahead slot; nothing is consumed until a parsing decision commits to it and
there is no backtracking. Statement and block structure is parsed by recursive
descent, binary expressions by precedence climbing.

Supported Constructs
--------------------
- Statements:
    * Let bindings: `let name = 1;`, `let name: Type = 1;`
    * Expression statements: `expr;`
    * Block statements, which need no `;`: `{ ... }`
- Expressions, loosest to tightest:
    * eq:    `==` `!=`          (non-associative)
    * cmp:   `<` `<=` `>` `>=`  (non-associative)
    * cat:   `~`                (left-associative)
    * add:   `+` `-`            (left-associative)
    * mul:   `*` `/` `%`        (left-associative)
    * unary: prefix `!` `-` `+`
    * primary: literals, names, `( expr )`, `{ block }`

Parser Behavior
---------------
- Fail-fast: the first problem raises `SinosError`; no partial AST is returned.
- A block's final expression directly before `}` becomes its value (`last_expr`).
- At most `MAX_NESTING_DEPTH` brackets may be open at once and no tree may be
  taller than `MAX_TREE_HEIGHT`; deeper input is a `tooDeep` diagnostic.

Entry Points
------------
- `parse(source)`: Parse a complete program into a `Module`.
- `Parser.parse()`, `Parser.parse_statement()`, `Parser.parse_expression()`,
  `Parser.parse_block()` for finer-grained use.

Raises
------
SinosError
    On any lexical or syntactic error, tagged with its kind and span.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sinos.sinos_ast import (
    Ast,
    Binary,
    Block,
    Boolean,
    Expr,
    ExprStmt,
    Float,
    Group,
    Integer,
    LetStmt,
    Module,
    Name,
    Stmt,
    String,
    Unary,
    children,
)
from sinos.sinos_constants import MAX_NESTING_DEPTH, MAX_TREE_HEIGHT, operator_tokens
from sinos.sinos_errors import ErrorKind, SinosError
from sinos.sinos_lexer import CharacterStream, Lexer, Token
from sinos.sinos_source import SourceFile, Span

NodeT = TypeVar("NodeT", bound=Ast)


class Parser:
    """
    Sinos Parser Class

    Turns the tokens of one `Lexer` into a `Module` AST. A Parser instance holds
    its own cursor and is good for a single parse.

    Attributes
    ----------
    lexer : Lexer
        The token source; pulled from on demand.
    eq_ops, cmp_ops, cat_ops, add_ops, mul_ops : set[str]
        Token types of each binary precedence level.
    unary_ops : set[str]
        Token types accepted as prefix operators.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self._current: Token | None = None
        self.nesting = 0
        # id(node) -> height, for every composite node built so far.
        self._heights: dict[int, int] = {}

        # Aliases
        EQ, NE, LT, LE, GT, GE = operator_tokens[0:6]
        CAT, PLUS, SUB, MULT, DIV, MOD, NOT = operator_tokens[6:13]

        # TOKEN MAPPINGS (PARSER)

        self.eq_ops: set[str] = {EQ, NE}
        self.cmp_ops: set[str] = {LT, LE, GT, GE}
        self.cat_ops: set[str] = {CAT}
        self.add_ops: set[str] = {PLUS, SUB}
        self.mul_ops: set[str] = {MULT, DIV, MOD}
        self.unary_ops: set[str] = {NOT, SUB, PLUS}

    @property
    def source(self) -> SourceFile:
        return self.lexer.source

    @property
    def current(self) -> Token:
        """The lookahead token; peeking never consumes it."""
        if self._current is None:
            self._current = self.lexer.next_token()
        return self._current

    def advance(self) -> Token:
        """Consumes the lookahead token and returns it."""
        tok = self.current
        self._current = self.lexer.next_token() if tok.type != "EOF" else tok
        return tok

    def match(self, *types: str) -> Token | None:
        """Consumes and returns the lookahead token if its type is one of `types`."""
        if self.current.type in types:
            return self.advance()
        return None

    def expect(self, type_: str, kind: ErrorKind) -> Token:
        """Consumes a token of `type_`, or raises `kind` at the offending token."""
        tok = self.match(type_)
        if tok is None:
            raise SinosError(kind, self.current.span)
        return tok

    def open_nesting(self, open_tok: Token) -> None:
        """Enters a `(` or `{`; raises `tooDeep` past `MAX_NESTING_DEPTH` levels."""
        if self.nesting >= MAX_NESTING_DEPTH:
            raise SinosError(ErrorKind.TOO_DEEP, open_tok.span)
        self.nesting += 1

    def close_nesting(self) -> None:
        self.nesting -= 1

    def build(self, node: NodeT) -> NodeT:
        """Records the height of a freshly built composite node.

        Raises:
            SinosError: `tooDeep` if the tree under `node` is taller than
                `MAX_TREE_HEIGHT`.
        """
        height = 1 + max((self._heights.get(id(c), 1) for c in children(node)), default=0)
        if height > MAX_TREE_HEIGHT:
            raise SinosError(ErrorKind.TOO_DEEP, node.span)
        self._heights[id(node)] = height
        return node

    def parse(self) -> Module:
        """Parse a full Sinos program and return its module node."""
        stmts: list[Stmt] = []
        while self.current.type != "EOF":
            stmts.append(self.parse_statement())
        module = Module(tuple(stmts), Span(self.source, 0, self.current.span.index))
        return self.build(module)

    def parse_statement(self) -> Stmt:
        if self.current.type == "LET":
            return self.parse_let()
        return self.finish_expr_stmt(self.parse_expression())

    def parse_let(self) -> LetStmt:
        """Parse ``let name[: Type] = expr;``."""
        let_tok = self.advance()
        name_tok = self.expect("IDENT", ErrorKind.EXPECT_NAME)

        type_name = None
        if self.match("COLON"):
            type_name = self.expect("IDENT", ErrorKind.EXPECT_NAME).value

        self.expect("ASSIGN", ErrorKind.EXPECT_EQUAL)
        value = self.parse_expression()
        semi = self.expect("SEMI", ErrorKind.EXPECT_SEMI)

        return self.build(
            LetStmt(name_tok.value, type_name, value, let_tok.span.to(semi.span))
        )

    def finish_expr_stmt(self, expr: Expr) -> ExprStmt:
        """Wraps an already parsed expression as a statement.

        A block stands on its own, and a `;` after it is optional; every other
        expression must be followed by `;`.
        """
        if expr.kind == "block":
            semi = self.match("SEMI")
        else:
            semi = self.expect("SEMI", ErrorKind.EXPECT_SEMI)
        end = semi.span if semi else expr.span
        return self.build(ExprStmt(expr, expr.span.to(end)))

    def parse_block(self) -> Block:
        """Parse a `{}`-enclosed block of statements with an optional value expression."""
        open_tok = self.expect("LBRACE", ErrorKind.EXPECT_EXPR)
        self.open_nesting(open_tok)
        stmts: list[Stmt] = []
        last_expr: Expr | None = None

        while self.current.type not in ("RBRACE", "EOF"):
            if self.current.type == "LET":
                stmts.append(self.parse_let())
                continue

            expr = self.parse_expression()
            if self.current.type == "RBRACE":
                last_expr = expr
                break
            stmts.append(self.finish_expr_stmt(expr))

        close_tok = self.expect("RBRACE", ErrorKind.EXPECT_BRACE_CLOSE)
        self.close_nesting()
        return self.build(Block(tuple(stmts), last_expr, open_tok.span.to(close_tok.span)))

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_eq()

    def parse_eq(self) -> Expr:
        return self._parse_non_assoc(self.parse_cmp, self.eq_ops, ErrorKind.EQ_CHAIN)

    def parse_cmp(self) -> Expr:
        return self._parse_non_assoc(self.parse_cat, self.cmp_ops, ErrorKind.CMP_CHAIN)

    def parse_cat(self) -> Expr:
        return self._parse_left_assoc(self.parse_add, self.cat_ops)

    def parse_add(self) -> Expr:
        return self._parse_left_assoc(self.parse_mul, self.add_ops)

    def parse_mul(self) -> Expr:
        return self._parse_left_assoc(self.parse_unary, self.mul_ops)

    def _parse_left_assoc(self, operand: Callable[[], Expr], ops: set[str]) -> Expr:
        left = operand()
        while self.current.type in ops:
            op_tok = self.advance()
            right = operand()
            left = self.build(Binary(op_tok.value, left, right, left.span.to(right.span)))
        return left

    def _parse_non_assoc(
        self, operand: Callable[[], Expr], ops: set[str], chain_error: ErrorKind
    ) -> Expr:
        """Parse at most one operator of a non-associative level.

        A second operator of the same level is an error whose span covers the
        whole trailing clause, from the first right operand to the chained one.
        """
        left = operand()
        if self.current.type not in ops:
            return left

        op_tok = self.advance()
        right = operand()

        if self.current.type in ops:
            self.advance()
            chained = operand()
            raise SinosError(chain_error, right.span.to(chained.span))

        return self.build(Binary(op_tok.value, left, right, left.span.to(right.span)))

    def parse_unary(self) -> Expr:
        """Parse any run of prefix operators, applied innermost first."""
        op_toks: list[Token] = []
        while self.current.type in self.unary_ops:
            op_toks.append(self.advance())

        expr = self.parse_primary()
        for op_tok in reversed(op_toks):
            expr = self.build(Unary(op_tok.value, expr, op_tok.span.to(expr.span)))
        return expr

    def parse_primary(self) -> Expr:
        tok = self.current
        kind = tok.type

        if kind == "INT":
            self.advance()
            return Integer(int(tok.value), tok.span)

        if kind == "FLOAT":
            self.advance()
            return Float(float(tok.value), tok.span)

        if kind == "BOOL":
            self.advance()
            return Boolean(tok.value == "true", tok.span)

        if kind == "STRING":
            self.advance()
            return String(tok.value, tok.span)

        if kind == "IDENT":
            self.advance()
            return Name(tok.value, tok.span)

        if kind == "LBRACE":
            return self.parse_block()

        if kind == "LPAREN":
            self.open_nesting(tok)
            self.advance()
            inner = self.parse_expression()
            close_tok = self.expect("RPAREN", ErrorKind.EXPECT_PAREN_CLOSE)
            self.close_nesting()
            return self.build(Group(inner, tok.span.to(close_tok.span)))

        raise SinosError(ErrorKind.EXPECT_EXPR, tok.span)


def parse(source: SourceFile | str, name: str = "<input>") -> Module:
    """Parse Sinos source into a module AST.

    Args:
        source: A SourceFile, or raw text to be wrapped in one called `name`.
        name: Display name used when `source` is a plain string.

    Returns:
        Module: The complete, validated AST.

    Raises:
        SinosError: On the first lexical or syntactic error.
    """
    if isinstance(source, str):
        source = SourceFile(name, source)
    return Parser(Lexer(CharacterStream(source))).parse()


__all__ = ["Parser", "parse"]
