"""
Defines the abstract syntax tree (AST) for the Sinos programming language.

The AST is a closed tagged union: one frozen dataclass per node kind, each
carrying a `kind` tag and the `span` of source it covers. Consumers dispatch on
`node.kind` rather than on a class hierarchy.

Node kinds:
    module:    Top-level statement list.
    letStmt:   ``let name[: Type] = value;``
    exprStmt:  An expression used as a statement.
    block:     ``{ stmts... [last_expr] }``; the optional trailing expression is the block's value.
    binary:    ``left op right``.
    unary:     ``op operand`` for prefix ``!``, ``-``, ``+``.
    group:     A parenthesized expression.
    name, integer, float, boolean, string: Leaves.

Helpers:
    to_dict(node): Serialize a node and its descendants to plain dictionaries.
    children(node): A node's direct children in source order.
    walk(node): Pre-order traversal of a subtree.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Literal, TypedDict, Union

from sinos.sinos_source import Span


@dataclass(frozen=True)
class Module:
    stmts: tuple["Stmt", ...]
    span: Span
    kind: Literal["module"] = field(default="module", init=False)


@dataclass(frozen=True)
class LetStmt:
    """``let name: type_name = value;`` with `type_name` optional."""

    name: str
    type_name: str | None
    value: "Expr"
    span: Span
    kind: Literal["letStmt"] = field(default="letStmt", init=False)


@dataclass(frozen=True)
class ExprStmt:
    expr: "Expr"
    span: Span
    kind: Literal["exprStmt"] = field(default="exprStmt", init=False)


@dataclass(frozen=True)
class Block:
    """A braced block; `last_expr` is its trailing value expression, if any."""

    stmts: tuple["Stmt", ...]
    last_expr: Union["Expr", None]
    span: Span
    kind: Literal["block"] = field(default="block", init=False)


@dataclass(frozen=True)
class Binary:
    op: str
    left: "Expr"
    right: "Expr"
    span: Span
    kind: Literal["binary"] = field(default="binary", init=False)


@dataclass(frozen=True)
class Unary:
    op: str
    operand: "Expr"
    span: Span
    kind: Literal["unary"] = field(default="unary", init=False)


@dataclass(frozen=True)
class Group:
    expr: "Expr"
    span: Span
    kind: Literal["group"] = field(default="group", init=False)


@dataclass(frozen=True)
class Name:
    value: str
    span: Span
    kind: Literal["name"] = field(default="name", init=False)


@dataclass(frozen=True)
class Integer:
    value: int
    span: Span
    kind: Literal["integer"] = field(default="integer", init=False)


@dataclass(frozen=True)
class Float:
    value: float
    span: Span
    kind: Literal["float"] = field(default="float", init=False)


@dataclass(frozen=True)
class Boolean:
    value: bool
    span: Span
    kind: Literal["boolean"] = field(default="boolean", init=False)


@dataclass(frozen=True)
class String:
    """A string literal; `value` holds the decoded content without quotes."""

    value: str
    span: Span
    kind: Literal["string"] = field(default="string", init=False)


Stmt = Union[LetStmt, ExprStmt]
Expr = Union[Block, Binary, Unary, Group, Name, Integer, Float, Boolean, String]
Ast = Union[Module, LetStmt, ExprStmt, Expr]

LEAF_KINDS = {"name", "integer", "float", "boolean", "string"}


class SpanDict(TypedDict):
    index: int
    length: int


class AstDict(TypedDict, total=False):
    """
    TypedDict representation of an AST node used for serialization.

    Fields:
        kind (str): The node kind tag (e.g. "binary", "letStmt").
        span (SpanDict): Offset and length of the covered source.
        value (Any): Leaf value, or the expression of a letStmt.
        name (str): letStmt binding name.
        type (str | None): letStmt declared type name.
        op (str): Operator symbol of binary/unary nodes.
        stmts (list[AstDict]): Statements of a module or block.
        last_expr (AstDict | None): Trailing value expression of a block.
        expr (AstDict): Inner expression of exprStmt/group.
        left, right (AstDict): Operands of a binary node.
        operand (AstDict): Operand of a unary node.
    """

    kind: str
    span: SpanDict
    value: Any
    name: str
    type: str | None
    op: str
    stmts: list["AstDict"]
    last_expr: "AstDict | None"
    expr: "AstDict"
    left: "AstDict"
    right: "AstDict"
    operand: "AstDict"


def children(node: Ast) -> list[Ast]:
    """Returns the direct child nodes of `node`, in source order."""
    kind = node.kind
    if kind == "module":
        return list(node.stmts)
    if kind == "letStmt":
        return [node.value]
    if kind in ("exprStmt", "group"):
        return [node.expr]
    if kind == "block":
        return list(node.stmts) + ([node.last_expr] if node.last_expr is not None else [])
    if kind == "binary":
        return [node.left, node.right]
    if kind == "unary":
        return [node.operand]
    return []


def walk(node: Ast) -> Iterator[Ast]:
    """Yields `node` and every descendant in pre-order.

    Uses an explicit stack, so arbitrarily tall trees are fine.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def _node_dict(node: Ast, converted: Callable[[Ast], AstDict]) -> AstDict:
    d: AstDict = {
        "kind": node.kind,
        "span": {"index": node.span.index, "length": node.span.length},
    }
    kind = node.kind
    if kind in ("module", "block"):
        d["stmts"] = [converted(s) for s in node.stmts]
        if kind == "block":
            d["last_expr"] = converted(node.last_expr) if node.last_expr is not None else None
    elif kind == "letStmt":
        d["name"] = node.name
        d["type"] = node.type_name
        d["value"] = converted(node.value)
    elif kind in ("exprStmt", "group"):
        d["expr"] = converted(node.expr)
    elif kind == "binary":
        d["op"] = node.op
        d["left"] = converted(node.left)
        d["right"] = converted(node.right)
    elif kind == "unary":
        d["op"] = node.op
        d["operand"] = converted(node.operand)
    elif kind in LEAF_KINDS:
        d["value"] = node.value
    else:  # pragma: no cover
        raise TypeError(f"Unknown AST node kind: {kind!r}")
    return d


def to_dict(node: Ast) -> AstDict:
    """Serializes `node` and its descendants to plain nested dictionaries.

    Children are converted before their parents (reverse pre-order), so no
    recursion is needed.
    """
    done: dict[int, AstDict] = {}
    for current in reversed(list(walk(node))):
        done[id(current)] = _node_dict(current, lambda child: done[id(child)])
    return done[id(node)]


__all__ = [
    "Ast",
    "AstDict",
    "Binary",
    "Block",
    "Boolean",
    "Expr",
    "ExprStmt",
    "Float",
    "Group",
    "Integer",
    "LetStmt",
    "Module",
    "Name",
    "Stmt",
    "String",
    "Unary",
    "children",
    "to_dict",
    "walk",
]
