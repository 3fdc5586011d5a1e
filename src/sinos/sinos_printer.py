"""
Text renderings of Sinos ASTs.

Functions:
    dump(node): Indented one-node-per-line listing with spans, e.g.::

        module<0,7>
          exprStmt<0,7>
            name<0,6> foobar

    unparse(node): Re-serialize an AST as Sinos source. Parsing the result gives
        back a tree of the same shape and values; only spans may differ.
"""

import json
from decimal import Decimal

from sinos.sinos_ast import Ast, children
from sinos.sinos_constants import ESCAPES

INDENT = "  "

# Decoded character -> escape letter, for re-quoting string literals.
_REVERSE_ESCAPES = {decoded: letter for letter, decoded in ESCAPES.items()}


def _header(node: Ast) -> str:
    result = f"{node.kind}<{node.span.index},{node.span.length}>"
    kind = node.kind

    if kind == "letStmt":
        result += f' "{node.name}"'
        if node.type_name:
            result += f" : {node.type_name}"
    elif kind in ("binary", "unary"):
        result += f" {node.op}"
    elif kind == "boolean":
        result += " true" if node.value else " false"
    elif kind == "string":
        result += " " + json.dumps(node.value, ensure_ascii=False)
    elif kind in ("name", "integer", "float"):
        result += f" {node.value}"

    return result


def dump(node: Ast) -> str:
    """One line per node, each child indented one level below its parent."""
    lines: list[str] = []
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        lines.append(INDENT * depth + _header(current))
        stack.extend((child, depth + 1) for child in reversed(children(current)))
    return "\n".join(lines)


def quote_string(value: str) -> str:
    """Quotes `value` as a Sinos string literal, escaping where required."""
    body = "".join(
        "\\" + _REVERSE_ESCAPES[ch] if ch in _REVERSE_ESCAPES else ch for ch in value
    )
    return f'"{body}"'


def format_float(value: float) -> str:
    """Writes a float in the positional ``digits.digits`` form the lexer accepts."""
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else text + ".0"


def _pieces(node: Ast) -> list[str | Ast]:
    """Splits a node into literal text and child nodes, in output order."""
    kind = node.kind

    if kind == "module":
        pieces: list[str | Ast] = []
        for i, stmt in enumerate(node.stmts):
            pieces += ["\n", stmt] if i else [stmt]
        return pieces

    if kind == "letStmt":
        type_part = f": {node.type_name}" if node.type_name else ""
        return [f"let {node.name}{type_part} = ", node.value, ";"]

    if kind == "exprStmt":
        return [node.expr, ";"]

    if kind == "block":
        parts = children(node)
        if not parts:
            return ["{}"]
        pieces = ["{ "]
        for i, part in enumerate(parts):
            pieces += [" ", part] if i else [part]
        return pieces + [" }"]

    if kind == "binary":
        return [node.left, f" {node.op} ", node.right]

    if kind == "unary":
        return [node.op, node.operand]

    if kind == "group":
        return ["(", node.expr, ")"]

    if kind == "string":
        return [quote_string(node.value)]

    if kind == "float":
        return [format_float(node.value)]

    if kind == "boolean":
        return ["true" if node.value else "false"]

    if kind in ("name", "integer"):
        return [str(node.value)]

    raise TypeError(f"Unhandled AST node of kind {kind!r}")  # pragma: no cover


def unparse(node: Ast) -> str:
    out: list[str] = []
    stack: list[str | Ast] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        else:
            stack.extend(reversed(_pieces(item)))
    return "".join(out)


__all__ = ["dump", "format_float", "quote_string", "unparse"]
