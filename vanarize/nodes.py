"""Syntax tree node classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Optional

from vanarize.tokens import Token


class NodeType(Enum):
    """Kinds of syntax tree nodes."""

    BINARY_EXPR = auto()
    LITERAL_EXPR = auto()
    STRING_LITERAL = auto()
    CALL_EXPR = auto()
    VAR_DECL = auto()
    ASSIGNMENT_EXPR = auto()
    SET_EXPR = auto()
    FUNCTION_DECL = auto()
    BLOCK = auto()
    RETURN_STMT = auto()
    IF_STMT = auto()
    FOR_STMT = auto()
    STRUCT_DECL = auto()
    STRUCT_INIT = auto()
    GET_EXPR = auto()
    UNARY_EXPR = auto()
    AWAIT_EXPR = auto()
    ARRAY_LITERAL = auto()
    INDEX_EXPR = auto()
    INDEX_SET_EXPR = auto()


@dataclass
class Node:
    """Base of every syntax tree node."""

    node_type: ClassVar[NodeType]


def _require_same_length(what: str, names: list, others: list) -> None:
    if len(names) != len(others):
        raise ValueError(
            f"{what}: {len(names)} names but {len(others)} companions"
        )


@dataclass
class BinaryExpr(Node):
    """``left op right``."""

    node_type: ClassVar[NodeType] = NodeType.BINARY_EXPR
    left: Node
    right: Node
    op: Token


@dataclass
class LiteralExpr(Node):
    """A number, boolean or nil literal."""

    node_type: ClassVar[NodeType] = NodeType.LITERAL_EXPR
    token: Token


@dataclass
class StringLiteral(Node):
    """A string literal; the token still carries its quotes."""

    node_type: ClassVar[NodeType] = NodeType.STRING_LITERAL
    token: Token


@dataclass
class CallExpr(Node):
    """``callee(args...)``; the callee may be a property access."""

    node_type: ClassVar[NodeType] = NodeType.CALL_EXPR
    callee: Node
    args: list[Node] = field(default_factory=list)


@dataclass
class VarDecl(Node):
    """A variable declaration with an optional type name and initializer."""

    node_type: ClassVar[NodeType] = NodeType.VAR_DECL
    name: Token
    type_name: Optional[Token] = None
    initializer: Optional[Node] = None


@dataclass
class AssignmentExpr(Node):
    """``name = value``."""

    node_type: ClassVar[NodeType] = NodeType.ASSIGNMENT_EXPR
    name: Token
    value: Node


@dataclass
class SetExpr(Node):
    """``object.name = value``."""

    node_type: ClassVar[NodeType] = NodeType.SET_EXPR
    object: Node
    name: Token
    value: Node


@dataclass
class FunctionDecl(Node):
    """A function declaration; each parameter has a matching type token."""

    node_type: ClassVar[NodeType] = NodeType.FUNCTION_DECL
    name: Token
    params: list[Token] = field(default_factory=list)
    param_types: list[Token] = field(default_factory=list)
    return_type: Optional[Token] = None
    body: Optional[Node] = None
    is_async: bool = False

    def __post_init__(self) -> None:
        _require_same_length("function parameters", self.params, self.param_types)


@dataclass
class Block(Node):
    """A braced sequence of statements."""

    node_type: ClassVar[NodeType] = NodeType.BLOCK
    statements: list[Node] = field(default_factory=list)


@dataclass
class ReturnStmt(Node):
    """``return`` with an optional value."""

    node_type: ClassVar[NodeType] = NodeType.RETURN_STMT
    return_value: Optional[Node] = None


@dataclass
class IfStmt(Node):
    """``if`` with an optional ``else`` branch."""

    node_type: ClassVar[NodeType] = NodeType.IF_STMT
    condition: Node
    then_branch: Node
    else_branch: Optional[Node] = None


@dataclass
class ForStmt(Node):
    """A C-style ``for`` loop, the language's only loop."""

    node_type: ClassVar[NodeType] = NodeType.FOR_STMT
    initializer: Optional[Node]
    condition: Optional[Node]
    increment: Optional[Node]
    body: Node


@dataclass
class StructDecl(Node):
    """A struct declaration; each field has a matching type token."""

    node_type: ClassVar[NodeType] = NodeType.STRUCT_DECL
    name: Token
    fields: list[Token] = field(default_factory=list)
    field_types: list[Token] = field(default_factory=list)

    def __post_init__(self) -> None:
        _require_same_length("struct fields", self.fields, self.field_types)


@dataclass
class StructInit(Node):
    """A struct construction with one value expression per named field."""

    node_type: ClassVar[NodeType] = NodeType.STRUCT_INIT
    struct_name: Token
    field_names: list[Token] = field(default_factory=list)
    values: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        _require_same_length("struct initializer", self.field_names, self.values)


@dataclass
class GetExpr(Node):
    """``object.name``."""

    node_type: ClassVar[NodeType] = NodeType.GET_EXPR
    object: Node
    name: Token


@dataclass
class UnaryExpr(Node):
    """``op right``."""

    node_type: ClassVar[NodeType] = NodeType.UNARY_EXPR
    op: Token
    right: Node


@dataclass
class AwaitExpr(Node):
    """``await expression``."""

    node_type: ClassVar[NodeType] = NodeType.AWAIT_EXPR
    expression: Node


@dataclass
class ArrayLiteral(Node):
    """``[e1, e2, ...]``."""

    node_type: ClassVar[NodeType] = NodeType.ARRAY_LITERAL
    elements: list[Node] = field(default_factory=list)


@dataclass
class IndexExpr(Node):
    """``array[index]``."""

    node_type: ClassVar[NodeType] = NodeType.INDEX_EXPR
    array: Node
    index: Node


@dataclass
class IndexSetExpr(Node):
    """``array[index] = value``."""

    node_type: ClassVar[NodeType] = NodeType.INDEX_SET_EXPR
    array: Node
    index: Node
    value: Node