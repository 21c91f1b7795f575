"""Lexer, syntax tree nodes, value model, heap and collector, runtime, event loop and x86-64 encoder for Vanarize."""

__version__ = "0.1.0"

__all__ = [
    "assembler",
    "collector",
    "event_loop",
    "lexer",
    "memory",
    "nodes",
    "objects",
    "runtime",
    "tokens",
    "value",
]