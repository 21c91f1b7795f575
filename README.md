# vanarize

Building blocks for the Vanarize language toolchain, in plain Python with no
third-party dependencies:

- `vanarize.tokens`: `TokenType` and the frozen `Token` record (`type`, `text`, `line`).
- `vanarize.lexer`: `Lexer` and `tokenize` for Vanarize source text.
- `vanarize.nodes`: syntax tree node dataclasses (`BinaryExpr`, `CallExpr`,
  `FunctionDecl`, `ForStmt`, `StructDecl`, `IndexSetExpr` and the rest), each
  with a `node_type` from `NodeType`.
- `vanarize.value`: NaN-boxed 64-bit encoding of numbers, booleans, nil and
  object addresses.
- `vanarize.memory`: `Heap`, a simulated bump-pointer heap with a first-fit free list.
- `vanarize.objects`: `ObjString`, `ObjFunction`, `ObjStruct` and `ObjArray`.
- `vanarize.collector`: `Collector`, a mark-and-sweep collector with `Root` slots.
- `vanarize.runtime`: `Runtime`, for allocating strings and arrays, adding,
  comparing and printing values.
- `vanarize.event_loop`: `EventLoop`, a task queue with one-shot timers.
- `vanarize.assembler`: `Assembler`, an x86-64 and AVX machine code encoder.

## Installation

    pip install .

To run the test suite:

    pip install ".[test]"
    pytest

## Lexing

```python
from vanarize.lexer import Lexer, tokenize
from vanarize.tokens import TokenType

for token in tokenize('int x = 1 + 2; print("hi");'):
    print(token.type, token.text, token.line)

lexer = Lexer("a :: b")
state = lexer.get_state()
first = lexer.next_token()
lexer.restore_state(state)        # look ahead, then rewind
assert lexer.next_token() == first
```

Unterminated strings and unknown characters come back as tokens of type
`TokenType.ERROR` whose `text` is the message. The end of input is a
`TokenType.EOF` token; `next_token` keeps returning it once reached, and
iterating a `Lexer` stops after it. Line comments start with `//`.

## Values

```python
from vanarize.value import (
    VAL_NULL, bool_to_value, is_nil, is_number, number_to_value, value_to_number,
)

boxed = number_to_value(3.5)
assert is_number(boxed)
assert value_to_number(boxed) == 3.5
assert bool_to_value(True) != bool_to_value(False)
assert is_nil(VAL_NULL)
```

Values are plain `int`s; `obj_to_value` and `value_to_obj` box and unbox heap
addresses.

## Runtime and collection

```python
from vanarize.collector import Collector, Root
from vanarize.runtime import Runtime
from vanarize.value import number_to_value

runtime = Runtime(Collector(1024 * 1024))
greeting = runtime.add(runtime.new_string("answer: "), number_to_value(42.0))
print(runtime.format_value(greeting))   # answer: 42

kept = Root(runtime.new_string("kept"))
runtime.collector.register_root(kept)
runtime.new_string("garbage")
freed = runtime.collector.collect()     # unreachable objects are released
```

`Runtime.add` adds two numbers, concatenates two strings, or joins a string
and a number (formatted with 14 significant digits); any other mix gives nil.
`Runtime.equal` compares the boxed bits. `Runtime.print_value` writes
`format_value` plus a newline: whole numbers without a decimal point,
`true`/`false`, `nil`, or the string's characters.

`Collector.collect` marks everything reachable from registered roots, following
array elements and the pointer slots of structs, returns the number of objects
freed and puts their blocks back on the heap's free list. When the heap runs
out of room it collects once and retries before raising `OutOfMemoryError`.
More than 256 roots raise `RootOverflowError`.

Arrays grow by doubling their capacity; out-of-range `get` or `set` raises
`ArrayIndexError`, and `pop` on an empty array returns nil:

```python
array = runtime.collector.resolve(runtime.new_array(2))
array.push(number_to_value(1))
assert len(array) == 1
```

## Assembling machine code

```python
from vanarize.assembler import Assembler, Register

asm = Assembler(64)
asm.mov_imm64(Register.RAX, 42)
asm.ret()
print(bytes(asm).hex())
```

Jumps take a 32-bit displacement that can be filled in later with `patch32`.
Writing past the capacity, patching outside the buffer, or calling through
R8–R15 raises `AssemblerError`.

## Event loop

```python
from vanarize.event_loop import EventLoop

loop = EventLoop()
loop.schedule_task(print, "now")
loop.schedule_timer(10, print, "later")
loop.run()
```

`run` executes queued tasks first, then sleeps until the next timer is due, and
returns once no task or timer is left. A timer with a delay of 0 never fires.

## What this package does not do

There is no parser and no compiler here: the node classes can be built by hand,
but nothing turns tokens into a tree or a tree into code. The assembler only
produces bytes; nothing loads or runs them. There is no command-line program
for running Vanarize source files.