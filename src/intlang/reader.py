"""Reader layer: turns intlang source text into a Module.

Lexing and parsing are fused into one recursive-descent pass over the
characters of the input.  Every construct is a keyword followed by ``(``,
its arguments, and a closing ``)``::

    define(a 5)
    print(a add(a 10))
    for(0 5 1 print(_i))
    defn(twice (x) add(x x))
    print(call(twice 21))
"""

from __future__ import annotations

import logging

from .errors import ParseError
from .model import (
    INT32_MAX,
    Add,
    Call,
    Define,
    DefineFn,
    Equal,
    For,
    Ident,
    If,
    Less,
    Module,
    More,
    Node,
    NotEqual,
    Number,
    Print,
    Sub,
    While,
)

logger = logging.getLogger(__name__)


_BINARY = {
    "add": Add,
    "sub": Sub,
    "equal": Equal,
    "notequal": NotEqual,
    "less": Less,
    "more": More,
}

KEYWORDS = frozenset(
    {"define", "print", "if", "while", "for", "defn", "call", *_BINARY}
)


def _is_word_char(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def parse(text: str) -> Module:
    """Parse *text* and return the ordered list of top-level nodes."""
    reader = Reader(text)
    module: Module = []
    while True:
        try:
            node = reader.next_node()
        except RecursionError:
            raise reader._error("nesting too deep") from None
        if node is None:
            break
        module.append(node)
    logger.debug("Parsed %d top-level node(s)", len(module))
    return module


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class Reader:
    """Forward-only cursor over source text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # -- Top level ------------------------------------------------------

    def next_node(self) -> Node | None:
        """Parse the next top-level node, or return None at end of input.

        Stray ``)`` between top-level nodes are skipped.
        """
        while True:
            self._skip_ws()
            if self._peek() == ")":
                self.pos += 1
                continue
            break
        if self._at_end():
            return None
        return self._node()

    def line_col(self, pos: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of offset *pos*."""
        line = self.text.count("\n", 0, pos) + 1
        start = self.text.rfind("\n", 0, pos) + 1
        return line, pos - start + 1

    # -- Character helpers ----------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_ws(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos].isspace():
            self.pos += 1

    def _error(self, message: str, pos: int | None = None) -> ParseError:
        if pos is None:
            pos = self.pos
        line, col = self.line_col(pos)
        return ParseError(message, pos, line, col)

    def _expect(self, ch: str, context: str) -> None:
        self._skip_ws()
        if self._at_end():
            raise self._error(f"unexpected end of input, expected '{ch}' {context}")
        if self._peek() != ch:
            raise self._error(f"expected '{ch}' {context}, found '{self._peek()}'")
        self.pos += 1

    def _at_close(self, context: str) -> bool:
        """Consume a ``)`` if one is next.  End of input is an error."""
        self._skip_ws()
        if self._at_end():
            raise self._error(f"unexpected end of input, unterminated {context}")
        if self._peek() == ")":
            self.pos += 1
            return True
        return False

    # -- Tokens ---------------------------------------------------------

    def _number(self) -> Number:
        start = self.pos
        text = self.text
        while self.pos < len(text) and text[self.pos].isascii() and text[self.pos].isdigit():
            self.pos += 1
        value = int(text[start:self.pos])
        if value > INT32_MAX:
            raise self._error(
                f"integer literal {text[start:self.pos]} is out of 32-bit range", start
            )
        return Number(value)

    def _word(self) -> str:
        start = self.pos
        text = self.text
        while self.pos < len(text) and _is_word_char(text[self.pos]):
            self.pos += 1
        return text[start:self.pos]

    def _name(self, context: str) -> str:
        """Read an identifier in a name slot (not a keyword or number)."""
        self._skip_ws()
        if self._at_end():
            raise self._error(f"unexpected end of input, expected a name {context}")
        start = self.pos
        word = self._word()
        if not word:
            raise self._error(f"expected a name {context}, found '{self._peek()}'")
        if word in KEYWORDS:
            raise self._error(f"keyword '{word}' cannot be used as a name", start)
        return word

    # -- Nodes ----------------------------------------------------------

    def _node(self) -> Node:
        self._skip_ws()
        ch = self._peek()
        if ch.isascii() and ch.isdigit():
            return self._number()

        start = self.pos
        word = self._word()
        if not word:
            raise self._error(f"unexpected character '{ch}'")

        if word == "define":
            self._expect("(", "after 'define'")
            name = self._name("in 'define'")
            value = self._operand("define")
            self._close("define")
            return Define(name, value)

        if word in _BINARY:
            self._expect("(", f"after '{word}'")
            left = self._operand(word)
            right = self._operand(word)
            self._close(word)
            return _BINARY[word](left, right)

        if word == "print":
            self._expect("(", "after 'print'")
            return Print(self._body("print"))

        if word == "if":
            self._expect("(", "after 'if'")
            cond = self._operand("if")
            return If(cond, self._body("if"))

        if word == "while":
            self._expect("(", "after 'while'")
            cond = self._operand("while")
            return While(cond, self._body("while"))

        if word == "for":
            self._expect("(", "after 'for'")
            init = self._operand("for")
            bound = self._operand("for")
            step = self._operand("for")
            return For(init, bound, step, self._body("for"))

        if word == "defn":
            self._expect("(", "after 'defn'")
            name = self._name("in 'defn'")
            self._expect("(", f"to open the parameter list of '{name}'")
            params: list[str] = []
            while not self._at_close(f"parameter list of '{name}'"):
                params.append(self._name(f"in the parameter list of '{name}'"))
            return DefineFn(name, tuple(params), self._body("defn"))

        if word == "call":
            self._expect("(", "after 'call'")
            name = self._name("in 'call'")
            return Call(name, self._body("call"))

        logger.debug("Identifier '%s' at offset %d", word, start)
        return Ident(word)

    def _operand(self, context: str) -> Node:
        """Parse a mandatory argument of *context*."""
        self._skip_ws()
        if self._at_end():
            raise self._error(f"unexpected end of input in '{context}'")
        if self._peek() == ")":
            raise self._error(f"missing argument in '{context}'")
        return self._node()

    def _close(self, context: str) -> None:
        self._skip_ws()
        if self._at_end():
            raise self._error(f"unexpected end of input, unterminated '{context}'")
        if self._peek() != ")":
            raise self._error(f"too many arguments in '{context}'")
        self.pos += 1

    def _body(self, context: str) -> tuple[Node, ...]:
        """Parse nodes up to and including the closing ``)``."""
        nodes: list[Node] = []
        while not self._at_close(f"'{context}'"):
            nodes.append(self._node())
        return tuple(nodes)
