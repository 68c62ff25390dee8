"""Recursive-descent parser for pure lambda calculus source. There is no tokenizer: the parser reads the byte buffer
directly and skips whitespace before every read.

```
<expr>        ::= <term> <term>*              ; left-folded into Applications
<term>        ::= <variable> | <abstraction>
<variable>    ::= [a-zA-Z]
<abstraction> ::= "(" <variable> "." <expr> ")"
```

`)` and end of input both end a sequence of juxtaposed terms. parse_term reports them by returning None, which lets
an enclosing abstraction find its own closing parenthesis. Any other unexpected byte aborts the whole parse with a
ParseError: there is no error recovery and no partial result.
"""

from lcnorm.lang.error import ParseError
from lcnorm.pure.term import Abstraction, Application, Variable


class Parser:
    """Parses a single λ-term out of a read-only buffer. The cursor offset is the only state that changes."""
    WHITESPACE = b" \t\n\r"

    def __init__(self, source, trace=None):
        """source can be bytes or str (str is encoded as UTF-8). trace, if given, is called with a message for every
        term the parser starts.
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.buffer = bytes(source)
        self.offset = 0
        self.trace = trace

    def read(self):
        """Skips whitespace and returns the next character without consuming it, or None at end of input."""
        while self.offset < len(self.buffer) and self.buffer[self.offset] in Parser.WHITESPACE:
            self.offset += 1
        if self.offset >= len(self.buffer):
            return None
        return chr(self.buffer[self.offset])

    def advance(self):
        self.offset += 1

    def expect(self, char, what=None):
        """Consumes char or raises a ParseError describing what was expected."""
        found = self.read()
        if found != char:
            self.fail(found, what or f"'{char}'")
        self.advance()

    def parse(self):
        """Parses the whole buffer. The root expression must be followed by end of input."""
        term = self.parse_expr()

        if self.read() is not None:
            term.release()
            raise self.error("unmatched '{1}'", self.read())
        return term

    def parse_expr(self):
        """Parses one or more juxtaposed terms, left-folding them into Applications. Stops without consuming on ')'
        or end of input.
        """
        term = self.parse_term()
        if term is None:
            self.fail(self.read(), "λ-term")

        try:
            argument = self.parse_term()
            while argument is not None:
                term = Application(term, argument)
                argument = self.parse_term()
        except ParseError:
            term.release()
            raise
        return term

    def parse_term(self):
        """Parses a variable or an abstraction. Returns None if there is no further term."""
        char = self.read()
        if char is None or char == ")":
            return None

        if self.trace:
            line_num, col, __ = self.locate(self.offset)
            self.trace(f"consuming '{char}' at {line_num}:{col + 1}")

        if char == "(":
            return self.parse_abstraction()
        elif char.isascii() and char.isalpha():
            return self.parse_variable()
        self.fail(char, "λ-term")

    def parse_abstraction(self):
        """Parses '(' <variable> '.' <expr> ')'."""
        self.expect("(")

        name = self.read()
        if name is None or not (name.isascii() and name.isalpha()):
            self.fail(name, "variable")
        self.advance()

        self.expect(".")
        body = self.parse_expr()

        try:
            self.expect(")")
        except ParseError:
            body.release()
            raise
        return Abstraction(name, body)

    def parse_variable(self):
        """Parses exactly one alphabetic character."""
        char = self.read()
        if char is None or not (char.isascii() and char.isalpha()):
            self.fail(char, "variable")
        self.advance()
        return Variable(char)

    def locate(self, offset):
        """Returns (line number, column, line text) of offset in the buffer."""
        line_start = self.buffer.rfind(b"\n", 0, offset) + 1
        line_end = self.buffer.find(b"\n", offset)
        if line_end == -1:
            line_end = len(self.buffer)

        line = self.buffer[line_start:line_end].decode("utf-8", "replace").rstrip("\r")
        col = len(self.buffer[line_start:offset].decode("utf-8", "replace"))
        return self.buffer.count(b"\n", 0, offset) + 1, col, line

    def error(self, msg, *exprs):
        """Returns a ParseError for msg positioned at the cursor. The offending source line is always the first
        expr.
        """
        line_num, col, line = self.locate(self.offset)
        return ParseError(msg, (line,) + exprs, self.offset, line_num, start=col, end=col + 1)

    def fail(self, found, what):
        if found is None:
            raise self.error("unexpected end of input, expected {1}", what)

        if self.buffer[self.offset] >= 0x80:
            found = self.buffer[self.offset:self.offset + 4].decode("utf-8", "replace")[0]
        raise self.error("expected {1} but found '{2}'", what, found)


def parse(source, trace=None):
    """Parses source (bytes or str) into a single λ-term."""
    return Parser(source, trace).parse()
