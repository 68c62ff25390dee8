"""Session control for lcnorm: reads one source file, parses its λ-term and reduces it to normal form, printing the
term before reduction, at every reduction step, and once it is normal.
"""

import sys

from lcnorm.lang.error import LoadError, ParseError
from lcnorm.pure.parser import Parser
from lcnorm.pure.reducer import NormalOrderReducer


class Session:
    """Governs the normalization of a single source file."""
    RECURSION_LIMIT = 10000  # deep terms recurse in the parser, printer and reducer

    def __init__(self, error_handler, path, avoid_capture=False, recursion_limit=RECURSION_LIMIT):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                        # used for error messages
        self.avoid_capture = avoid_capture      # see NormalOrderReducer
        self.recursion_limit = recursion_limit

        self.buffer = Session.read(path)
        self.term = None
        self.steps = 0

    @staticmethod
    def read(path):
        """Returns the contents of path as an immutable bytes buffer."""
        try:
            with open(path, "rb") as file:
                return file.read()
        except OSError as error:
            raise LoadError("'{}' could not be opened: {}", (path, error.strerror or str(error)))

    def parse(self):
        """Parses self.buffer into self.term. On failure, the offending line is registered for the error message."""
        parser = Parser(self.buffer, trace=self.error_handler.trace if self.error_handler.verbose else None)
        try:
            self.term = parser.parse()
        except ParseError as error:
            self.error_handler.register_line(self.path, error.expr, error.line_num)
            raise

        if self.error_handler.verbose:
            self.error_handler.trace("parsed\n" + self.term.display())
        return self.term

    def run(self):
        """Parses and normalizes the source, printing every intermediate term to stdout. Returns the normal form."""
        if sys.getrecursionlimit() < self.recursion_limit:
            sys.setrecursionlimit(self.recursion_limit)

        self.parse()
        print(self.term.expr)

        reducer = NormalOrderReducer(self.step, self.stuck, self.avoid_capture)
        self.term = reducer.reduce_to_normal_form(self.term)
        print(self.term.expr)

        self.error_handler.trace(f"normal form reached after {self.steps} step(s)")
        return self.term

    def step(self, term):
        self.steps += 1
        print(term.expr)

    def stuck(self, function, argument):
        self.error_handler.trace(f"'{function.expr}' is not an abstraction, dropping argument '{argument.expr}'")
