"""Pure lambda calculus term graph.

```
<λ-term> ::= <var>                    ; "variable"
                                      ; - exactly one alphabetic character
           | "(" <var> "." <λ-term> ")" ; "abstraction"
           | <λ-term> <λ-term>        ; "application"
                                      ; - associating by left: abcd = (((a b) c) d)
```

Terms form a directed acyclic graph rather than a tree: beta reduction puts the same argument node under every
occurrence of the bound variable instead of copying it. Ownership is tracked by reference counting. Every owning
reference (a parent slot, or a handle held by the caller) accounts for one unit of Term.refs, and a node may only be
mutated in place while its count is 1.

Printing is the syntactic inverse of parsing: no whitespace and no parentheses besides the ones around abstractions,
so `(x.x)y z` prints as `(x.x)yz`.
"""

from abc import ABC, abstractmethod

from lcnorm.lang.error import GenericException


class Term(ABC):
    """Superclass of every λ-term node. Holds the reference count and the shared retain/release discipline."""

    def __init__(self):
        self.refs = 1
        self._cls = type(self).__name__

    @property
    @abstractmethod
    def nodes(self):
        """Owned child nodes, in printing order."""

    @property
    @abstractmethod
    def expr(self):
        """Concrete syntax of this term."""

    @property
    @abstractmethod
    def free(self):
        """Set of names occurring free in this term."""

    @property
    def names(self):
        """Set of every name occurring in this term, free or bound."""
        names = set()
        for node in self.nodes:
            names |= node.names
        return names

    @property
    def released(self):
        return self.refs == 0

    def _check_live(self, action):
        if self.refs <= 0:
            raise GenericException("cannot {} released term '{}'", (action, self.expr), internal=True)

    def retain(self):
        """Registers a new owning reference to self. Returns self so that it can be stored directly."""
        self._check_live("retain")
        self.refs += 1
        return self

    def release(self):
        """Drops one owning reference. The last one releases the whole subtree."""
        self._check_live("release")
        self.refs -= 1
        if self.refs == 0:
            for node in self.nodes:
                node.release()

    def release_node(self):
        """Drops self without touching its children, whose ownership has already been handed to someone else. Only
        valid while the caller holds the single reference to self.
        """
        self._check_live("release")
        if self.refs != 1:
            raise GenericException("cannot release shared term '{}' without its children", self.expr, internal=True)
        self.refs = 0

    def display(self, indents=0):
        """Recursively displays term graph with readable format. Shared nodes are shown once per parent.

        Format:
        <Term>(expr='<expr>', refs=<refs>, nodes=[
            <Term>(expr='<expr>', refs=<refs>, nodes=[
                ...
                <Term>(expr='<expr>', refs=<refs>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{self._cls}(expr='{self.expr}', refs={self.refs}"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr


class Variable(Term):
    """Variable in lambda calculus. Binding is purely structural: it is bound by the closest enclosing Abstraction
    with the same name.
    """

    def __init__(self, name):
        super().__init__()
        assert isinstance(name, str) and len(name) == 1 and name.isascii() and name.isalpha(), \
            f"'{name}' is not a single alphabetic character"
        self.name = name

    @property
    def nodes(self):
        return []

    @property
    def expr(self):
        return self.name

    @property
    def free(self):
        return {self.name}

    @property
    def names(self):
        return {self.name}

    def __eq__(self, other):
        return isinstance(other, Variable) and self.name == other.name


class Abstraction(Term):
    """Abstraction: (bound.body). Takes ownership of body."""

    def __init__(self, bound, body):
        super().__init__()
        assert isinstance(bound, str) and len(bound) == 1 and bound.isascii() and bound.isalpha(), \
            f"'{bound}' is not a single alphabetic character"
        self.bound = bound
        self.body = body

    @property
    def nodes(self):
        return [self.body]

    @property
    def expr(self):
        return f"({self.bound}.{self.body.expr})"

    @property
    def free(self):
        return self.body.free - {self.bound}

    @property
    def names(self):
        return self.body.names | {self.bound}

    def unwrap(self):
        """Consumes one reference to self and returns an owned reference to the body. If self is not shared, only the
        wrapper is released and the body changes hands. Otherwise the body gets its own reference.
        """
        if self.refs == 1:
            body = self.body
            self.release_node()
        else:
            body = self.body.retain()
            self.release()
        return body

    def __eq__(self, other):
        return isinstance(other, Abstraction) and self.bound == other.bound and self.body == other.body


class Application(Term):
    """Application of function to argument. Takes ownership of both."""

    def __init__(self, function, argument):
        super().__init__()
        self.function = function
        self.argument = argument

    @property
    def nodes(self):
        return [self.function, self.argument]

    @property
    def expr(self):
        return self.function.expr + self.argument.expr

    @property
    def free(self):
        return self.function.free | self.argument.free

    def unpack(self):
        """Same as Abstraction.unwrap, but returns owned references to both function and argument."""
        if self.refs == 1:
            function, argument = self.function, self.argument
            self.release_node()
        else:
            function, argument = self.function.retain(), self.argument.retain()
            self.release()
        return function, argument

    def __eq__(self, other):
        return isinstance(other, Application) and self.function == other.function and self.argument == other.argument
