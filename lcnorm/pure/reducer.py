"""Normal-order (leftmost-outermost) beta reduction over the shared term graph.

Ownership rules, which every method below follows:
- substitute consumes its term reference and only borrows the replacement,
- beta_reduce consumes both the function and the argument,
- apply_leftmost and reduce_to_normal_form consume the term they are given,
- every method returns an owned reference.

A node whose reference count is 1 belongs to the caller alone and is updated in place. A shared node is never
mutated: the path leading to the change is rebuilt and the old node loses one reference.

Substitution is deliberately naive. `(x.(y.x)) y` reduces to `(y.y)`, capturing the free y. Passing
avoid_capture=True renames the binder first instead, which gives `(a.y)`.

There is no step limit: a term without a normal form keeps the driver busy forever. Callers that need a bound can
raise from on_step.

Source: http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR
"""

from string import ascii_letters

from lcnorm.lang.error import GenericException
from lcnorm.pure.term import Abstraction, Application, Variable


class NormalOrderReducer:
    """Implements normal-order beta reduction of a term graph.

    on_step(term) is called with every Application the driver is about to contract. on_stuck(function, argument) is
    called when the function position of an application is not an Abstraction; the argument is then dropped.
    """

    def __init__(self, on_step=None, on_stuck=None, avoid_capture=False):
        self.on_step = on_step
        self.on_stuck = on_stuck
        self.avoid_capture = avoid_capture

    def substitute(self, term, target, replacement):
        """Returns term with every free occurrence of the variable target replaced by a new reference to replacement.
        The replacement is never copied.
        """
        if isinstance(term, Variable):
            if term.name == target:
                term.release()
                return replacement.retain()
            return term

        elif isinstance(term, Abstraction):
            if term.bound == target:
                return term  # target is shadowed

            if self.avoid_capture and term.bound in replacement.free and target in term.body.free:
                term = self.rename(term, replacement, target)

            if term.refs == 1:
                term.body = self.substitute(term.body, target, replacement)
                return term

            body = self.substitute(term.body.retain(), target, replacement)
            if body is term.body:
                body.release()
                return term
            term.release()
            return Abstraction(term.bound, body)

        if term.refs == 1:
            term.function = self.substitute(term.function, target, replacement)
            term.argument = self.substitute(term.argument, target, replacement)
            return term

        function = self.substitute(term.function.retain(), target, replacement)
        argument = self.substitute(term.argument.retain(), target, replacement)
        if function is term.function and argument is term.argument:
            function.release()
            argument.release()
            return term
        term.release()
        return Application(function, argument)

    def rename(self, abstraction, replacement, target):
        """Alpha-converts abstraction to a binder that cannot capture anything free in replacement. Consumes
        abstraction and returns a new, unshared one.
        """
        taken = abstraction.body.names | replacement.free | {target}
        for name in ascii_letters:
            if name not in taken:
                break
        else:
            raise GenericException("no fresh variable left to rename '{}'", abstraction.expr, internal=True)

        fresh = Variable(name)
        bound = abstraction.bound
        body = self.substitute(abstraction.unwrap(), bound, fresh)
        fresh.release()
        return Abstraction(name, body)

    def beta_reduce(self, function, argument):
        """Contracts the redex (function argument). A function that isn't an Abstraction is stuck: the argument is
        released and function is returned as is.
        """
        if not isinstance(function, Abstraction):
            if self.on_stuck:
                self.on_stuck(function, argument)
            argument.release()
            return function

        bound = function.bound
        result = self.substitute(function.unwrap(), bound, argument)
        argument.release()
        return result

    def apply_leftmost(self, application):
        """Performs the beta step at the head of application. Function positions that are Applications themselves are
        resolved first, so that the head is a Variable or an Abstraction by the time this level is contracted.
        """
        function, argument = application.unpack()
        if isinstance(function, Application):
            function = self.apply_leftmost(function)
        return self.beta_reduce(function, argument)

    def reduce_to_normal_form(self, term):
        """Reduces term to normal form in normal order. Does not return if term has no normal form."""
        while isinstance(term, Application):
            if self.on_step:
                self.on_step(term)
            term = self.apply_leftmost(term)

        if isinstance(term, Abstraction):
            if term.refs == 1:
                term.body = self.reduce_to_normal_form(term.body)
                return term

            body = self.reduce_to_normal_form(term.body.retain())
            if body is term.body:
                body.release()
                return term
            term.release()
            return Abstraction(term.bound, body)

        return term
