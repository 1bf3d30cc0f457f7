"""
argdispatch dispatcher: route command-line tokens to caller-supplied handlers.

What this module provides
- Arity: how many following tokens an option claims (none, required, optional).
- OptionSpec: the (arity, handler) pair stored for every registered name.
- Dispatcher: the registry of options and positional handlers plus the single
  left-to-right scan that invokes them.

Quick start
    from argdispatch import Dispatcher

    verbose = []
    dispatcher = Dispatcher(["-v", "input.txt", "-o", "out.txt"])
    dispatcher.register_option({"-v", "--verbose"}, "none", verbose.append) \\
              .register_option({"-o"}, "required", print) \\
              .register_positional(print)
    dispatcher.run()

Matching rules
- A token is an option only on an exact match against a registered name; there
  is no prefix matching, no '-abc' bundling and no '--name=value' splitting.
- Every other token is positional and consumes the next positional handler in
  registration order; once they are used up, extra tokens are dropped silently.
- An optional-argument option never takes a following token that is itself a
  registered option name.

Faults
- A required-argument option with no following token triggers
  MissingArgumentError (see argdispatch.faults); the scan stops there and the
  handlers already invoked stay invoked.
- Exceptions raised by handlers propagate unchanged and stop the scan.
"""
import functools
import logging
import operator
import os.path
import shlex
import sys
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import NamedTuple

from .faults import FaultCode, MissingArgumentError, getdoc, trigger
from .utils import Unset, coalesce, mirror, ordinal, rename

logger = logging.getLogger(__name__)


class Arity(StrEnum):
    """
    number of following tokens an option claims.

    - NONE: never takes a value; the handler receives "".
    - REQUIRED: always takes the next token; missing it is a fault.
    - OPTIONAL: takes the next token unless there is none or it is a registered
      option name, in which case the handler receives "".
    """
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class OptionSpec(NamedTuple):
    arity: Arity
    handler: Callable[[str], object]


class Dispatcher:
    """
    Option registry, positional-handler list and the scan that drives them.

    Lifecycle
    - registration: register_option()/register_positional(), chainable or used
      as decorators.
    - run: run() scans the whole token sequence once, calling handlers in
      token order. Scan state lives in run() itself, so every call performs a
      fresh, complete scan.

    Runtime options
    - prog: program name shown in rendered faults (default: basename of argv[0]).
    - shell: print faults and exit(1) instead of raising them.
    - fancy: render faults inside a rich Panel.
    - colorful: colorize rendered faults.
    """

    # Fields reflected by __repr__ and __rich_repr__.
    __introspectable__ = (
        "prog",
        "tokens",
        "options",
        "positionals",
        "shell",
        "fancy",
        "colorful",
    )

    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, tokens=Unset, /, *, prog=Unset, shell=False, fancy=False, colorful=True):
        if tokens is Unset:
            tokens = sys.argv[1:]  # Default: current CLI arguments
        elif isinstance(tokens, str):
            tokens = shlex.split(tokens)  # Shell-style splitting for a single string
        elif not isinstance(tokens, Iterable):
            raise TypeError("Dispatcher() argument must be a string or an iterable of strings")

        tokens = tuple(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("Dispatcher() argument must be a string or an iterable of strings")

        prog = coalesce(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argdispatch")
        if not isinstance(prog, str):
            raise TypeError("Dispatcher() 'prog' must be a string")

        for name, value in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(value, bool):
                raise TypeError("Dispatcher() %r must be a boolean" % name)

        self._tokens = tokens
        self._options = {}
        self._positionals = []
        self._prog = prog
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful

    @classmethod
    def from_argv(cls, argv, /, **options):
        """
        Build a dispatcher from a full argv-like sequence.

        argv[0] is the program name and becomes `prog` (unless given in
        options); the remaining items become the token sequence.
        """
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("from_argv() argument must be an iterable of strings")
        argv = list(argv)
        if not argv:
            raise ValueError("from_argv() argument must start with the program name")
        if not isinstance(argv[0], str):
            raise TypeError("from_argv() argument must be an iterable of strings")
        options.setdefault("prog", os.path.basename(argv[0]) or argv[0])
        return cls(argv[1:], **options)

    @property
    def tokens(self):
        """The captured token sequence (program name excluded)."""
        return self._tokens

    @property
    def options(self):
        """Snapshot of the name -> OptionSpec registry."""
        return dict(self._options)

    @property
    def positionals(self):
        """Positional handlers in consumption order."""
        return tuple(self._positionals)

    def register_option(self, names, arity, handler=Unset, /):
        """
        Bind every name in `names` to one (arity, handler) descriptor.

        Parameters
        - names: str | Iterable[str]
          One name or any collection of aliases; an empty collection is a no-op.
        - arity: Arity | "none" | "required" | "optional"
        - handler: Callable[[str], object]
          Called with the option value, or "" when there is none. When omitted,
          a decorator is returned instead.

        Re-registering a name replaces its previous descriptor.

        Returns
        - self, for chaining (or a decorator when handler is omitted).
        """
        if isinstance(names, str):
            names = (names,)
        elif isinstance(names, Iterable):
            names = tuple(names)
        else:
            raise TypeError("register_option() first argument must be a string or an iterable of strings")
        if not all(isinstance(name, str) for name in names):
            raise TypeError("register_option() first argument must be a string or an iterable of strings")

        try:
            arity = Arity(arity)
        except ValueError:
            raise ValueError("register_option() second argument must be one of %s" % (
                ", ".join(repr(member.value) for member in Arity)
            )) from None

        if handler is Unset:
            @rename("register_option")
            def wrapper(handler, /):
                self.register_option(names, arity, handler)
                return handler
            return wrapper

        if not callable(handler):
            raise TypeError("register_option() third argument must be callable")

        spec = OptionSpec(arity, handler)
        for name in names:
            if name in self._options:
                logger.debug("option %r registered again, previous handler replaced", name)
            self._options[name] = spec

        logger.debug("registered %s-argument option(s) %s", arity, ", ".join(map(repr, names)) or "(none)")
        return self

    def register_positional(self, handler=Unset, /):
        """
        Append a positional handler; call order defines consumption order.

        Returns self for chaining, or a decorator when handler is omitted.
        """
        if handler is Unset:
            @rename("register_positional")
            def wrapper(handler, /):
                self.register_positional(handler)
                return handler
            return wrapper

        if not callable(handler):
            raise TypeError("register_positional() argument must be callable")

        self._positionals.append(handler)
        logger.debug("registered positional handler #%d", len(self._positionals))
        return self

    def trigger(self, fault, /, **options):
        trigger(fault, **options, tool=self, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def run(self):
        """
        Scan the token sequence once, invoking handlers left to right.

        Per token at the cursor
        - registered option, arity none: handler(""), cursor += 1.
        - registered option, arity required: handler(next token), cursor += 2;
          with no next token, MissingArgumentError is triggered and the scan stops.
        - registered option, arity optional: handler(next token), cursor += 2,
          when a next token exists and is not a registered option name;
          otherwise handler(""), cursor += 1.
        - anything else: passed to the next unused positional handler, or
          dropped when there is none; cursor += 1.

        Raises
        - MissingArgumentError (outside shell mode).
        - whatever a handler raises, unchanged.
        """
        tokens = self._tokens
        index = 0
        cardinal = 0  # next positional handler

        while index < len(tokens):
            token = tokens[index]

            spec = self._options.get(token)
            if spec is None:
                if cardinal < len(self._positionals):
                    logger.debug("token %r at position %d routed to positional #%d", token, index + 1, cardinal + 1)
                    handler = self._positionals[cardinal]
                    cardinal += 1
                    handler(token)
                else:
                    logger.debug("token %r at position %d dropped, no positional handler left", token, index + 1)
                index += 1
                continue

            match spec.arity:
                case Arity.NONE:
                    logger.debug("option %r at position %d takes no value", token, index + 1)
                    spec.handler("")
                    index += 1
                case Arity.REQUIRED:
                    if index + 1 >= len(tokens):
                        logger.info("option %r at position %d is missing its value", token, index + 1)
                        return self.trigger(MissingArgumentError(
                            "option %r at %s position requires an argument, but none is given" % (
                                token, ordinal(index + 1)
                            ),
                            title="missing argument",
                            code=FaultCode.MISSING_ARGUMENT,
                            option=token,
                            index=index + 1,
                            hint="pass a value right after the option (for example: %s <value>)" % token,
                            docs=getdoc(FaultCode.MISSING_ARGUMENT),
                        ))
                    logger.debug("option %r at position %d takes %r", token, index + 1, tokens[index + 1])
                    spec.handler(tokens[index + 1])
                    index += 2
                case Arity.OPTIONAL:
                    if index + 1 < len(tokens) and tokens[index + 1] not in self._options:
                        logger.debug("option %r at position %d takes %r", token, index + 1, tokens[index + 1])
                        spec.handler(tokens[index + 1])
                        index += 2
                    else:
                        logger.debug("option %r at position %d takes no value", token, index + 1)
                        spec.handler("")
                        index += 1

    def __call__(self):
        return self.run()

    def __contains__(self, name):
        return name in self._options

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "dispatcher(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))


__all__ = (
    "Arity",
    "OptionSpec",
    "Dispatcher",
)
