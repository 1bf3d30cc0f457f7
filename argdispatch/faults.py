"""
argdispatch faults (errors raised while dispatching) and their rendering.

Scope
- FaultCode: stable numeric identifiers for dispatch faults, so hosts can grep
  logs and remap labels without depending on message copy.
- DispatchException: base type carrying a message plus options, able to render
  itself through rich (__rich__) and to surface itself (__trigger__).
- MissingArgumentError: a required-argument option was given no value.
- trigger(): single entry point used by the dispatcher to surface a fault.
- getdoc(): optional documentation lookup for a code from the host application.

Surfacing
- Outside shell mode the fault is raised to the caller of Dispatcher.run().
- In shell mode the fault is printed to stderr via rich and the process exits
  with status 1.

Failures raised by caller-supplied handlers are never wrapped here; they
propagate out of the scan untouched.

Host hooks (read from __main__)
- __prog__:   program name shown in the fault header.
- __styles__: mapping overriding the rich styles below.
- __codes__:  mapping from FaultCode to a custom label.
- __docs__:   mapping from FaultCode to a short documentation string, shown
              as a footer line under the hint when a fault is rendered.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes raised by the dispatcher (stable identifiers).

    ranges follow the Seralix Fault Codes convention: 111xx are switch faults.
    """
    # --- switch errors (111xx) ---
    MISSING_ARGUMENT = 11117

    def normalize(self):
        """
        return a host-normalized label for this code.

        __main__.__codes__ may map codes to friendlier labels; otherwise the
        numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class DispatchException(Exception):
    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | UnsetType):
            raise TypeError("%s() argument must be a string" % type(self).__name__)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # green arrow
            "hint": "italic #9CE19C",  # green hint text
            "docs": "dim #C8C8D0",  # host documentation footer
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = getattr(main, "__prog__", getattr(self.options.get("tool"), "prog", "argdispatch"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(prog, styler("prog-name")),
            " — ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(coalesce(self.message, ""), styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if self.options.get("fancy"):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingArgumentError(DispatchException):
    """
    a required-argument option was the last token, so it has no value.
    """

    @property
    def option(self):
        """the option name exactly as it appeared in the token sequence."""
        return self.options.get("option")

    @property
    def index(self):
        """1-based position of the option token."""
        return self.options.get("index")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see DispatchException).
    - options are merged into the fault via copy.replace() before triggering.
    - typical options: tool, shell, fancy, colorful, title, code, hint, docs.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    look up __main__.__docs__[code]; None when the host provides nothing.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "DispatchException",
    "MissingArgumentError",
    "FaultCode",
    "trigger",
    "getdoc",
)
