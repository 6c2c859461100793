"""
slimarg faults (parse errors, signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing parse
  error. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ParseError: base type that carries message + options and knows how to render
  itself through rich in a short, lowercased and actionable way.
- SignalRaised: control-flow outcome of a signal argument (help/version style);
  deliberately not a ParseError so callers can tell the two apart.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parse engine raises these faults at first detection; Parser.parse turns
  them into Failure/Signalled outcomes.
- In non-shell mode, trigger() re-raises; in shell mode, faults are rendered via
  rich on stderr and the process exits with status 1.
"""
import copy
import logging
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - options (2110x)
      • UNKNOWN_OPTION, MISSING_VALUE, UNEXPECTED_VALUE
    - operands (2120x)
      • UNEXPECTED_OPTION, UNEXPECTED_ARGUMENT
    - completeness (2130x)
      • MISSING_REQUIRED
    - values (2140x)
      • INVALID_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- option errors (21xxx) ---
    UNKNOWN_OPTION      = 21101
    MISSING_VALUE       = 21102
    UNEXPECTED_VALUE    = 21103

    # --- operand errors (21xxx) ---
    UNEXPECTED_OPTION   = 21201
    UNEXPECTED_ARGUMENT = 21202

    # --- completeness errors (21xxx) ---
    MISSING_REQUIRED    = 21301

    # --- value errors (21xxx) ---
    INVALID_VALUE       = 21401

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseError(Exception):
    """
    any malformed input detected while parsing one token sequence.

    options (all optional, merged through copy.replace / trigger)
    - code: FaultCode identifying the error family.
    - title: short, lowercased headline used by the renderer.
    - hint: one actionable sentence.
    - token: the offending token or name, when there is one.
    - prog: program name shown in the rendered header.
    - shell, fancy, colorful: rendering switches consumed by __trigger__/__rich__.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(self.options.get("prog") or "slimarg", "prog-name"),
            " — ",
            text(code.normalize() if code else "", "code"),
            " | ",
            text(self.options.get("title", "parse error").title(), "error-title"),
            " ]"
        )
        message = text(str(self), "error-message")

        renders = [message]
        if self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.options["hint"], "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(ParseError): ...
class MissingValueError(ParseError): ...
class UnexpectedValueError(ParseError): ...
class UnexpectedOptionError(ParseError): ...
class UnexpectedArgumentError(ParseError): ...
class MissingRequiredError(ParseError): ...
class InvalidValueError(ParseError): ...


class SignalRaised(Exception):
    """
    raised the instant a signal argument is matched.

    not an error: it tells the caller which signal fired (e.g. help or version)
    so they can branch on it. it bypasses every remaining parse stage, the
    required-argument check included.

    attributes
    - short: str  the signal's short name, "" when it has none.
    - long: str   the signal's long name, "" when it has none.
    """

    def __init__(self, short="", long=""):
        super().__init__(short, long)
        self.short = short
        self.long = long

    def __repr__(self):
        return f"{type(self).__name__}(short={self.short!r}, long={self.long!r})"

    def __eq__(self, other):
        if not isinstance(other, SignalRaised):
            return NotImplemented
        return (self.short, self.long) == (other.short, other.long)

    def __hash__(self):
        return hash((type(self), self.short, self.long))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console and the process exits;
      otherwise, the fault is raised.

    typical options
    - prog, shell, fancy, colorful, title, code, hint, token.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    logger.debug("triggering %s (shell=%s)", type(fault).__name__, options.get("shell", False))
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "UnknownOptionError",
    "MissingValueError",
    "UnexpectedValueError",
    "UnexpectedOptionError",
    "UnexpectedArgumentError",
    "MissingRequiredError",
    "InvalidValueError",
    "SignalRaised",
    "trigger",
    "getdoc",
)
