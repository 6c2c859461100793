"""
slimarg parser: declarations, configuration, the parse engine and its outcomes.

Overview
- Parser
  • registry: declared options (matched by name) and operands (matched by
    position), both in declaration order; lookups are first-match-wins.
  • configuration: prefixes, separator, terminator, help titles and layout,
    exposed as validated read/write attributes (see utils.setting).
  • parse(...): runs one parse attempt and returns an Outcome.
  • format_help()/write_help()/__rich__: help rendering (see slimarg.rendering).
- Outcome
  • Success(values): every stage passed.
  • Failure(values, error): a ParseError stopped the attempt; values bound
    before the error stay visible.
  • Signalled(values, signal): a signal argument fired (help/version style).
- Namespace: the result mapping, keyed by argument destination, with
  attribute access.

Parse stages (strict order, one cursor over the tokens)
1. utility name: the first token, adopted as program name unless `utility` is set.
2. options: terminator, then long option, then short cluster, until none applies.
3. operands: in declaration order; a sink keeps consuming until input ends.
4. trailing terminator.
5. end check: a leftover token is an unexpected argument.
6. required check: options first, then operands.

Per-attempt state (terminated flag, satisfied arguments, result namespace)
lives on a private _Attempt created by every parse() call, so one parser can
parse any number of token sequences.

Quick example:
    >>> parser = Parser()
    >>> verbose = parser.add_flag("verbose", "v", "verbose", "talk more")
    >>> path = parser.add_operand("path", "PATH", "file to read", required=True)
    >>> parser.parse(["tool", "-v", "notes.txt"]).unwrap()
    Namespace(verbose=True, path='notes.txt')
"""
import copy
import logging
import sys
from collections import deque
from collections.abc import Iterable

from rich.text import Text

from .arguments import Argument, Signal, Flag, Option, Operand, Sink
from .faults import *
from .rendering import render
from .utils import *

logger = logging.getLogger(__name__)


def _sanitize_string(name, value):
    if not isinstance(value, str):
        raise TypeError(f"parser {name!r} must be a string")
    return value


def _sanitize_character(name, value):
    """
    Single character or "" (disabled). "\\0" is accepted as "disabled" too.
    """
    if not isinstance(value, str):
        raise TypeError(f"parser {name!r} must be a string")
    elif len(value) > 1:
        raise ValueError(f"parser {name!r} must be a single character")
    return value.replace("\0", "")


def _sanitize_size(name, value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"parser {name!r} must be an integer")
    return max(value, 0)


class Namespace(dict):
    """
    Parse result: destination -> value, readable as attributes too.

        >>> values = Namespace(count=2)
        >>> values.count == values["count"]
        True
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"namespace has no value {name!r}") from None

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError:
            raise AttributeError(f"namespace has no value {name!r}") from None

    def __repr__(self):
        return f"{type(self).__name__}({", ".join("%s=%r" % item for item in self.items())})"


class Outcome:
    """
    Result of one parse attempt.

    - values: Namespace holding defaults plus everything bound before the
      attempt ended.
    - ok: True only for Success.
    - unwrap(): the values, or the carried ParseError/SignalRaised raised.
    """
    ok = False

    def __init__(self, values, /):
        if not isinstance(values, Namespace):
            raise TypeError("outcome values must be a namespace")
        self.values = values

    def unwrap(self):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.values!r})"


class Success(Outcome):
    ok = True

    def unwrap(self):
        return self.values


class Failure(Outcome):
    """
    A parse error stopped the attempt.

    `error` already carries the program name (option "prog"), so trigger()
    renders a complete header.
    """

    def __init__(self, values, error, /):
        super().__init__(values)
        if not isinstance(error, ParseError):
            raise TypeError("failure error must be a parse error")
        self.error = error

    def unwrap(self):
        raise self.error

    def trigger(self, **options):
        """
        Surface the error: raise it, or with shell=True print it and exit(1).
        """
        trigger(self.error, **options)

    def __repr__(self):
        return f"{type(self).__name__}({self.values!r}, {self.error!r})"


class Signalled(Outcome):
    """
    A signal argument fired; `signal` names it by short and long name.
    """

    def __init__(self, values, signal, /):
        super().__init__(values)
        if not isinstance(signal, SignalRaised):
            raise TypeError("signalled outcome requires a signal")
        self.signal = signal

    @property
    def short(self):
        return self.signal.short

    @property
    def long(self):
        return self.signal.long

    def unwrap(self):
        raise self.signal

    def __repr__(self):
        return f"{type(self).__name__}({self.values!r}, {self.signal!r})"


class _Attempt:
    """
    Internal: the state of a single parse() call.

    state
    - tokens: deque of the remaining tokens (the cursor is its left end).
    - terminated: sticky; once the terminator is consumed, no token is ever
      recognized as an option or terminator again.
    - satisfied: arguments matched at least once.
    - values: the result namespace, seeded with every declared default.
    """

    def __init__(self, parser, tokens):
        self.parser = parser
        self.tokens = deque(tokens)
        self.terminated = False
        self.satisfied = set()
        self.values = Namespace()
        for argument in parser.options + parser.operands:
            argument.seed(self.values)

    def run(self):
        self._utility()
        self._options()
        self._operands()
        self._terminator()
        self._end()
        self._required()

    def _fault(self, exception, code, title, message, token, hint):
        return exception(
            message % token,
            code=code,
            title=title,
            token=token,
            hint=hint,
            docs=getdoc(code),
        )

    def _done(self, argument):
        self.satisfied.add(argument)
        argument.done(self.values)

    def _utility(self):
        if not self.tokens:
            return
        program = self.tokens.popleft()
        if not self.parser.utility:
            self.parser._program = program
        logger.debug("utility name %r", program)

    def _options(self):
        while True:
            if self._terminator():
                break
            if self._long() or self._short():
                continue
            break

    def _terminator(self):
        parser = self.parser
        if (
            not self.tokens or
            self.terminated or
            not parser.terminator or
            self.tokens[0] != parser.terminator
        ):
            return False
        self.tokens.popleft()
        self.terminated = True
        logger.debug("terminator %r consumed", parser.terminator)
        return True

    def _predict_long(self):
        prefix = self.parser.long_prefix
        return bool(
            self.tokens and
            not self.terminated and
            prefix and
            len(self.tokens[0]) > len(prefix) and
            self.tokens[0].startswith(prefix)
        )

    def _predict_short(self):
        prefix = self.parser.short_prefix
        return bool(
            self.tokens and
            not self.terminated and
            prefix and
            len(self.tokens[0]) > 1 and
            self.tokens[0][0] == prefix
        )

    def _long(self):
        if not self._predict_long():
            return False

        token = self.tokens.popleft()
        name = token[len(self.parser.long_prefix):]
        value = Unset
        if (separator := self.parser.separator) and separator in name:
            name, value = name.split(separator, 1)

        option = self._lookup(long=name)
        if option.takes_value:
            if value is Unset:
                value = self._next(token)
            option.accept(self.values, value)
        elif value is not Unset:
            raise self._fault(
                UnexpectedValueError,
                FaultCode.UNEXPECTED_VALUE,
                "unexpected value",
                "unexpected option value %r",
                token,
                "this option does not take a value, drop what follows %r" % separator,
            )
        logger.debug("long option %r matched %r", token, option)
        self._done(option)
        return True

    def _short(self):
        if not self._predict_short():
            return False

        token = self.tokens.popleft()
        index = 1
        while index < len(token):
            option = self._lookup(short=token[index])
            index += 1
            if option.takes_value:
                if index < len(token):
                    option.accept(self.values, token[index:])
                    index = len(token)
                else:
                    option.accept(self.values, self._next(token))
            logger.debug("short option %r matched %r", token, option)
            self._done(option)
        return True

    def _next(self, token):
        try:
            return self.tokens.popleft()
        except IndexError:
            raise self._fault(
                MissingValueError,
                FaultCode.MISSING_VALUE,
                "missing value",
                "cannot find value for option %r",
                token,
                "give the value in the next argument",
            ) from None

    def _lookup(self, *, short=Unset, long=Unset):
        name = coalesce(short, coalesce(long, ""))
        if name:
            field = "short" if short is not Unset else "long"
            for option in self.parser.options:
                if getattr(option, field) == name:
                    return option
        raise self._fault(
            UnknownOptionError,
            FaultCode.UNKNOWN_OPTION,
            "unknown option",
            "unknown option name %r",
            name,
            "check the spelling against the options listed in the help",
        )

    def _operands(self):
        for operand in self.parser.operands:
            while True:
                self._terminator()
                if not self.tokens:
                    break
                if self._predict_long() or self._predict_short():
                    raise self._fault(
                        UnexpectedOptionError,
                        FaultCode.UNEXPECTED_OPTION,
                        "unexpected option",
                        "unexpected option %r",
                        self.tokens[0],
                        "put %r before operands that start with an option prefix" % self.parser.terminator
                        if self.parser.terminator else
                        "options must come before operands",
                    )
                token = self.tokens.popleft()
                operand.accept(self.values, token)
                logger.debug("operand %r bound to %r", token, operand.dest)
                self._done(operand)
                if not operand.is_sink:
                    break

    def _end(self):
        if self.tokens:
            raise self._fault(
                UnexpectedArgumentError,
                FaultCode.UNEXPECTED_ARGUMENT,
                "unexpected argument",
                "unexpected argument %r",
                self.tokens[0],
                "remove the extra arguments",
            )

    def _required(self):
        parser = self.parser
        for argument in parser.options + parser.operands:
            if not argument.required or argument in self.satisfied:
                continue
            if argument.short:
                name = parser.short_prefix + argument.short
            elif argument.long:
                name = parser.long_prefix + argument.long
            else:
                name = argument.metavar
            raise self._fault(
                MissingRequiredError,
                FaultCode.MISSING_REQUIRED,
                "missing argument",
                "cannot find required argument %r",
                name,
                "see the usage line for what must be given",
            )


class Parser:
    """
    Minimal command-line parser.

    Declarations
    - add_signal / add_flag / add_option add named arguments (options).
    - add_operand / add_sink add positional arguments (operands).
    - add(argument) registers a pre-built spec.
    Each declaration returns the created spec.

    Configuration (constructor keywords, also assignable afterwards)
    - short_prefix "-", long_prefix "--", separator "=", terminator "--":
      an empty value disables the matching syntax ("\\0" also disables the separator).
    - usage_title "USAGE", options_title "OPTIONS", operands_title "OPERANDS":
      an empty title hides the section.
    - utility: display name; when empty, the first parsed token is used.
    - options_usage / operands_usage: replace the generated usage tokens.
    - default_intro "default: ": label of defaults in help, "" hides them.
    - width 80, indent 2: help layout, negative values count as 0.
    - prolog / epilog: paragraphs around the help sections.
    """

    short_prefix = setting("short_prefix", _sanitize_character)
    long_prefix = setting("long_prefix", _sanitize_string)
    separator = setting("separator", _sanitize_character)
    terminator = setting("terminator", _sanitize_string)
    usage_title = setting("usage_title", _sanitize_string)
    options_title = setting("options_title", _sanitize_string)
    operands_title = setting("operands_title", _sanitize_string)
    utility = setting("utility", _sanitize_string)
    options_usage = setting("options_usage", _sanitize_string)
    operands_usage = setting("operands_usage", _sanitize_string)
    default_intro = setting("default_intro", _sanitize_string)
    width = setting("width", _sanitize_size)
    indent = setting("indent", _sanitize_size)
    prolog = setting("prolog", _sanitize_string)
    epilog = setting("epilog", _sanitize_string)

    def __init__(
            self,
            prolog=Unset,
            epilog=Unset,
            *,
            # ── Syntax ─────────────────────────────────────────────────────────────
            short_prefix=Unset,
            long_prefix=Unset,
            separator=Unset,
            terminator=Unset,
            # ── Help ───────────────────────────────────────────────────────────────
            usage_title=Unset,
            options_title=Unset,
            operands_title=Unset,
            utility=Unset,
            options_usage=Unset,
            operands_usage=Unset,
            default_intro=Unset,
            width=Unset,
            indent=Unset
    ):
        self.prolog = coalesce(prolog, "")
        self.epilog = coalesce(epilog, "")
        self.short_prefix = coalesce(short_prefix, "-")
        self.long_prefix = coalesce(long_prefix, "--")
        self.separator = coalesce(separator, "=")
        self.terminator = coalesce(terminator, "--")
        self.usage_title = coalesce(usage_title, "USAGE")
        self.options_title = coalesce(options_title, "OPTIONS")
        self.operands_title = coalesce(operands_title, "OPERANDS")
        self.utility = coalesce(utility, "")
        self.options_usage = coalesce(options_usage, "")
        self.operands_usage = coalesce(operands_usage, "")
        self.default_intro = coalesce(default_intro, "default: ")
        self.width = coalesce(width, 80)
        self.indent = coalesce(indent, 2)

        self._program = ""
        self._options = []
        self._operands = []

    @property
    def options(self):
        """
        Declared named arguments, in declaration order.
        """
        return tuple(self._options)

    @property
    def operands(self):
        """
        Declared positional arguments, in declaration order.
        """
        return tuple(self._operands)

    @property
    def program(self):
        """
        Name shown in usage and fault headers: `utility`, else the last adopted
        first token, else "".
        """
        return self.utility or self._program

    # ── Declarations ──────────────────────────────────────────────────────────

    def add(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError("add() argument must be an argument spec")
        (self._operands if argument.positional else self._options).append(argument)
        logger.debug("declared %r", argument)
        return argument

    def add_signal(self, short=Unset, long=Unset, descr=""):
        return self.add(Signal(short, long, descr))

    def add_flag(self, dest, /, short=Unset, long=Unset, descr="", *, required=False, default=False):
        return self.add(Flag(dest, short, long, descr, required=required, default=default))

    def add_option(
            self,
            dest,
            /,
            short=Unset,
            long=Unset,
            metavar="",
            descr="",
            *,
            required=False,
            type=str,
            default=None
    ):
        return self.add(Option(dest, short, long, metavar, descr, required=required, type=type, default=default))

    def add_operand(self, dest, /, metavar="", descr="", *, required=False, type=str, default=None):
        return self.add(Operand(dest, metavar, descr, required=required, type=type, default=default))

    def add_sink(self, dest, /, metavar="", descr="", *, required=False, type=str, default=()):
        return self.add(Sink(dest, metavar, descr, required=required, type=type, default=default))

    # ── Parsing ───────────────────────────────────────────────────────────────

    def parse(self, *parameters):
        """
        Parse one token sequence.

        Forms
        - parse(): reads sys.argv.
        - parse(tokens): any iterable of strings; the first one is the program name.
        - parse(count, array): OS-style pair, only array[:count] is read and must hold strings
          (array may be None when count is 0).

        Returns Success, Failure or Signalled; never raises for malformed input.
        """
        match len(parameters):
            case 0:
                tokens = list(sys.argv)
            case 1:
                tokens, = parameters
                if isinstance(tokens, str) or not isinstance(tokens, Iterable):
                    raise TypeError("parse() argument must be an iterable of strings")
                tokens = list(tokens)
            case 2:
                count, array = parameters
                if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                    raise TypeError("parse() count must be a non-negative integer")
                tokens = list(array[:count]) if count else []
            case _:
                raise TypeError("parse takes 0 to 2 arguments but %d were given" % len(parameters))

        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() tokens must be strings")

        attempt = _Attempt(self, tokens)
        try:
            attempt.run()
        except SignalRaised as signal:
            logger.debug("signal %r fired", signal)
            return Signalled(attempt.values, signal)
        except ParseError as error:
            logger.debug("parse failed: %s", error)
            return Failure(attempt.values, copy.replace(error, prog=self.program))
        return Success(attempt.values)

    # ── Help ──────────────────────────────────────────────────────────────────

    def format_help(self):
        return render(self)

    def write_help(self, sink=Unset, /):
        """
        Write the help text with a single sink.write() call (sys.stdout by default).
        """
        coalesce(sink, sys.stdout).write(self.format_help())

    def __rich__(self):
        return Text(self.format_help())

    def __repr__(self):
        return f"{type(self).__name__}(options={len(self._options)}, operands={len(self._operands)})"


__all__ = (
    "Parser",
    "Namespace",
    "Outcome",
    "Success",
    "Failure",
    "Signalled",
)
