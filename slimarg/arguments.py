r"""
slimarg argument specifications.

Overview
- Named (matched by a prefixed name)
  • Signal: presence-only, aborts parsing the instant it is matched (help/version style).
  • Flag: presence-only boolean, sets its slot to True.
  • Option[_T]: takes one value, e.g. -o FILE / --output=FILE.
- Positional (matched by declaration order)
  • Operand[_T]: takes at most one value.
  • Sink[_T]: collects every remaining value into a list.

- Shared contract
  • identity: short (one character or ""), long (string or ""), dest (slot name).
  • display: metavar, descr.
  • behaviour: required, takes_value, is_sink.
  • seed(values): put the declared default into a fresh result namespace.
  • accept(values, text): convert one token with the codec and store it.
  • done(values): mark a match (Flag stores True, Signal raises SignalRaised).
  • default_text(): default rendered through the codec, "" when none applies.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties (see utils.mirror).

Metadata (sanitized on construction)
- dest: str, a Python identifier (Flag/Option/Operand/Sink).
- short: Unset | str of exactly one character ("" means absent).
- long: Unset | str ("" means absent).
- metavar/descr: str.
- type: codec or callable, resolved through values.resolve().

Validation highlights
- Named specs must have a short or a long name; positional specs have neither.
- Required-ness never applies to a Signal.

Quick example:
    >>> from slimarg.arguments import Option
    >>> from slimarg.values import int32
    >>> Option("threads", "t", "threads", "N", "worker count", type=int32, default=4)
    option(dest='threads', short='t', long='threads', metavar='N', descr='worker count', required=False, codec=int32, default=4)
"""
import builtins
import functools
import operator
import re

from .faults import SignalRaised
from .utils import *
from .values import resolve


class ArgumentType(type):
    """
    Metaclass that turns spec classes into introspectable, read-only records.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose every name in __introspectable__ as a read-only property
      mirroring the private "_{name}" field.
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate display metadata and the required switch.

    - metavar/descr must be strings (empty strings are fine: they render as nothing).
    - required is normalized to bool.
    """
    for name in ("metavar", "descr"):
        if name not in metadata:
            continue
        if not isinstance(metadata[name], str):
            raise TypeError(f"{cls.__typename__} '{name}' must be a string")

    if "required" in metadata:
        metadata["required"] = bool(metadata["required"])


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate short/long names of option-like specs.

    - short: Unset or a string of exactly one character; "" means absent.
    - long: Unset or a string; "" means absent.
    - at least one of the two must be present.
    - uniqueness across a parser is the caller's responsibility (first match wins).
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif len(short := coalesce(short, "")) > 1:
        raise ValueError(f"{cls.__typename__} 'short' must be a single character")

    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    long = coalesce(long, "")

    if not short and not long:
        raise ValueError(f"{cls.__typename__} must specify a short or a long name")

    metadata["short"] = short
    metadata["long"] = long


def _sanitize_destination(cls, metadata, /):
    """
    Internal: the destination names the slot in the result namespace.
    """
    if not isinstance(dest := metadata["dest"], str):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif not dest.isidentifier():
        raise ValueError(f"{cls.__typename__} 'dest' must be a valid identifier")


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: resolve the codec of value-bearing specs.

    - type: codec or callable, resolved through values.resolve().
    - default: not validated; it may be any value (None renders no default).
    """
    metadata["codec"] = resolve(metadata.pop("type"))


class Argument(metaclass=ArgumentType):
    """
    Base contract shared by every argument kind.

    Kinds override the class-level behaviour switches and the seed/accept/done
    hooks; the parse engine only talks to this contract.
    """

    __introspectable__ = (
        "dest",
        "short",
        "long",
        "metavar",
        "descr",
        "required",
        "codec",
        "default",
    )

    takes_value = False
    is_sink = False
    positional = False

    # absent fields for kinds that do not declare them
    _dest = None
    _short = ""
    _long = ""
    _metavar = ""
    _descr = ""
    _required = False
    _codec = None
    _default = None

    def _build(self, metadata):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def seed(self, values, /):
        """
        Put the declared default into a fresh result namespace.
        """
        if self.dest is not None:
            values[self.dest] = self._default

    def accept(self, values, text, /):
        """
        Convert one token and store it (value-bearing kinds only).
        """
        raise TypeError(f"{type(self).__typename__} does not take a value")

    def done(self, values, /):
        """
        Record that the argument was matched.
        """

    def default_text(self):
        """
        Default value as shown in help; "" when no default applies.
        """
        if self.required or not self.takes_value or self.is_sink or self._default is None:
            return ""
        return self.codec.format(self._default)


class Signal(Argument):
    """
    Named, presence-only argument that aborts parsing when matched.

    The engine raises SignalRaised(short, long) the instant the signal is seen,
    so the rest of the input and the required-argument check are skipped.
    Signals have no destination and are never required.
    """

    __introspectable__ = (
        "short",
        "long",
        "descr",
    )

    def __init__(self, short=Unset, long=Unset, descr=""):
        metadata = {
            "short": short,
            "long": long,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)
        self._build(metadata)

    def done(self, values, /):
        raise SignalRaised(self.short, self.long)


class Flag(Argument):
    """
    Named, presence-only boolean argument.

    Its slot starts at `default` (False unless given) and becomes True when the
    flag appears, alone (-v, --verbose) or inside a short cluster (-vq).
    Repeating a flag is harmless.
    """

    __introspectable__ = (
        "dest",
        "short",
        "long",
        "descr",
        "required",
        "default",
    )

    def __init__(self, dest, /, short=Unset, long=Unset, descr="", *, required=False, default=False):
        metadata = {
            "dest": dest,
            "short": short,
            "long": long,
            "descr": descr,
            "required": required,
            "default": bool(default),
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)
        _sanitize_destination(type(self), metadata)
        self._build(metadata)

    def done(self, values, /):
        values[self.dest] = True


class Option[_T](Argument):
    """
    Named argument taking exactly one value.

    Value forms (all equivalent)
    - next token:    -o FILE, --output FILE
    - merged short:  -oFILE
    - inline long:   --output=FILE (everything after the first separator, even "")

    The last occurrence wins when the option is repeated.
    """

    takes_value = True

    __introspectable__ = (
        "dest",
        "short",
        "long",
        "metavar",
        "descr",
        "required",
        "codec",
        "default",
    )

    def __init__(
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
        metadata = {
            "dest": dest,
            "short": short,
            "long": long,
            "metavar": metavar,
            "descr": descr,
            "required": required,
            "type": type,
            "default": default,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_destination(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata)

    def accept(self, values, text, /):
        values[self.dest] = self.codec.parse(text)


class Operand[_T](Argument):
    """
    Positional argument taking at most one value, matched in declaration order.
    """

    takes_value = True
    positional = True

    __introspectable__ = (
        "dest",
        "metavar",
        "descr",
        "required",
        "codec",
        "default",
    )

    def __init__(self, dest, /, metavar="", descr="", *, required=False, type=str, default=None):
        metadata = {
            "dest": dest,
            "metavar": metavar,
            "descr": descr,
            "required": required,
            "type": type,
            "default": default,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_destination(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata)

    def accept(self, values, text, /):
        values[self.dest] = self.codec.parse(text)


class Sink[_T](Argument):
    """
    Positional argument collecting every remaining value into a list.

    The slot is seeded with a fresh list holding the declared default
    elements; parsed values are appended after them. A sink is usually the
    last operand: it consumes tokens until the input runs out.
    """

    takes_value = True
    is_sink = True
    positional = True

    __introspectable__ = (
        "dest",
        "metavar",
        "descr",
        "required",
        "codec",
        "default",
    )

    def __init__(self, dest, /, metavar="", descr="", *, required=False, type=str, default=()):
        metadata = {
            "dest": dest,
            "metavar": metavar,
            "descr": descr,
            "required": required,
            "type": type,
            "default": tuple(default),
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_destination(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata)

    def seed(self, values, /):
        values[self.dest] = list(self._default)

    def accept(self, values, text, /):
        values[self.dest].append(self.codec.parse(text))


__all__ = (
    # Base contract
    "Argument",

    # Named kinds
    "Signal",
    "Flag",
    "Option",

    # Positional kinds
    "Operand",
    "Sink",
)
