"""
slimarg value codecs: text ⇄ typed value.

Overview
- Codec[_T] is the capability pair every option/operand payload needs:
  • parse(text) -> _T   used while parsing tokens.
  • format(value) -> str used only to print defaults in help.
- Built-in codecs
  • Integer(bits, signed): bounded integers; ready-made int8 … uint64 and the
    unbounded `integer`.
  • Real(): decimal floating point (`real`).
  • String(): identity (`string`).
  • Custom(convert, render=str): any converter supplied by the embedding program.
- resolve(type) picks the codec for a declared `type=`.

Integer syntax
- base 16 whenever the token contains 'x' or 'X' anywhere, base 10 otherwise;
  octal is never inferred ("010" is ten).
- leading whitespace is tolerated, everything after the number is not.
- unsigned codecs reject any '-' in the token before conversion.
- the parsed magnitude is range-checked against the codec's width.

Quick example:
    >>> int32.parse("0x7fffffff")
    2147483647
    >>> uint8.parse("-1")
    Traceback (most recent call last):
    ...
    slimarg.faults.InvalidValueError: cannot parse unsigned integer '-1'
"""
import re

from .faults import FaultCode, InvalidValueError
from .utils import Unset

# ASCII only: str.isspace/\s accept unicode separators a C-style reader would not
_WHITESPACE = " \t\n\v\f\r"

_DECIMAL = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")
_HEXADECIMAL = re.compile(r"[ \t\n\v\f\r]*[+-]?(0[xX])?[0-9a-fA-F]+")
_REAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _invalid(message, text):
    return InvalidValueError(
        message % text,
        title="invalid value",
        code=FaultCode.INVALID_VALUE,
        hint="check the value's spelling and range",
        token=text,
    )


class Codec[_T]:
    """
    Base contract for value codecs.

    Subclasses implement parse() and format(); `name` is a short label used in
    representations and diagnostics.
    """
    name = "value"

    def parse(self, text, /):
        raise NotImplementedError

    def format(self, value, /):
        raise NotImplementedError

    def __repr__(self):
        return self.name


class Integer(Codec[int]):
    """
    Bounded (or unbounded) integer codec.

    parameters
    - bits: int | Unset
      width of the target; Unset means no range check (Python int).
    - signed: bool
      whether negative values are representable. unsigned codecs reject a '-'
      anywhere in the token so a negative input never wraps around.
    """

    def __init__(self, bits=Unset, signed=True):
        if not isinstance(bits, int | Unset) or isinstance(bits, bool):
            raise TypeError("integer 'bits' must be an integer")
        if isinstance(bits, int) and bits < 1:
            raise ValueError("integer 'bits' must be a positive integer")
        self.bits = bits
        self.signed = bool(signed)
        if bits is Unset:
            self.minimum = Unset if self.signed else 0
            self.maximum = Unset
            self.name = "integer" if self.signed else "unsigned"
        elif self.signed:
            self.minimum = -(1 << (bits - 1))
            self.maximum = (1 << (bits - 1)) - 1
            self.name = "int%d" % bits
        else:
            self.minimum = 0
            self.maximum = (1 << bits) - 1
            self.name = "uint%d" % bits

    def parse(self, text, /):
        if not self.signed and "-" in text:
            raise _invalid("cannot parse unsigned integer %r", text)

        hexadecimal = "x" in text or "X" in text
        if not (_HEXADECIMAL if hexadecimal else _DECIMAL).fullmatch(text):
            raise _invalid("cannot parse integer %r", text)

        try:
            value = int(text.lstrip(_WHITESPACE), 16 if hexadecimal else 10)
        except ValueError:
            # digit count past the interpreter's int conversion limit
            raise _invalid("cannot parse integer %r", text) from None
        if self.minimum is not Unset and value < self.minimum:
            raise _invalid("cannot parse integer %r", text)
        if self.maximum is not Unset and value > self.maximum:
            raise _invalid("cannot parse integer %r", text)
        return value

    def format(self, value, /):
        return str(int(value))


class Real(Codec[float]):
    """
    Decimal floating-point codec.

    Surrounding whitespace is tolerated; the remainder must be one decimal
    literal (digits with an optional fraction and exponent). Infinities and
    NaN are not accepted.
    """
    name = "real"

    def parse(self, text, /):
        if not _REAL.fullmatch(stripped := text.strip(_WHITESPACE)):
            raise _invalid("cannot parse value %r", text)
        return float(stripped)

    def format(self, value, /):
        # shortest round-tripping text, "0.0" -> "0"
        text = repr(float(value))
        return text[:-2] if text.endswith(".0") else text


class String(Codec[str]):
    """
    Identity codec: the whole token is the value, untrimmed.
    """
    name = "string"

    def parse(self, text, /):
        return text

    def format(self, value, /):
        return '"%s"' % value


class Custom[_T](Codec[_T]):
    """
    Adapter for embedding-program types.

    parameters
    - convert: Callable[[str], _T]
      receives the token with surrounding whitespace removed; ValueError,
      TypeError or ArithmeticError (decimal.InvalidOperation) mean "not a
      valid value".
    - render: Callable[[_T], str]
      text used when the value is printed as a default (str by default).
    """

    def __init__(self, convert, render=str):
        if not callable(convert):
            raise TypeError("custom codec 'convert' must be callable")
        if not callable(render):
            raise TypeError("custom codec 'render' must be callable")
        self.convert = convert
        self.render = render
        self.name = getattr(convert, "__name__", "custom")

    def parse(self, text, /):
        try:
            return self.convert(text.strip(_WHITESPACE))
        except (ValueError, TypeError, ArithmeticError):
            raise _invalid("cannot parse value %r", text) from None

    def format(self, value, /):
        return str(self.render(value))


int8 = Integer(8)
uint8 = Integer(8, signed=False)
int16 = Integer(16)
uint16 = Integer(16, signed=False)
int32 = Integer(32)
uint32 = Integer(32, signed=False)
int64 = Integer(64)
uint64 = Integer(64, signed=False)
integer = Integer()
real = Real()
string = String()

_builtins = {
    int: integer,
    float: real,
    str: string,
}


def resolve(type, /):
    """
    Return the codec for a declared `type=`.

    - Codec instances are returned unchanged.
    - int, float and str map to `integer`, `real` and `string`.
    - bool is refused: presence-only arguments are declared as flags.
    - any other callable is wrapped in Custom.
    """
    if isinstance(type, Codec):
        return type
    if type is bool:
        raise TypeError("bool values are declared with flags, not with a value codec")
    try:
        return _builtins[type]
    except (KeyError, TypeError):
        pass
    if not callable(type):
        raise TypeError("value 'type' must be a codec or a callable")
    return Custom(type)


__all__ = (
    "Codec",
    "Integer",
    "Real",
    "String",
    "Custom",
    "int8",
    "uint8",
    "int16",
    "uint16",
    "int32",
    "uint32",
    "int64",
    "uint64",
    "integer",
    "real",
    "string",
    "resolve",
)
