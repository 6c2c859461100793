"""
slimarg help renderer: plain-text usage and glossaries with word wrapping.

Overview
- render(parser) -> str
  • sections in fixed order: prolog, usage, options, operands, epilog.
  • a section with an empty title (or, for glossaries, no arguments) is skipped
    entirely; every rendered section ends with a blank line.
- tokenize(text) -> list[str]
  • words plus one "\\n" token per literal newline; runs of spaces collapse.
- wrap(tokens, initial, hanging, width) -> str
  • greedy line filling with a hanging indent (see below).

Wrapping rules
- a token breaks the line first when it is a "\\n" token, or when appending it
  (with its separating space) would pass `width` AND the line already extends
  past the hanging indent. the second guard places an overlong word alone on
  its own line instead of breaking forever; width 0 therefore puts every token
  after the first on its own line.
- after a break the next token is preceded by `hanging` spaces.

The renderer reads the parser's registry and configuration only; it never
touches parse state, so rendering twice yields identical text.
"""


def tokenize(text, /):
    """
    Split text into words and explicit newline tokens.
    """
    tokens = []
    index = 0
    while index < len(text):
        if text[index] == " ":
            index += 1
        elif text[index] == "\n":
            tokens.append("\n")
            index += 1
        else:
            start = index
            while index < len(text) and text[index] not in " \n":
                index += 1
            tokens.append(text[start:index])
    return tokens


def wrap(tokens, initial, hanging, width, /):
    """
    Lay tokens out on lines of at most `width` columns.

    parameters
    - tokens: Iterable[str]
      words and "\\n" tokens, as produced by tokenize().
    - initial: int
      column the first token starts at (text before it is the caller's).
    - hanging: int
      indentation of every continuation line.
    - width: int
      target line width; a single word longer than the room left is still
      placed, alone, on its own line.
    """
    chunks = []
    position = initial
    spaces = 0
    for token in tokens:
        newline = token == "\n"
        if newline or (position + spaces + len(token) > width and position > hanging):
            chunks.append("\n")
            position = 0
            spaces = hanging
            if newline:
                continue
        chunks.append(" " * spaces + token)
        position += spaces + len(token)
        spaces = 1
    return "".join(chunks)


def _paragraph(text, width):
    if not text:
        return ""
    return wrap(tokenize(text), 0, 0, width) + "\n\n"


def _usage_token(parser, argument):
    if argument.short:
        token = parser.short_prefix + argument.short
    elif argument.long:
        token = parser.long_prefix + argument.long
    else:
        token = ""

    if argument.takes_value:
        token = (token + " " if token else "") + argument.metavar
    if not argument.required:
        token = "[" + token + "]"
    if argument.is_sink:
        token += "..."
    return token


def _usage(parser):
    if not parser.usage_title:
        return ""

    tokens = []
    if parser.program:
        tokens.append(parser.program)

    if parser.options_usage:
        tokens.append(parser.options_usage)
    else:
        tokens.extend(_usage_token(parser, option) for option in parser.options)

    if parser.operands_usage:
        tokens.append(parser.operands_usage)
    else:
        tokens.extend(_usage_token(parser, operand) for operand in parser.operands)

    indent = parser.indent
    return (
        parser.usage_title + "\n" + " " * indent +
        wrap(tokens, indent, indent * 2, parser.width) + "\n\n"
    )


def _term(parser, argument, aligned):
    term = ""
    if aligned:
        term += parser.short_prefix + argument.short if argument.short else "  "

    if argument.long:
        if aligned:
            term += ", " if argument.short else "  "
        term += parser.long_prefix + argument.long

    if argument.takes_value:
        term = (term + " " if term else "") + argument.metavar
    return term


def _glossary(parser, title, arguments):
    if not title or not arguments:
        return ""

    # a two-space filler keeps long names aligned when any sibling has a short name
    aligned = any(argument.short for argument in arguments)

    entries = []
    for argument in arguments:
        description = tokenize(argument.descr)
        if parser.default_intro and (text := argument.default_text()):
            description.append("(" + parser.default_intro + text + ")")
        entries.append((_term(parser, argument, aligned), description))

    indent = parser.indent
    tab = indent + max(len(term) for term, _ in entries) + indent

    lines = [title + "\n"]
    for term, description in entries:
        lines.append(
            " " * indent + term + " " * (tab - indent - len(term)) +
            wrap(description, tab, tab, parser.width) + "\n"
        )
    lines.append("\n")
    return "".join(lines)


def render(parser, /):
    """
    Render the complete help text of a parser.
    """
    return "".join((
        _paragraph(parser.prolog, parser.width),
        _usage(parser),
        _glossary(parser, parser.options_title, parser.options),
        _glossary(parser, parser.operands_title, parser.operands),
        _paragraph(parser.epilog, parser.width),
    ))


__all__ = (
    "tokenize",
    "wrap",
    "render",
)
