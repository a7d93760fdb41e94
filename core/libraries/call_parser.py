"""Parser for library call syntax such as ``name(arg1=val1, "quoted val2")``.

Rules:
- Text before the first open bracket is the library name.
- Arguments are read from after the first open bracket up to the last close
  bracket; brackets are not depth-balanced.
- An argument is ``name=value`` or a bare positional ``value``.
- Values may be double-quoted; inside quotes a backslash escapes the next
  character and terminators are taken literally.
- Non-whitespace after a closing quote is the only hard error.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from core.libraries.models import ArgParseResult, Brackets, ParsedCall, Variable
from core.utils.errors import CallParseError

_ARGUMENT_SEPARATOR = ","
_QUOTE = '"'
_ESCAPE = "\\"


def parse_library_argument(
    text: str, terminators: Collection[str], begin: int
) -> ArgParseResult | None:
    """Scan one argument of ``text`` starting at ``begin``.

    Args:
        text: Argument list string, without the enclosing brackets.
        terminators: Characters that end an unquoted argument.
        begin: Index to start scanning from.

    Returns:
        The parsed argument and the index just past its terminator, or None
        when no argument is left.

    Raises:
        CallParseError: non-whitespace follows a value closed by a quote.
    """

    eq = text.find("=", begin)
    name = text[begin:eq].strip() if eq >= 0 else ""

    arg_began = False
    arg_ended = False
    quote_opened = False
    escape = False
    chars: list[str] = []

    index = eq + 1 if eq >= 0 else begin
    while index < len(text):
        char = text[index]

        if escape:
            chars.append(char)
            escape = False
        elif char == _ESCAPE:
            if quote_opened:
                escape = True
            else:
                chars.append(char)
        elif char == _QUOTE:
            if arg_began:
                quote_opened = False
                arg_ended = True
            else:
                quote_opened = True
                arg_began = True
        elif char in terminators:
            if not quote_opened:
                break
            chars.append(char)
        elif char.isspace():
            if quote_opened or (arg_began and not arg_ended):
                chars.append(char)
        else:
            if arg_ended:
                raise CallParseError(char=char, position=index, source=text)
            arg_began = True
            chars.append(char)

        index += 1

    value = "".join(chars).strip()
    if eq < 0 and not value:
        return None

    next_index = index if index == len(text) else index + 1
    return ArgParseResult(Variable(name, value), next_index)


def parse_call(text: str, brackets: Brackets) -> ParsedCall:
    """Split ``text`` into a name and its arguments in source order."""

    open_index = text.find(brackets.open)
    if open_index < 0:
        return ParsedCall(text.strip(), ())

    name = text[:open_index].strip()
    close_index = text.rfind(brackets.close)
    if close_index <= open_index:
        close_index = len(text)
    arguments_text = text[open_index + 1 : close_index]

    terminators = frozenset({brackets.close, _ARGUMENT_SEPARATOR})
    arguments: list[Variable] = []
    result = parse_library_argument(arguments_text, terminators, 0)
    while result is not None:
        arguments.append(result.variable)
        result = parse_library_argument(arguments_text, terminators, result.end)

    return ParsedCall(name, tuple(arguments))


def parse_library_name(text: str) -> ParsedCall:
    """Parse ``name(args)`` with round brackets."""

    return parse_call(text, Brackets.ROUND)


def format_call(
    name: str, arguments: Iterable[Variable], brackets: Brackets = Brackets.ROUND
) -> str:
    """Serialize a call so that ``parse_call`` reads it back unchanged.

    Positional values containing ``=`` cannot be represented: the parser
    always treats the first ``=`` as a name separator.
    """

    rendered = [_format_argument(argument, brackets) for argument in arguments]
    return f"{name}{brackets.open}{', '.join(rendered)}{brackets.close}"


def _format_argument(argument: Variable, brackets: Brackets) -> str:
    value = _format_value(argument.value, brackets)
    if argument.name:
        return f"{argument.name}={value}"
    return value


def _format_value(value: str, brackets: Brackets) -> str:
    special = {_QUOTE, _ESCAPE, _ARGUMENT_SEPARATOR, brackets.open, brackets.close}
    if value and not any(char in special or char.isspace() for char in value):
        return value
    escaped = value.replace(_ESCAPE, _ESCAPE * 2).replace(_QUOTE, _ESCAPE + _QUOTE)
    return f"{_QUOTE}{escaped}{_QUOTE}"
